from datetime import date

import pytest

from checkout_server.integrations.contracts.subscriptions import build_monthly_plan, build_subscription_product
from checkout_server.integrations.contracts.vault import (
    CustomerTokens,
    UnsupportedPaymentSource,
    build_payment_token_from_customer,
    build_payment_token_from_setup,
    build_recurring_setup_token,
    build_setup_token,
    summarize_customers,
)


def test_setup_token_for_card_and_paypal():
    card = build_setup_token("card")["payment_source"]["card"]
    assert card["verification_method"] == "SCA_WHEN_REQUIRED"

    paypal = build_setup_token("PayPal")["payment_source"]["paypal"]
    assert paypal["usage_pattern"] == "IMMEDIATE"
    assert paypal["experience_context"]["shipping_preference"] == "NO_SHIPPING"


@pytest.mark.parametrize("source", ["venmo", "bitcoin", None, ""])
def test_setup_token_rejects_other_sources(source):
    with pytest.raises(UnsupportedPaymentSource):
        build_setup_token(source)


def test_recurring_setup_token_carries_billing_plan():
    payload = build_recurring_setup_token("paypal", start_date=date(2026, 1, 15))
    paypal = payload["payment_source"]["paypal"]
    assert paypal["usage_pattern"] == "UNSCHEDULED_POSTPAID"
    cycle = paypal["billing_plan"]["billing_cycles"][0]
    assert cycle["start_date"] == "2026-01-15"
    assert cycle["pricing_scheme"]["pricing_model"] == "AUTO_RELOAD"


def test_payment_token_payloads():
    assert build_payment_token_from_setup("ST-1") == {"payment_source": {"token": {"id": "ST-1", "type": "SETUP_TOKEN"}}}
    assert build_payment_token_from_customer("C-1")["payment_source"]["customer"]["id"] == "C-1"


def test_summarize_customers_counts_only_customers_with_tokens():
    customers = [
        CustomerTokens("A", payment_tokens=[{"payment_source": {"card": {"brand": "VISA"}}}, {"payment_source": {"paypal": {"email_address": "a@example.com"}}}]),
        CustomerTokens("B", payment_tokens=[{"payment_source": {"card": {"brand": "AMEX"}}}]),
        CustomerTokens("C", error="boom"),
    ]
    assert summarize_customers(customers) == {
        "totalCustomers": 2,
        "totalPaymentMethods": 3,
        "cardCount": 2,
        "paypalCount": 1,
    }
    assert customers[2].to_dict() == {"id": "C", "payment_methods": [], "error": "boom"}


def test_subscription_plan_references_product():
    product = build_subscription_product()
    assert product["type"] == "SERVICE"
    plan = build_monthly_plan("PROD-1")
    assert plan["product_id"] == "PROD-1"
    assert plan["billing_cycles"][0]["pricing_scheme"]["fixed_price"]["value"] == "3.99"
