"""
Vault contracts: setup/payment token payloads for the Vault v3 API and the
helpers used to summarise a customer's stored payment methods.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from .interfaces import PaymentSourceType

VAULTABLE_SOURCES = {PaymentSourceType.PAYPAL, PaymentSourceType.CARD}

_RETURN_URL = "https://example.com/returnUrl"
_CANCEL_URL = "https://example.com/cancelUrl"


class UnsupportedPaymentSource(ValueError):
    pass


def _vaultable(payment_source: Optional[str]) -> PaymentSourceType:
    try:
        kind = PaymentSourceType((payment_source or "").strip().lower())
    except ValueError as exc:
        raise UnsupportedPaymentSource(f"Unsupported payment source for vaulting: {payment_source!r}") from exc
    if kind not in VAULTABLE_SOURCES:
        raise UnsupportedPaymentSource(f"Unsupported payment source for vaulting: {payment_source!r}")
    return kind


def _card_setup() -> Dict[str, Any]:
    return {
        "verification_method": "SCA_WHEN_REQUIRED",
        "experience_context": {"shipping_preference": "NO_SHIPPING"},
    }


def _paypal_experience_context() -> Dict[str, Any]:
    return {
        "shipping_preference": "NO_SHIPPING",
        "payment_method_preference": "IMMEDIATE_PAYMENT_REQUIRED",
        "brand_name": "EXAMPLE INC",
        "locale": "en-US",
        "return_url": _RETURN_URL,
        "cancel_url": _CANCEL_URL,
    }


def build_setup_token(payment_source: Optional[str]) -> Dict[str, Any]:
    """Save-without-purchase setup token for PayPal or card."""
    kind = _vaultable(payment_source)
    if kind is PaymentSourceType.CARD:
        source = _card_setup()
    else:
        source = {
            "description": "Description for PayPal to be shown to PayPal payer",
            "usage_pattern": "IMMEDIATE",
            "usage_type": "MERCHANT",
            "customer_type": "CONSUMER",
            "experience_context": _paypal_experience_context(),
        }
    return {"payment_source": {kind.value: source}}


def build_recurring_setup_token(payment_source: Optional[str], start_date: Optional[date] = None) -> Dict[str, Any]:
    """Setup token whose PayPal variant carries a monthly auto-reload billing plan."""
    kind = _vaultable(payment_source)
    if kind is PaymentSourceType.CARD:
        return {"payment_source": {kind.value: _card_setup()}}

    start = (start_date or date.today()).isoformat()
    price = {"value": "10", "currency_code": "USD"}
    source = {
        "usage_type": "MERCHANT",
        "usage_pattern": "UNSCHEDULED_POSTPAID",
        "billing_plan": {
            "billing_cycles": [
                {
                    "tenure_type": "REGULAR",
                    "pricing_scheme": {"pricing_model": "AUTO_RELOAD", "price": dict(price)},
                    "frequency": {"interval_unit": "MONTH", "interval_count": "1"},
                    "total_cycles": "1",
                    "start_date": start,
                }
            ],
            "one_time_charges": {"product_price": dict(price), "total_amount": dict(price)},
            "product": {"description": "Monthly Membership", "quantity": "1"},
            "name": "Recurring Monthly Membership Plan",
        },
        "experience_context": _paypal_experience_context(),
    }
    return {"payment_source": {kind.value: source}}


def build_payment_token_from_setup(setup_token_id: str) -> Dict[str, Any]:
    return {"payment_source": {"token": {"id": setup_token_id, "type": "SETUP_TOKEN"}}}


def build_payment_token_from_customer(customer_id: str) -> Dict[str, Any]:
    return {"payment_source": {"customer": {"id": customer_id, "type": "CUSTOMER_ID"}}}


# ---------------------------------------------------------------------------
# Customer summaries
# ---------------------------------------------------------------------------

@dataclass
class CustomerTokens:
    customer_id: str
    payment_tokens: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.customer_id, "payment_methods": self.payment_tokens}
        if self.error:
            out["error"] = self.error
        return out


def summarize_customers(customers: List[CustomerTokens]) -> Dict[str, Any]:
    """Counts over the customers that actually have stored methods."""
    with_tokens = [c for c in customers if c.payment_tokens]
    tokens = [t for c in with_tokens for t in c.payment_tokens]
    return {
        "totalCustomers": len(with_tokens),
        "totalPaymentMethods": len(tokens),
        "cardCount": sum(1 for t in tokens if (t.get("payment_source") or {}).get("card")),
        "paypalCount": sum(1 for t in tokens if (t.get("payment_source") or {}).get("paypal")),
    }
