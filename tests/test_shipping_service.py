from decimal import Decimal

import pytest

from checkout_server.integrations.contracts.shipping import (
    ShippingRecalcResponse,
    ShippingRejection,
    ShippingSelection,
    to_money,
)
from checkout_server.integrations.policy.shipping_service import (
    ShippingCallbackError,
    handle_shipping_callback,
    parse_callback,
)


def _payload(country="US", option_id=None, item_total="100.00"):
    payload = {
        "id": "ORDER-1",
        "shipping_address": {
            "country_code": country,
            "admin_area_1": "CA",
            "admin_area_2": "San Jose",
            "postal_code": "95131",
        },
        "purchase_units": [
            {"amount": {"currency_code": "USD", "value": item_total, "breakdown": {"item_total": {"currency_code": "USD", "value": item_total}}}}
        ],
    }
    if option_id is not None:
        payload["shipping_option"] = {"id": option_id}
    return payload


def test_first_callback_defaults_to_express():
    result = handle_shipping_callback(_payload())
    assert isinstance(result, ShippingRecalcResponse)
    body = result.to_dict()
    unit = body["purchase_units"][0]
    assert body["id"] == "ORDER-1"
    assert unit["reference_id"] == "default"
    assert unit["amount"] == {
        "currency_code": "USD",
        "value": "110.00",
        "breakdown": {
            "item_total": {"currency_code": "USD", "value": "100.00"},
            "shipping": {"currency_code": "USD", "value": "10.00"},
        },
    }
    selected = [o["id"] for o in unit["shipping_options"] if o["selected"]]
    assert selected == ["2"]


def test_free_shipping_selected():
    body = handle_shipping_callback(_payload(option_id="1", item_total="42.50")).to_dict()
    unit = body["purchase_units"][0]
    assert unit["amount"]["value"] == "42.50"
    assert unit["amount"]["breakdown"]["shipping"]["value"] == "0.00"
    assert [o["selected"] for o in unit["shipping_options"]] == [True, False]
    assert all(o["type"] == "SHIPPING" for o in unit["shipping_options"])
    assert [o["label"] for o in unit["shipping_options"]] == ["Free Shipping", "Express Shipping"]


def test_unknown_option_id_is_charged_as_express():
    body = handle_shipping_callback(_payload(option_id="99")).to_dict()
    unit = body["purchase_units"][0]
    assert unit["amount"]["value"] == "110.00"
    assert [o["id"] for o in unit["shipping_options"] if o["selected"]] == ["2"]


def test_non_us_country_is_rejected():
    result = handle_shipping_callback(_payload(country="CA"))
    assert isinstance(result, ShippingRejection)
    assert result.to_dict() == {"name": "UNPROCESSABLE_ENTITY", "details": [{"issue": "COUNTRY_ERROR"}]}


def test_country_check_runs_before_item_total_parsing():
    payload = _payload(country="GB")
    payload["purchase_units"] = []
    assert isinstance(handle_shipping_callback(payload), ShippingRejection)


def test_missing_address_is_rejected():
    payload = _payload()
    del payload["shipping_address"]
    assert isinstance(handle_shipping_callback(payload), ShippingRejection)


def test_missing_item_total_raises():
    payload = _payload()
    payload["purchase_units"][0]["amount"].pop("breakdown")
    with pytest.raises(ShippingCallbackError):
        handle_shipping_callback(payload)


@pytest.mark.parametrize("bad", ["abc", "-1.00", "NaN"])
def test_invalid_item_total_raises(bad):
    with pytest.raises(ShippingCallbackError):
        parse_callback(_payload(item_total=bad))


def test_totals_round_half_up_to_cents():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(0.1) == Decimal("0.10")
    body = handle_shipping_callback(_payload(option_id="2", item_total="19.995")).to_dict()
    unit = body["purchase_units"][0]
    assert unit["amount"]["breakdown"]["item_total"]["value"] == "20.00"
    assert unit["amount"]["value"] == "30.00"
    assert [o["selected"] for o in unit["shipping_options"]] == [False, True]


def test_identical_input_gives_identical_output():
    first = handle_shipping_callback(_payload(option_id="1")).to_dict()
    second = handle_shipping_callback(_payload(option_id="1")).to_dict()
    assert first == second


def test_selection_resolution():
    assert ShippingSelection.from_option_id(None) is ShippingSelection.NO_OPTION_SELECTED
    assert ShippingSelection.from_option_id("1") is ShippingSelection.FREE
    assert ShippingSelection.from_option_id("2") is ShippingSelection.EXPRESS
    assert ShippingSelection.NO_OPTION_SELECTED.option.id == "2"


@pytest.mark.parametrize("zero", ["-0", "-0.00", -0.0, "-0.001"])
def test_negative_zero_item_total_is_serialized_unsigned(zero):
    assert str(to_money(zero)) == "0.00"
    body = handle_shipping_callback(_payload(option_id="1", item_total=zero)).to_dict()
    amount = body["purchase_units"][0]["amount"]
    assert amount["value"] == "0.00"
    assert amount["breakdown"]["item_total"]["value"] == "0.00"


def test_item_total_too_large_to_add_shipping_raises():
    with pytest.raises(ShippingCallbackError, match="Invalid item_total value"):
        handle_shipping_callback(_payload(option_id="2", item_total="99999999999999999999999999.99"))
