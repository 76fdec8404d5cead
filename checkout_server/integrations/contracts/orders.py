"""
Order contracts: request models and platform payload builders for the
Orders v2 API.

The builders are pure functions: they take already-validated inputs and
return the JSON body the platform expects. Clients (real or mock) only
send what these functions produce.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from .interfaces import Address, ContactInfo, OrderIntent, PaymentSourceType, ShippingPreference
from .shipping import SHIPPING_TIERS, money_value, to_money

DEFAULT_ORDER_AMOUNT = "100.00"
DEFAULT_BILLING_AGREEMENT_AMOUNT = "10.00"
DEFAULT_RECURRING_AMOUNT = "100.00"
DEFAULT_VAULT_ORDER_AMOUNT = "10.00"
DEFAULT_PAYEE_ORDER_AMOUNT = "10.00"

VAULT_ON_SUCCESS: Dict[str, str] = {
    "store_in_vault": "ON_SUCCESS",
    "usage_type": "MERCHANT",
    "customer_type": "CONSUMER",
}

# Order in which a vaulted token's payment_source is inspected.
_VAULT_SOURCE_PRIORITY = (
    PaymentSourceType.APPLE_PAY,
    PaymentSourceType.GOOGLE_PAY,
    PaymentSourceType.CARD,
    PaymentSourceType.PAYPAL,
)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

@dataclass
class CheckoutOrderRequest:
    payment_source: Optional[PaymentSourceType] = None
    total_amount: Optional[str] = None
    shipping_info: Optional[ContactInfo] = None
    billing_info: Optional[ContactInfo] = None
    customer_id: Optional[str] = None
    vault: bool = False


@dataclass
class ExperienceUrls:
    return_url: str
    cancel_url: str


def parse_contact_info(data: Optional[Dict[str, Any]]) -> Optional[ContactInfo]:
    """Build ContactInfo from the browser's camelCase shippingInfo/billingInfo."""
    if not data:
        return None
    address = data.get("address") or {}
    return ContactInfo(
        first_name=data.get("firstName", ""),
        last_name=data.get("lastName", ""),
        address=Address(
            address_line_1=address.get("addressLine1", ""),
            admin_area_2=address.get("adminArea2", ""),
            admin_area_1=address.get("adminArea1", ""),
            postal_code=address.get("postalCode", ""),
            country_code=address.get("countryCode", "US"),
        ),
    )


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def _address_payload(address: Address) -> Dict[str, str]:
    return {
        "address_line_1": address.address_line_1,
        "admin_area_2": address.admin_area_2,
        "admin_area_1": address.admin_area_1,
        "postal_code": address.postal_code,
        "country_code": address.country_code,
    }


class InvalidAmount(ValueError):
    pass


def parse_amount(value: Any) -> Decimal:
    """Browser-supplied amount as cents; rejects non-numeric, non-finite and negative values."""
    try:
        amount = to_money(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmount(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(f"Invalid amount: {value!r}")
    return amount


def _amount(value: Any) -> Dict[str, str]:
    return money_value(parse_amount(value))


def _purchase_unit(amount: Any, payee_merchant_id: Optional[str] = None) -> Dict[str, Any]:
    unit: Dict[str, Any] = {"amount": _amount(amount)}
    if payee_merchant_id:
        unit["payee"] = {"merchant_id": payee_merchant_id}
    return unit


def _shipping_options(selected_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": tier.id,
            "amount": money_value(tier.amount),
            "type": "SHIPPING",
            "label": tier.label,
            "selected": tier.id == selected_id,
        }
        for tier in SHIPPING_TIERS
    ]


def _attach_customer(source: Dict[str, Any], customer_id: Optional[str]) -> None:
    if customer_id:
        source.setdefault("attributes", {})["customer"] = {"id": customer_id}


def build_payment_source(request: CheckoutOrderRequest, urls: ExperienceUrls) -> Dict[str, Any]:
    shipping_preference = (
        ShippingPreference.SET_PROVIDED_ADDRESS if request.shipping_info else ShippingPreference.GET_FROM_FILE
    )
    kind = request.payment_source
    if kind is None:
        return {}

    if kind is PaymentSourceType.PAYPAL:
        source: Dict[str, Any] = {
            "experience_context": {
                "return_url": urls.return_url,
                "cancel_url": urls.cancel_url,
                "user_action": "PAY_NOW",
                "shipping_preference": shipping_preference.value,
                "brand_name": "Your Store Name",
                "locale": "en-US",
                "landing_page": "LOGIN",
            }
        }
    elif kind is PaymentSourceType.VENMO:
        source = {
            "experience_context": {
                "return_url": urls.return_url,
                "cancel_url": urls.cancel_url,
                "shipping_preference": shipping_preference.value,
            }
        }
    elif kind is PaymentSourceType.CARD:
        # Cards are always vaulted on success.
        source = {"attributes": {"vault": dict(VAULT_ON_SUCCESS)}}
        contact = request.billing_info or request.shipping_info
        if contact:
            source["name"] = contact.full_name
            source["billing_address"] = _address_payload(contact.address)
        _attach_customer(source, request.customer_id)
        return {kind.value: source}
    else:
        source = {}

    if request.vault:
        source.setdefault("attributes", {})["vault"] = dict(VAULT_ON_SUCCESS)
    _attach_customer(source, request.customer_id)
    return {kind.value: source}


# ---------------------------------------------------------------------------
# Order payloads
# ---------------------------------------------------------------------------

def build_default_order(urls: ExperienceUrls, amount: str = DEFAULT_ORDER_AMOUNT) -> Dict[str, Any]:
    return {
        "intent": OrderIntent.CAPTURE.value,
        "purchase_units": [{"amount": _amount(amount)}],
        "payment_source": {
            "paypal": {
                "attributes": {"vault": dict(VAULT_ON_SUCCESS)},
                "experience_context": {
                    "return_url": urls.return_url,
                    "cancel_url": urls.cancel_url,
                    "shipping_preference": ShippingPreference.NO_SHIPPING.value,
                },
            }
        },
    }


def build_checkout_order(request: CheckoutOrderRequest, urls: ExperienceUrls) -> Dict[str, Any]:
    purchase_unit: Dict[str, Any] = {"amount": _amount(request.total_amount or DEFAULT_ORDER_AMOUNT)}
    if request.shipping_info:
        purchase_unit["shipping"] = {
            "name": {"full_name": request.shipping_info.full_name},
            "address": _address_payload(request.shipping_info.address),
        }

    # Checkout page orders are always authorized first, captured later.
    return {
        "intent": OrderIntent.AUTHORIZE.value,
        "purchase_units": [purchase_unit],
        "payment_source": build_payment_source(request, urls),
    }


def build_upstream_order(
    total_amount: Any,
    urls: ExperienceUrls,
    callback_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Order carrying an item/shipping breakdown and both shipping options.

    With ``callback_url`` the platform calls back server-side on shipping
    address changes; without it the buyer's browser handles the change.
    """
    item_total = parse_amount(total_amount)
    experience_context: Dict[str, Any] = {
        "user_action": "PAY_NOW",
        "shipping_preference": ShippingPreference.GET_FROM_FILE.value,
        "return_url": urls.return_url,
        "cancel_url": urls.cancel_url,
    }
    if callback_url:
        experience_context["app_switch_preference"] = {"launch_paypal_app": True}
        experience_context["order_update_callback_config"] = {
            "callback_events": ["SHIPPING_ADDRESS"],
            "callback_url": callback_url,
        }

    return {
        "intent": OrderIntent.CAPTURE.value,
        "payment_source": {"paypal": {"experience_context": experience_context}},
        "purchase_units": [
            {
                "amount": {
                    **money_value(item_total),
                    "breakdown": {
                        "item_total": money_value(item_total),
                        "shipping": money_value(SHIPPING_TIERS[0].amount),
                    },
                },
                "shipping": {"options": _shipping_options(SHIPPING_TIERS[0].id)},
            }
        ],
    }


def build_billing_agreement_order(billing_agreement_id: str, amount: Optional[str] = None) -> Dict[str, Any]:
    return {
        "intent": OrderIntent.CAPTURE.value,
        "purchase_units": [{"amount": _amount(amount or DEFAULT_BILLING_AGREEMENT_AMOUNT)}],
        "payment_source": {"token": {"id": billing_agreement_id, "type": "BILLING_AGREEMENT"}},
    }


def build_recurring_order(payment_token_id: str, amount: str = DEFAULT_RECURRING_AMOUNT) -> Dict[str, Any]:
    return {
        "intent": OrderIntent.CAPTURE.value,
        "purchase_units": [{"amount": _amount(amount)}],
        "payment_source": {
            "token": {"id": payment_token_id, "type": "PAYMENT_METHOD_TOKEN"},
            "stored_credential": {
                "payment_initiator": "MERCHANT",
                "payment_type": "RECURRING",
                "usage": "SUBSEQUENT",
            },
        },
    }


def detect_vault_source(token_details: Dict[str, Any]) -> PaymentSourceType:
    payment_source = token_details.get("payment_source") or {}
    for kind in _VAULT_SOURCE_PRIORITY:
        if payment_source.get(kind.value):
            return kind
    return PaymentSourceType.PAYPAL


def build_vault_id_order(
    vault_id: str,
    source_type: PaymentSourceType,
    amount: Optional[str] = None,
    intent: OrderIntent = OrderIntent.CAPTURE,
    payee_merchant_id: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "intent": intent.value,
        "purchase_units": [_purchase_unit(amount or DEFAULT_VAULT_ORDER_AMOUNT, payee_merchant_id)],
        "payment_source": {source_type.value: {"vault_id": vault_id}},
    }


# ---------------------------------------------------------------------------
# Payee routing
# ---------------------------------------------------------------------------

def build_payee_order(
    payee_merchant_id: str,
    urls: ExperienceUrls,
    amount: Optional[str] = None,
) -> Dict[str, Any]:
    """One-time PayPal order whose funds go to another merchant (purchase_units[].payee)."""
    return {
        "intent": OrderIntent.CAPTURE.value,
        "purchase_units": [_purchase_unit(amount or DEFAULT_PAYEE_ORDER_AMOUNT, payee_merchant_id)],
        "payment_source": {
            "paypal": {
                "experience_context": {
                    "return_url": urls.return_url,
                    "cancel_url": urls.cancel_url,
                    "user_action": "CONTINUE",
                    "shipping_preference": ShippingPreference.NO_SHIPPING.value,
                }
            }
        },
    }


def build_payment_token_order(
    payment_token_id: str,
    amount: Optional[str] = None,
    payee_merchant_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Order paid with a Vault v3 token referenced as PAYMENT_METHOD_TOKEN."""
    return {
        "intent": OrderIntent.CAPTURE.value,
        "purchase_units": [_purchase_unit(amount or DEFAULT_PAYEE_ORDER_AMOUNT, payee_merchant_id)],
        "payment_source": {"token": {"id": payment_token_id, "type": "PAYMENT_METHOD_TOKEN"}},
    }


def first_authorization_id(order: Dict[str, Any]) -> Optional[str]:
    for unit in order.get("purchase_units") or []:
        authorizations = (unit.get("payments") or {}).get("authorizations") or []
        if authorizations:
            return authorizations[0].get("id")
    return None


__all__ = [
    "CheckoutOrderRequest",
    "ExperienceUrls",
    "InvalidAmount",
    "build_billing_agreement_order",
    "build_checkout_order",
    "build_default_order",
    "build_payee_order",
    "build_payment_source",
    "build_payment_token_order",
    "build_recurring_order",
    "build_upstream_order",
    "build_vault_id_order",
    "detect_vault_source",
    "first_authorization_id",
    "parse_amount",
    "parse_contact_info",
]
