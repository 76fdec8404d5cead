"""
Shipping contracts.

Request/response structures for the shipping-change callback the payment
platform sends mid-checkout, plus the fixed shipping table the merchant
offers.

Money is always Decimal, quantized to cents with ROUND_HALF_UP, and
serialized as a two-decimal string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

CURRENCY_CODE = "USD"
SUPPORTED_COUNTRY = "US"

_CENT = Decimal("0.01")


def _cents(amount: Decimal) -> Decimal:
    result = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    # "-0.00" is not a valid platform money string
    return result.copy_abs() if result.is_zero() else result


def to_money(value: Any) -> Decimal:
    """Parse a platform amount ("49.99", 49.99, Decimal) into cents."""
    if isinstance(value, float):
        value = repr(value)
    return _cents(Decimal(str(value)))


def money_value(amount: Decimal) -> Dict[str, str]:
    return {"currency_code": CURRENCY_CODE, "value": str(_cents(amount))}


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class ShippingSelection(str, Enum):
    NO_OPTION_SELECTED = "NO_OPTION_SELECTED"
    FREE = "FREE"
    EXPRESS = "EXPRESS"

    @classmethod
    def from_option_id(cls, option_id: Optional[str]) -> "ShippingSelection":
        if option_id is None:
            return cls.NO_OPTION_SELECTED
        if str(option_id) == FREE_SHIPPING.id:
            return cls.FREE
        return cls.EXPRESS

    @property
    def option(self) -> "ShippingTier":
        # First callback of a session has no selection yet: charge express.
        if self is ShippingSelection.FREE:
            return FREE_SHIPPING
        return EXPRESS_SHIPPING


@dataclass(frozen=True)
class ShippingTier:
    id: str
    label: str
    amount: Decimal


FREE_SHIPPING = ShippingTier(id="1", label="Free Shipping", amount=Decimal("0.00"))
EXPRESS_SHIPPING = ShippingTier(id="2", label="Express Shipping", amount=Decimal("10.00"))

SHIPPING_TIERS: List[ShippingTier] = [FREE_SHIPPING, EXPRESS_SHIPPING]


# ---------------------------------------------------------------------------
# Request / response
# ---------------------------------------------------------------------------

@dataclass
class ShippingAddress:
    country_code: Optional[str]
    admin_area_1: Optional[str] = None
    admin_area_2: Optional[str] = None
    postal_code: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Optional[Dict[str, Any]]) -> "ShippingAddress":
        data = data if isinstance(data, dict) else {}
        return cls(
            country_code=data.get("country_code"),
            admin_area_1=data.get("admin_area_1"),
            admin_area_2=data.get("admin_area_2"),
            postal_code=data.get("postal_code"),
        )

    @property
    def is_supported(self) -> bool:
        return self.country_code == SUPPORTED_COUNTRY


@dataclass
class ShippingRecalcRequest:
    order_id: Optional[str]
    shipping_address: ShippingAddress
    selection: ShippingSelection
    item_total: Decimal


@dataclass
class ShippingOption:
    id: str
    label: str
    amount: Decimal
    selected: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": money_value(self.amount),
            "type": "SHIPPING",
            "label": self.label,
            "selected": self.selected,
        }


@dataclass
class ShippingRecalcResponse:
    order_id: Optional[str]
    item_total: Decimal
    shipping_amount: Decimal
    total: Decimal
    shipping_options: List[ShippingOption] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.order_id,
            "purchase_units": [
                {
                    "reference_id": "default",
                    "amount": {
                        **money_value(self.total),
                        "breakdown": {
                            "item_total": money_value(self.item_total),
                            "shipping": money_value(self.shipping_amount),
                        },
                    },
                    "shipping_options": [option.to_dict() for option in self.shipping_options],
                }
            ],
        }


@dataclass
class ShippingRejection:
    issue: str = "COUNTRY_ERROR"
    name: str = "UNPROCESSABLE_ENTITY"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "details": [{"issue": self.issue}]}
