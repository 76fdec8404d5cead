"""
Shipping recalculation for the platform's server-side shipping callback.

The platform owns the checkout session; each callback carries everything
needed, so this module is a pure function of its input: no storage, no
outbound calls.
"""

from __future__ import annotations

import logging
from decimal import InvalidOperation
from typing import Any, Dict, Union

from checkout_server.integrations.contracts.shipping import (
    SHIPPING_TIERS,
    ShippingAddress,
    ShippingOption,
    ShippingRecalcRequest,
    ShippingRecalcResponse,
    ShippingRejection,
    ShippingSelection,
    to_money,
)

logger = logging.getLogger(__name__)


class ShippingCallbackError(ValueError):
    """Malformed callback payload."""


def parse_callback(payload: Dict[str, Any]) -> ShippingRecalcRequest:
    if not isinstance(payload, dict):
        raise ShippingCallbackError("Callback body must be a JSON object")

    purchase_units = payload.get("purchase_units")
    if not purchase_units:
        raise ShippingCallbackError("purchase_units is required")

    try:
        raw_item_total = purchase_units[0]["amount"]["breakdown"]["item_total"]["value"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ShippingCallbackError("purchase_units[0].amount.breakdown.item_total.value is required") from exc

    try:
        item_total = to_money(raw_item_total)
    except (InvalidOperation, ValueError) as exc:
        raise ShippingCallbackError(f"Invalid item_total value: {raw_item_total!r}") from exc
    if not item_total.is_finite() or item_total < 0:
        raise ShippingCallbackError(f"Invalid item_total value: {raw_item_total!r}")

    shipping_option = payload.get("shipping_option") or {}
    return ShippingRecalcRequest(
        order_id=payload.get("id"),
        shipping_address=ShippingAddress.from_payload(payload.get("shipping_address")),
        selection=ShippingSelection.from_option_id(shipping_option.get("id")),
        item_total=item_total,
    )


def recalculate(request: ShippingRecalcRequest) -> ShippingRecalcResponse:
    chosen = request.selection.option
    shipping_amount = chosen.amount
    try:
        total = to_money(request.item_total + shipping_amount)
    except InvalidOperation as exc:
        raise ShippingCallbackError(f"Invalid item_total value: {request.item_total}") from exc

    return ShippingRecalcResponse(
        order_id=request.order_id,
        item_total=request.item_total,
        shipping_amount=shipping_amount,
        total=total,
        shipping_options=[
            ShippingOption(id=tier.id, label=tier.label, amount=tier.amount, selected=tier.id == chosen.id)
            for tier in SHIPPING_TIERS
        ],
    )


def handle_shipping_callback(payload: Dict[str, Any]) -> Union[ShippingRecalcResponse, ShippingRejection]:
    """
    Process one shipping-change callback.

    The country check runs before anything else is parsed: a non-US (or
    missing) address is always rejected regardless of the rest of the body.
    Any other problem with the payload raises ShippingCallbackError.
    """
    body = payload if isinstance(payload, dict) else {}
    address = ShippingAddress.from_payload(body.get("shipping_address"))
    if not address.is_supported:
        logger.info("Rejecting shipping callback for country=%s", address.country_code)
        return ShippingRejection()

    request = parse_callback(payload)
    logger.debug(
        "Shipping callback order=%s selection=%s item_total=%s",
        request.order_id, request.selection.value, request.item_total,
    )
    response = recalculate(request)
    logger.info(
        "Shipping recalculated order=%s shipping=%s total=%s",
        response.order_id, response.shipping_amount, response.total,
    )
    return response
