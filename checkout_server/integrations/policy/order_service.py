"""
Order Service

Builds order payloads from browser requests and forwards them to the
platform. Also covers the multi-call flows: fetching a batch of orders,
capturing an order's authorization, ordering against a vaulted token,
billing agreements and orders whose funds are routed to another merchant
(payee).
"""

import logging
from typing import Any, Dict, List, Optional, Union

from checkout_server.integrations.contracts.interfaces import CheckoutContext, OrderIntent, PaymentSourceType, PlatformClient
from checkout_server.integrations.contracts.orders import (
    CheckoutOrderRequest,
    ExperienceUrls,
    build_billing_agreement_order,
    build_checkout_order,
    build_default_order,
    build_payee_order,
    build_payment_token_order,
    build_recurring_order,
    build_upstream_order,
    build_vault_id_order,
    detect_vault_source,
    first_authorization_id,
)
from checkout_server.integrations.policy.response_wrappers import PlatformAPIError
from checkout_server.utils.config_loader import PlatformConfig

logger = logging.getLogger(__name__)

BILLING_AGREEMENT_DESCRIPTION = "Billing Agreement"


class OrderService:
    def __init__(self, client: PlatformClient, config: PlatformConfig):
        self.client = client
        self.config = config
        self.urls = ExperienceUrls(
            return_url=config.experience.return_url,
            cancel_url=config.experience.cancel_url,
        )

    async def create_default_order(self, context: CheckoutContext) -> Dict[str, Any]:
        return await self.client.create_order(build_default_order(self.urls), request_id=context.request_id)

    async def create_checkout_order(self, request: CheckoutOrderRequest, context: CheckoutContext) -> Dict[str, Any]:
        if request.customer_id is None and context.customer_id:
            request.customer_id = context.customer_id
        if request.customer_id:
            logger.info("Customer ID provided for returning user: %s", request.customer_id)

        payload = build_checkout_order(request, self.urls)
        logger.debug("Checkout order payload: %s", payload)
        return await self.client.create_order(payload, request_id=context.request_id)

    async def create_upstream_order(
        self,
        total_amount: Any,
        context: CheckoutContext,
        server_callbacks: bool = False,
    ) -> Dict[str, Any]:
        callback_url = self.config.shipping_callback_url if server_callbacks else None
        payload = build_upstream_order(total_amount, self.urls, callback_url=callback_url)
        return await self.client.create_order(payload, request_id=context.request_id)

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self.client.get_order(order_id)

    async def get_orders_by_ids(self, order_ids: Optional[List[Union[str, Dict[str, Any]]]]) -> Dict[str, Any]:
        """
        Fetch each order individually. A failing order is reported inline
        and does not stop the rest; results come back newest first.
        """
        if not order_ids or not isinstance(order_ids, list):
            return {
                "orders": [],
                "message": "No order IDs provided. Please provide an array of order IDs to fetch.",
            }

        orders: List[Dict[str, Any]] = []
        for entry in order_ids:
            order_id = entry.get("id") if isinstance(entry, dict) else entry
            timestamp = entry.get("timestamp") if isinstance(entry, dict) else None
            try:
                order = await self.client.get_order(str(order_id))
                orders.append({**order, "client_order_timestamp": timestamp})
            except PlatformAPIError as exc:
                logger.error("Error fetching order %s: %s", order_id, exc.message)
                orders.append({
                    "id": order_id,
                    "error": f"Failed to fetch order details: {exc.message}",
                    "client_order_timestamp": timestamp,
                })

        orders.reverse()
        return {
            "orders": orders,
            "totalCount": len(orders),
            "message": None if orders else "No valid orders found.",
        }

    async def capture_order(self, order_id: str) -> Dict[str, Any]:
        return await self.client.capture_order(order_id)

    async def authorize_order(self, order_id: str) -> Dict[str, Any]:
        return await self.client.authorize_order(order_id)

    async def capture_authorized_order(self, order_id: str) -> Dict[str, Any]:
        order = await self.client.get_order(order_id)
        authorization_id = first_authorization_id(order)
        if not authorization_id:
            raise PlatformAPIError(422, f"Order {order_id} has no authorization to capture")
        logger.info("Capturing authorization %s for order %s", authorization_id, order_id)
        return await self.client.capture_authorization(authorization_id)

    async def create_recurring_order(self, payment_token_id: str, context: CheckoutContext) -> Dict[str, Any]:
        logger.info("Creating recurring order with payment token %s", payment_token_id)
        return await self.client.create_order(build_recurring_order(payment_token_id), request_id=context.request_id)

    async def create_order_with_vault_id(
        self,
        vault_id: str,
        amount: Optional[str],
        context: CheckoutContext,
    ) -> Dict[str, Any]:
        """Create and capture an order against a vaulted token of any source type."""
        try:
            token_details = await self.client.get_payment_token(vault_id)
        except PlatformAPIError as exc:
            logger.error("Error fetching token details for %s: %s", vault_id, exc.message)
            raise PlatformAPIError(
                exc.status_code, f"Unable to retrieve payment token details for vault_id: {vault_id}"
            ) from exc

        source_type = detect_vault_source(token_details)
        payload = build_vault_id_order(vault_id, source_type, amount, intent=OrderIntent.CAPTURE)
        result = await self.client.create_order(payload, request_id=context.request_id)
        logger.info("Order created with vault_id: %s, status: %s", result.get("id"), result.get("status"))
        return result

    # ------------------------------------------------------------------
    # Billing agreements
    # ------------------------------------------------------------------

    def billing_agreement_token_payload(self) -> Dict[str, Any]:
        base = self.config.base_url.rstrip("/")
        return {
            "description": BILLING_AGREEMENT_DESCRIPTION,
            "payer": {"payment_method": "PAYPAL"},
            "plan": {
                "type": "MERCHANT_INITIATED_BILLING",
                "merchant_preferences": {
                    "return_url": f"{base}/ba/return",
                    "cancel_url": f"{base}/ba/cancel",
                    "notify_url": f"{base}/api/webhooks",
                    "accepted_pymt_type": "INSTANT",
                    "skip_shipping_address": True,
                    "immutable_shipping_address": False,
                },
            },
        }

    async def create_billing_agreement_token(self) -> Dict[str, Any]:
        return await self.client.create_billing_agreement_token(self.billing_agreement_token_payload())

    async def create_billing_agreement(self, token_id: str) -> Dict[str, Any]:
        return await self.client.create_billing_agreement(token_id)

    async def capture_with_billing_agreement(
        self,
        billing_agreement_id: str,
        amount: Optional[str],
        context: CheckoutContext,
    ) -> Dict[str, Any]:
        payload = build_billing_agreement_order(billing_agreement_id, amount)
        return await self.client.create_order(payload, request_id=context.request_id)

    # ------------------------------------------------------------------
    # Payee routing
    # ------------------------------------------------------------------

    async def create_payee_order(
        self,
        payee_merchant_id: str,
        amount: Optional[str],
        context: CheckoutContext,
    ) -> Dict[str, Any]:
        """One-time order paying out to another merchant; the buyer approves it in the browser."""
        logger.info("Creating one-time PayPal order with payee: %s, amount: %s", payee_merchant_id, amount)
        order = await self.client.create_order(
            build_payee_order(payee_merchant_id, self.urls, amount), request_id=context.request_id
        )
        return {
            "success": True,
            "orderId": order.get("id"),
            "status": order.get("status"),
            "payeeMerchantId": payee_merchant_id,
            "amount": amount,
            "approvalUrl": _approval_url(order),
            "orderCreation": order,
        }

    async def capture_payee_order(self, order_id: str, payee_merchant_id: Optional[str]) -> Dict[str, Any]:
        result = await self.client.capture_order(order_id)
        capture = _first_capture(result) or {}
        logger.info("Captured payee order %s for merchant %s", order_id, payee_merchant_id)
        return {
            "success": True,
            "orderId": order_id,
            "payeeMerchantId": payee_merchant_id,
            "capture": {
                "success": True,
                "result": result,
                "captureId": capture.get("id"),
                "amount": (capture.get("amount") or {}).get("value"),
            },
        }

    async def create_vaulted_payee_order(
        self,
        vaulted_token: str,
        payee_merchant_id: str,
        amount: Optional[str],
        context: CheckoutContext,
        payment_method_token: bool = False,
    ) -> Dict[str, Any]:
        """
        Order against a vaulted token with funds routed to another merchant.

        ``payment_method_token`` references the token in the Vault v3
        ``token`` form instead of ``paypal.vault_id``. Orders the platform
        completes on creation are reported as captured; approved ones are
        captured here and a capture failure is reported inline.
        """
        if payment_method_token:
            payload = build_payment_token_order(vaulted_token, amount, payee_merchant_id)
        else:
            payload = build_vault_id_order(
                vaulted_token, PaymentSourceType.PAYPAL, amount, payee_merchant_id=payee_merchant_id
            )
        order = await self.client.create_order(payload, request_id=context.request_id)
        logger.info("Vaulted payee order created: %s, status: %s", order.get("id"), order.get("status"))

        capture_result: Optional[Dict[str, Any]] = None
        capture_error: Optional[Dict[str, Any]] = None
        if order.get("status") == "COMPLETED":
            capture_result = order
        else:
            try:
                capture_result = await self.client.capture_order(order["id"])
            except PlatformAPIError as exc:
                logger.error("Capture failed for vaulted payee order %s: %s", order.get("id"), exc.message)
                capture_error = {"message": exc.message, "status": exc.status_code}

        return {
            "success": True,
            "orderId": order.get("id"),
            "status": order.get("status"),
            "payeeMerchantId": payee_merchant_id,
            "amount": amount,
            "orderCreation": order,
            "capture": {"success": capture_result is not None, "result": capture_result, "error": capture_error},
        }


def _approval_url(order: Dict[str, Any]) -> Optional[str]:
    for link in order.get("links") or []:
        if link.get("rel") in ("approve", "payer-action"):
            return link.get("href")
    return None


def _first_capture(order: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for unit in order.get("purchase_units") or []:
        captures = (unit.get("payments") or {}).get("captures") or []
        if captures:
            return captures[0]
    return None
