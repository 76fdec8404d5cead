"""
Webhook Service

Verifies incoming platform webhooks (one call to the platform's verify
endpoint) and dispatches verified events to per-type handlers.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from checkout_server.integrations.contracts.interfaces import PlatformClient, WebhookEventType, WebhookHeaders
from checkout_server.integrations.contracts.webhooks import WebhookResult, build_verification_payload
from checkout_server.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    PlatformAPIError,
    normalize_verification_response,
)

logger = logging.getLogger(__name__)

EventHandler = Callable[[Dict[str, Any]], Awaitable[WebhookResult]]


async def handle_payment_token_created(event: Dict[str, Any]) -> WebhookResult:
    try:
        resource = event["resource"]
        token_id = resource["id"]
        customer_id = (resource.get("customer") or {}).get("id")
        payment_source = resource["payment_source"]
    except (KeyError, TypeError) as exc:
        logger.error("Malformed payment-token event: %s", exc)
        return WebhookResult(success=False, error=f"Malformed event resource: missing {exc}")

    logger.info("New payment token created: %s", token_id)
    if customer_id:
        logger.info("Associated with customer: %s", customer_id)

    card = payment_source.get("card")
    if card:
        logger.info(
            "Card details: %s ending in %s, expires %s",
            card.get("brand"), card.get("last_digits"), card.get("expiry"),
        )
    elif payment_source.get("paypal"):
        logger.info("PayPal payment source created")

    return WebhookResult(success=True, message="Payment token created event processed successfully")


async def handle_credit_card_created(event: Dict[str, Any]) -> WebhookResult:
    resource = event.get("resource")
    if not isinstance(resource, dict) or not resource.get("id"):
        logger.error("Malformed credit-card event: %s", resource)
        return WebhookResult(success=False, error="Malformed event resource: missing id")

    logger.info("New credit card created: %s", resource["id"])
    if resource.get("customer_id"):
        logger.info("Associated with customer: %s", resource["customer_id"])
    if resource.get("number"):
        logger.info("Card number (last 4): %s", str(resource["number"])[-4:])
    if resource.get("type"):
        logger.info("Card type: %s", resource["type"])
    if resource.get("expire_month") and resource.get("expire_year"):
        logger.info("Expires: %s/%s", resource["expire_month"], resource["expire_year"])

    return WebhookResult(success=True, message="Credit card created event processed successfully")


class WebhookService:
    def __init__(self, client: PlatformClient, webhook_id: Optional[str] = None):
        self.client = client
        self.webhook_id = webhook_id
        self.handlers: Dict[str, EventHandler] = {
            WebhookEventType.PAYMENT_TOKEN_CREATED.value: handle_payment_token_created,
            WebhookEventType.CREDIT_CARD_CREATED.value: handle_credit_card_created,
        }

    async def verify_signature(self, headers: WebhookHeaders, event: Dict[str, Any]) -> bool:
        """
        Ask the platform whether this transmission is authentic.

        Transport failures and platform errors count as "not verified"; the
        caller answers 401 and the platform will redeliver.
        """
        payload = build_verification_payload(headers, self.webhook_id, event)
        try:
            raw = await self.client.verify_webhook_signature(payload)
            result = normalize_verification_response(raw)
        except (PlatformAPIError, IntegrationResponseError, httpx.HTTPError) as exc:
            logger.error("Error verifying webhook signature: %s", exc)
            return False

        logger.info("Webhook verification result: %s", result.verification_status)
        return result.verified

    async def process_event(self, event: Dict[str, Any]) -> WebhookResult:
        event_type = event.get("event_type")
        logger.info("Processing webhook event: %s", event_type)

        handler = self.handlers.get(event_type)
        if handler is None:
            logger.info("Unhandled webhook event type: %s", event_type)
            return WebhookResult(success=True, message=f"Event type {event_type} received but not processed")
        return await handler(event)

    async def get_webhook_details(self) -> Optional[Dict[str, Any]]:
        if not self.webhook_id:
            logger.warning("WEBHOOK_ID is not configured.")
            return None
        try:
            return await self.client.get_webhook(self.webhook_id)
        except PlatformAPIError as exc:
            logger.error("Error fetching webhook details: %s %s", exc.status_code, exc.message)
            return None

    async def list_events(self) -> Optional[Dict[str, Any]]:
        try:
            return await self.client.list_webhook_events()
        except PlatformAPIError as exc:
            logger.error("Error fetching webhook events: %s %s", exc.status_code, exc.message)
            return None
