"""
PayPal REST: MOCK client.

⚠️  This is a mock implementation for development and testing.
    It keeps orders, vault tokens and plans in memory and answers with
    realistic-looking platform JSON. Nothing leaves the process.
    Unknown ids raise PlatformAPIError(404) just like the real API.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from checkout_server.integrations.contracts.interfaces import PlatformClient
from checkout_server.integrations.policy.response_wrappers import PlatformAPIError

logger = logging.getLogger(__name__)

_MOCK_CARD = {"brand": "VISA", "last_digits": "1111", "expiry": "2030-12"}
_MOCK_PAYPAL = {"email_address": "buyer@example.com", "account_id": "MOCKPAYERID"}


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _not_found(kind: str, resource_id: str) -> PlatformAPIError:
    body = {
        "name": "RESOURCE_NOT_FOUND",
        "message": "The specified resource does not exist.",
        "details": [{"issue": "INVALID_RESOURCE_ID", "description": f"{kind} {resource_id} not found"}],
    }
    return PlatformAPIError(404, json.dumps(body), payload=body)


class PayPalMockClient(PlatformClient):
    """
    Mock PayPal client.

    Parameters
    ----------
    verify_webhooks : bool
        Answer SUCCESS to signature verification when a transmission
        signature is present. Default True.
    webhook_id : str
        Id reported by get_webhook. Default "WH-MOCK".
    """

    def __init__(self, verify_webhooks: bool = True, webhook_id: str = "WH-MOCK"):
        self._verify_webhooks = verify_webhooks
        self._webhook_id = webhook_id

        # In-memory stores (reset on restart)
        self._orders: Dict[str, Dict[str, Any]] = {}
        self._setup_tokens: Dict[str, Dict[str, Any]] = {}
        self._payment_tokens: Dict[str, Dict[str, Any]] = {}
        self._plans: Dict[str, Dict[str, Any]] = {}

        logger.info("[PAYPAL MOCK] Client initialised")

    @property
    def client_id(self) -> Optional[str]:
        return "mock-client-id"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _new_id(prefix: str = "") -> str:
        return f"{prefix}{uuid.uuid4().hex[:17].upper()}"

    def _order(self, order_id: str) -> Dict[str, Any]:
        order = self._orders.get(order_id)
        if order is None:
            raise _not_found("Order", order_id)
        return order

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def get_access_token(self) -> str:
        return f"A21AA{uuid.uuid4().hex}"

    async def get_id_token(self, customer_id: Optional[str] = None) -> str:
        subject = customer_id or "anonymous"
        return f"eyJraWQiOiJtb2NrIn0.{subject}.{uuid.uuid4().hex}"

    async def generate_client_token(self) -> Dict[str, Any]:
        return {"client_token": f"mock-client-token-{uuid.uuid4().hex}", "expires_in": 3600}

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def create_order(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        order_id = self._new_id()
        source = payload.get("payment_source") or {}
        needs_payer = any("experience_context" in (v or {}) for v in source.values())
        # Orders paid with a saved method are completed on creation.
        saved_method = "token" in source or any("vault_id" in (v or {}) for v in source.values())
        order = {
            "id": order_id,
            "intent": payload.get("intent", "CAPTURE"),
            "status": "PAYER_ACTION_REQUIRED" if needs_payer else "CREATED",
            "payment_source": source,
            "purchase_units": [dict(unit, reference_id=unit.get("reference_id", "default")) for unit in payload.get("purchase_units", [])],
            "create_time": _now(),
            "links": [
                {"href": f"https://www.sandbox.paypal.com/checkoutnow?token={order_id}", "rel": "payer-action", "method": "GET"},
                {"href": f"https://api-m.sandbox.paypal.com/v2/checkout/orders/{order_id}", "rel": "self", "method": "GET"},
            ],
        }
        self._orders[order_id] = order
        logger.info("[PAYPAL MOCK] Order created id=%s intent=%s request_id=%s", order_id, order["intent"], request_id)
        if saved_method and order["intent"] == "CAPTURE":
            return await self.capture_order(order_id)
        return order

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return self._order(order_id)

    async def capture_order(self, order_id: str) -> Dict[str, Any]:
        order = self._order(order_id)
        for unit in order["purchase_units"]:
            unit["payments"] = {
                "captures": [{"id": self._new_id(), "status": "COMPLETED", "amount": unit.get("amount"), "create_time": _now()}]
            }
        order["status"] = "COMPLETED"
        logger.info("[PAYPAL MOCK] Order %s captured", order_id)
        return order

    async def authorize_order(self, order_id: str) -> Dict[str, Any]:
        order = self._order(order_id)
        for unit in order["purchase_units"]:
            unit["payments"] = {
                "authorizations": [{"id": self._new_id(), "status": "CREATED", "amount": unit.get("amount"), "create_time": _now()}]
            }
        order["status"] = "COMPLETED"
        logger.info("[PAYPAL MOCK] Order %s authorized", order_id)
        return order

    async def capture_authorization(self, authorization_id: str) -> Dict[str, Any]:
        for order in self._orders.values():
            for unit in order["purchase_units"]:
                for auth in (unit.get("payments") or {}).get("authorizations", []):
                    if auth["id"] == authorization_id:
                        auth["status"] = "CAPTURED"
                        return {"id": self._new_id(), "status": "COMPLETED", "amount": auth.get("amount"), "final_capture": True}
        raise _not_found("Authorization", authorization_id)

    # ------------------------------------------------------------------
    # Vault
    # ------------------------------------------------------------------

    async def create_setup_token(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        token_id = self._new_id()
        source = payload.get("payment_source") or {}
        token = {
            "id": token_id,
            "status": "PAYER_ACTION_REQUIRED" if "paypal" in source else "APPROVED",
            "payment_source": source,
            "links": [{"href": f"https://www.sandbox.paypal.com/agreements/approve?approval_session_id={token_id}", "rel": "approve", "method": "GET"}],
        }
        self._setup_tokens[token_id] = token
        return token

    def _store_payment_token(self, customer_id: str, payment_source: Dict[str, Any]) -> Dict[str, Any]:
        token = {
            "id": self._new_id(),
            "customer": {"id": customer_id},
            "payment_source": payment_source,
        }
        self._payment_tokens[token["id"]] = token
        return token

    async def create_payment_token(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        source = payload.get("payment_source") or {}
        if "token" in source:
            setup_id = source["token"].get("id")
            setup = self._setup_tokens.get(setup_id)
            if setup is None:
                raise _not_found("Setup token", str(setup_id))
            kinds = setup["payment_source"] or {"card": {}}
            stored = {kind: dict(_MOCK_CARD if kind == "card" else _MOCK_PAYPAL) for kind in kinds}
            return self._store_payment_token(self._new_id("CUST-"), stored)
        if "customer" in source:
            customer_id = source["customer"].get("id")
            return self._store_payment_token(customer_id, {"paypal": dict(_MOCK_PAYPAL)})
        raise PlatformAPIError(400, "INVALID_REQUEST: payment_source must contain token or customer")

    async def get_payment_token(self, token_id: str) -> Dict[str, Any]:
        token = self._payment_tokens.get(token_id)
        if token is None:
            raise _not_found("Payment token", token_id)
        return token

    async def list_payment_tokens(self, customer_id: str) -> List[Dict[str, Any]]:
        return [t for t in self._payment_tokens.values() if t["customer"]["id"] == customer_id]

    # ------------------------------------------------------------------
    # Billing agreements
    # ------------------------------------------------------------------

    async def create_billing_agreement_token(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        token_id = self._new_id("BA-")
        return {
            "token_id": token_id,
            "links": [{"href": f"https://www.sandbox.paypal.com/agreements/approve?ba_token={token_id}", "rel": "approval_url", "method": "POST"}],
        }

    async def create_billing_agreement(self, token_id: str) -> Dict[str, Any]:
        return {"id": self._new_id("B-"), "state": "ACTIVE", "token_id": token_id, "create_time": _now()}

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def create_product(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        return {"id": self._new_id("PROD-"), **payload, "create_time": _now()}

    async def create_plan(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        plan = {"id": self._new_id("P-"), **payload, "create_time": _now()}
        self._plans[plan["id"]] = plan
        return plan

    async def get_plan(self, plan_id: str) -> Dict[str, Any]:
        plan = self._plans.get(plan_id)
        if plan is None:
            raise _not_found("Plan", plan_id)
        return plan

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def verify_webhook_signature(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ok = self._verify_webhooks and bool(payload.get("transmission_sig"))
        return {"verification_status": "SUCCESS" if ok else "FAILURE"}

    async def get_webhook(self, webhook_id: str) -> Dict[str, Any]:
        if webhook_id != self._webhook_id:
            raise _not_found("Webhook", webhook_id)
        return {
            "id": webhook_id,
            "url": "http://localhost:8888/api/webhooks",
            "event_types": [{"name": "VAULT.PAYMENT-TOKEN.CREATED"}, {"name": "VAULT.CREDIT-CARD.CREATED"}],
        }

    async def list_webhook_events(self) -> Dict[str, Any]:
        return {"events": [], "count": 0}
