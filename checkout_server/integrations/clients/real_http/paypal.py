"""
Real PayPal REST HTTP Client.

Used when platform credentials are configured. Every call fetches a
client-credentials access token first and then talks to the REST API with
it; non-2xx answers raise PlatformAPIError carrying the platform's status
and body text so the API layer can pass them straight through.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

import httpx

from checkout_server.integrations.contracts.interfaces import PlatformClient
from checkout_server.integrations.policy.response_wrappers import (
    PlatformAPIError,
    normalize_access_token_response,
    normalize_client_token_response,
    normalize_id_token_response,
    normalize_payment_tokens,
)
from checkout_server.utils.config_loader import PlatformConfig

logger = logging.getLogger(__name__)

_OK_STATUSES = {200, 201}


class PayPalHttpClient(PlatformClient):
    def __init__(
        self,
        config: PlatformConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.base_url = config.api_base.rstrip("/")
        self.timeout_seconds = config.timeout_seconds
        self._transport = transport
        if not config.has_credentials:
            logger.warning("CLIENT_ID / APP_SECRET are not set; platform calls will be rejected.")

    @property
    def client_id(self) -> Optional[str]:
        return self.config.client_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds, transport=self._transport)

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        if response.status_code in _OK_STATUSES:
            return response.json() if response.content else {}
        logger.error("Platform error response: %s %s", response.status_code, response.text)
        payload = None
        if response.headers.get("content-type", "").startswith("application/json"):
            try:
                payload = response.json()
            except ValueError:
                payload = None
        raise PlatformAPIError(response.status_code, response.text, payload=payload)

    async def _oauth(self, form: Dict[str, str]) -> Dict[str, Any]:
        if not self.config.has_credentials:
            raise PlatformAPIError(500, "CLIENT_ID and APP_SECRET must be configured.")

        async with self._client() as client:
            response = await client.post(
                "/v1/oauth2/token",
                data=form,
                auth=(self.config.client_id, self.config.app_secret),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        return self._handle_response(response)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        token = await self.get_access_token()
        headers: Dict[str, str] = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if request_id:
            headers["PayPal-Request-Id"] = request_id
        if extra_headers:
            headers.update(extra_headers)

        logger.debug("%s %s payload=%s", method, path, json)
        async with self._client() as client:
            response = await client.request(method, path, json=json, params=params, headers=headers)
        logger.info("%s %s -> %s", method, path, response.status_code)
        return self._handle_response(response)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def get_access_token(self) -> str:
        data = await self._oauth({"grant_type": "client_credentials"})
        return normalize_access_token_response(data).access_token

    async def get_id_token(self, customer_id: Optional[str] = None) -> str:
        form = {"grant_type": "client_credentials", "response_type": "id_token"}
        if customer_id:
            form["target_customer_id"] = customer_id
        data = await self._oauth(form)
        return normalize_id_token_response(data)

    async def generate_client_token(self) -> Dict[str, Any]:
        data = await self._request("POST", "/v1/identity/generate-token")
        return normalize_client_token_response(data).raw

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def create_order(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST", "/v2/checkout/orders", json=payload, request_id=request_id or str(uuid.uuid4())
        )

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v2/checkout/orders/{order_id}")

    async def capture_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/v2/checkout/orders/{order_id}/capture")

    async def authorize_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("POST", f"/v2/checkout/orders/{order_id}/authorize")

    async def capture_authorization(self, authorization_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v2/payments/authorizations/{authorization_id}/capture",
            json={},
            extra_headers={"Prefer": "return=representation"},
        )

    # ------------------------------------------------------------------
    # Vault
    # ------------------------------------------------------------------

    async def create_setup_token(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST", "/v3/vault/setup-tokens", json=payload, request_id=request_id or str(uuid.uuid4())
        )

    async def create_payment_token(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST", "/v3/vault/payment-tokens", json=payload, request_id=request_id or str(uuid.uuid4())
        )

    async def get_payment_token(self, token_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v3/vault/payment-tokens/{token_id}")

    async def list_payment_tokens(self, customer_id: str) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/v3/vault/payment-tokens", params={"customer_id": customer_id})
        return normalize_payment_tokens(data)

    # ------------------------------------------------------------------
    # Billing agreements
    # ------------------------------------------------------------------

    async def create_billing_agreement_token(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/v1/billing-agreements/agreement-tokens", json=payload)

    async def create_billing_agreement(self, token_id: str) -> Dict[str, Any]:
        return await self._request("POST", "/v1/billing-agreements/agreements", json={"token_id": token_id})

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def create_product(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/v1/catalogs/products",
            json=payload,
            request_id=request_id or f"product-{uuid.uuid4()}",
            extra_headers={"Accept": "application/json", "Prefer": "return=representation"},
        )

    async def create_plan(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/v1/billing/plans",
            json=payload,
            request_id=request_id or f"plan-{uuid.uuid4()}",
            extra_headers={"Accept": "application/json", "Prefer": "return=representation"},
        )

    async def get_plan(self, plan_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v1/billing/plans/{plan_id}", extra_headers={"Accept": "application/json"})

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def verify_webhook_signature(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/v1/notifications/verify-webhook-signature", json=payload)

    async def get_webhook(self, webhook_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v1/notifications/webhooks/{webhook_id}")

    async def list_webhook_events(self) -> Dict[str, Any]:
        return await self._request("GET", "/v1/notifications/webhooks-events")
