"""
Webhook contracts: signature verification payload and processing results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .interfaces import WebhookEventType, WebhookHeaders

VERIFIED = "SUCCESS"

SAMPLE_TOKEN_CREATED_EVENT: Dict[str, Any] = {
    "event_type": WebhookEventType.PAYMENT_TOKEN_CREATED.value,
    "resource": {
        "id": "test-token-123",
        "customer": {"id": "test-customer-456"},
        "payment_source": {"card": {"brand": "VISA", "last_digits": "1234", "expiry": "2025-12"}},
    },
}


@dataclass
class WebhookResult:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.message is not None:
            out["message"] = self.message
        if self.error is not None:
            out["error"] = self.error
        return out


def webhook_headers_from(headers: Mapping[str, str]) -> WebhookHeaders:
    """Pick the platform transmission headers (case-insensitive mapping expected)."""
    return WebhookHeaders(
        auth_algo=headers.get("paypal-auth-algo"),
        cert_id=headers.get("paypal-cert-id"),
        transmission_id=headers.get("paypal-transmission-id"),
        transmission_sig=headers.get("paypal-transmission-sig"),
        transmission_time=headers.get("paypal-transmission-time"),
    )


def build_verification_payload(
    headers: WebhookHeaders,
    webhook_id: Optional[str],
    event: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        "auth_algo": headers.auth_algo,
        "cert_id": headers.cert_id,
        "transmission_id": headers.transmission_id,
        "transmission_sig": headers.transmission_sig,
        "transmission_time": headers.transmission_time,
        "webhook_id": webhook_id,
        "webhook_event": event,
    }
