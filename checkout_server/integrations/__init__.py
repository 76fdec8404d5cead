"""
Integrations layer.
This package contains all code used to communicate with the payment platform:
- Orders v2 (create / authorize / capture)
- Vault v3 (setup tokens, payment tokens)
- Billing agreements, catalog products and billing plans
- Webhook signature verification

Key rule:
- API endpoints MUST NOT call the platform directly.
- Endpoints call policy services, which call a PlatformClient (under integrations/clients).
- We use the MOCK client during development and swap to the REAL_HTTP client when credentials are set.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (checkout_server/api/dependencies.py).
"""

from .contracts.interfaces import (
    Address,
    CheckoutContext,
    ContactInfo,
    OrderIntent,
    PaymentSourceType,
    PlatformClient,
    ShippingPreference,
    WebhookEventType,
    WebhookHeaders,
)
from .contracts.shipping import (
    ShippingRecalcRequest,
    ShippingRecalcResponse,
    ShippingRejection,
    ShippingSelection,
)
from .contracts.webhooks import WebhookResult

__all__ = [
    # interfaces
    "Address", "CheckoutContext", "ContactInfo", "OrderIntent",
    "PaymentSourceType", "PlatformClient", "ShippingPreference",
    "WebhookEventType", "WebhookHeaders",
    # shipping
    "ShippingRecalcRequest", "ShippingRecalcResponse", "ShippingRejection", "ShippingSelection",
    # webhooks
    "WebhookResult",
]
