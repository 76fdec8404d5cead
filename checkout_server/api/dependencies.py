import logging
import uuid
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from checkout_server.integrations.clients.mocks.paypal import PayPalMockClient
from checkout_server.integrations.clients.real_http.paypal import PayPalHttpClient
from checkout_server.integrations.contracts.interfaces import CheckoutContext, PlatformClient
from checkout_server.integrations.policy.order_service import OrderService
from checkout_server.integrations.policy.subscription_service import SubscriptionService
from checkout_server.integrations.policy.vault_service import VaultService
from checkout_server.integrations.policy.webhook_service import WebhookService
from checkout_server.utils.config_loader import PlatformConfig, load_platform_config

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_config() -> PlatformConfig:
    return load_platform_config()


@lru_cache(maxsize=1)
def _build_client(use_real: bool) -> PlatformClient:
    if use_real:
        logger.info("Using real PayPal HTTP client")
        return PayPalHttpClient(get_config())
    logger.info("Using in-memory PayPal mock client")
    return PayPalMockClient(webhook_id=get_config().webhook_id or "WH-MOCK")


def get_platform_client(config: PlatformConfig = Depends(get_config)) -> PlatformClient:
    return _build_client(config.use_real_client())


async def get_checkout_context(
    x_customer_id: Optional[str] = Header(default=None, alias="X-Customer-Id"),
    paypal_request_id: Optional[str] = Header(default=None, alias="PayPal-Request-Id"),
) -> CheckoutContext:
    return CheckoutContext(
        request_id=(paypal_request_id or "").strip() or str(uuid.uuid4()),
        customer_id=(x_customer_id or "").strip() or None,
    )


def get_order_service(
    client: PlatformClient = Depends(get_platform_client),
    config: PlatformConfig = Depends(get_config),
) -> OrderService:
    return OrderService(client, config)


def get_vault_service(client: PlatformClient = Depends(get_platform_client)) -> VaultService:
    return VaultService(client)


def get_subscription_service(client: PlatformClient = Depends(get_platform_client)) -> SubscriptionService:
    return SubscriptionService(client)


def get_webhook_service(
    client: PlatformClient = Depends(get_platform_client),
    config: PlatformConfig = Depends(get_config),
) -> WebhookService:
    return WebhookService(client, config.webhook_id)
