"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse

from checkout_server.api.dependencies import get_config
from checkout_server.api.endpoints.billing import billing_api
from checkout_server.api.endpoints.orders import orders_api
from checkout_server.api.endpoints.payee import payee_api
from checkout_server.api.endpoints.shipping import shipping_api
from checkout_server.api.endpoints.subscriptions import subscriptions_api
from checkout_server.api.endpoints.tokens import tokens_api
from checkout_server.api.endpoints.vault import vault_api
from checkout_server.api.endpoints.webhooks import webhooks_api
from checkout_server.error_handler import error_handler
from checkout_server.integrations.contracts.orders import InvalidAmount
from checkout_server.integrations.contracts.vault import UnsupportedPaymentSource
from checkout_server.integrations.policy.response_wrappers import IntegrationResponseError, PlatformAPIError
from checkout_server.utils.config_loader import PlatformConfig

# Setup logging
logging.basicConfig(level=get_config().log_level)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Checkout Server",
    description="Payment-platform checkout proxy with server-side shipping callbacks",
    version="1.0.0",
)

# ============================================================================
# ERROR HANDLERS
# ============================================================================


@app.exception_handler(PlatformAPIError)
async def platform_error_handler(request: Request, exc: PlatformAPIError):
    return error_handler.handle_exception(exc, context={"path": request.url.path})


@app.exception_handler(UnsupportedPaymentSource)
async def unsupported_source_handler(request: Request, exc: UnsupportedPaymentSource):
    logger.warning("Unsupported payment source on %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=400)


@app.exception_handler(InvalidAmount)
async def invalid_amount_handler(request: Request, exc: InvalidAmount):
    logger.warning("Invalid amount on %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=400)


@app.exception_handler(IntegrationResponseError)
async def integration_response_handler(request: Request, exc: IntegrationResponseError):
    logger.error("Unexpected platform response on %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=502)


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(shipping_api, prefix="/api")
app.include_router(orders_api, prefix="/api")
app.include_router(vault_api, prefix="/api")
app.include_router(tokens_api, prefix="/api")
app.include_router(billing_api, prefix="/api")
app.include_router(payee_api, prefix="/api")
app.include_router(subscriptions_api, prefix="/api")
app.include_router(webhooks_api, prefix="/api")


# ============================================================================
# ENDPOINTS
# ============================================================================


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get("/api/diagnostics", tags=["Health"])
async def diagnostics(config: PlatformConfig = Depends(get_config)):
    """Which settings are present. Secret values are never echoed."""
    return {
        "apiBase": config.api_base,
        "clientIdSet": bool(config.client_id),
        "appSecretSet": bool(config.app_secret),
        "webhookIdSet": bool(config.webhook_id),
        "baseUrl": config.base_url,
        "shippingCallbackUrl": config.shipping_callback_url,
        "integrationsMode": config.integrations_mode,
        "usingRealClient": config.use_real_client(),
        "timestamp": datetime.now().isoformat(),
    }
