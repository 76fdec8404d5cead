"""Error handling helpers for the checkout API."""
from typing import Any, Dict, Optional
import logging

from fastapi.responses import PlainTextResponse

from checkout_server.integrations.policy.response_wrappers import PlatformAPIError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def describe(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        status_code = exc.status_code if isinstance(exc, PlatformAPIError) else 500
        if status_code >= 500:
            logger.error("Unhandled exception in checkout request: %s", exc, exc_info=True)
        else:
            logger.warning("Platform rejected request (%s): %s", status_code, exc)
        return {
            "status_code": status_code,
            "message": str(exc) or exc.__class__.__name__,
            "context": context or {},
        }

    def handle_exception(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> PlainTextResponse:
        info = self.describe(exc, context)
        return PlainTextResponse(info["message"], status_code=info["status_code"])


error_handler = ErrorHandler()
