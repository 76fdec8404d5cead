import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from checkout_server.error_handler import error_handler
from checkout_server.integrations.contracts.shipping import ShippingRejection
from checkout_server.integrations.policy.shipping_service import handle_shipping_callback

logger = logging.getLogger(__name__)

api = APIRouter()
shipping_api = api


@api.post("/shipping-callback", tags=["Shipping"])
async def shipping_callback(request: Request):
    """
    Server-side shipping callback called by the platform whenever the buyer
    changes address or shipping option.

    200 with the recalculated purchase unit, 422 for unsupported countries,
    500 text/plain for anything that cannot be computed.
    """
    try:
        payload = json.loads(await request.body() or b"null")
        result = handle_shipping_callback(payload)
    except Exception as exc:
        return error_handler.handle_exception(exc, context={"route": "shipping-callback"})

    if isinstance(result, ShippingRejection):
        return JSONResponse(status_code=422, content=result.to_dict())
    return JSONResponse(status_code=200, content=result.to_dict())
