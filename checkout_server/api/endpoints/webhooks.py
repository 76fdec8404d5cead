import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from checkout_server.api.dependencies import get_webhook_service
from checkout_server.integrations.contracts.webhooks import SAMPLE_TOKEN_CREATED_EVENT, webhook_headers_from
from checkout_server.integrations.policy.webhook_service import WebhookService

logger = logging.getLogger(__name__)

api = APIRouter()
webhooks_api = api


@api.post("/webhooks", tags=["Webhooks"])
async def receive_webhook(request: Request, service: WebhookService = Depends(get_webhook_service)):
    """
    Platform webhook receiver: verify the transmission signature, then
    dispatch the event to its handler.
    """
    raw = await request.body()
    try:
        event = json.loads(raw or b"{}")
    except ValueError:
        event = None
    if not isinstance(event, dict):
        logger.warning("Webhook body is not a JSON object")
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid JSON body"})

    headers = webhook_headers_from(request.headers)
    logger.info("Webhook received: %s (transmission %s)", event.get("event_type"), headers.transmission_id)

    if not await service.verify_signature(headers, event):
        logger.error("Invalid webhook signature")
        return JSONResponse(status_code=401, content={"success": False, "error": "Invalid webhook signature"})

    result = await service.process_event(event)
    return JSONResponse(status_code=200 if result.success else 500, content=result.to_dict())


@api.get("/webhooks/info", tags=["Webhooks"])
async def webhook_info(service: WebhookService = Depends(get_webhook_service)):
    details = await service.get_webhook_details()
    if details is None:
        return JSONResponse(status_code=404, content={"error": "Webhook not found or not configured"})
    return details


@api.get("/webhooks/events", tags=["Webhooks"])
async def webhook_events(service: WebhookService = Depends(get_webhook_service)):
    events = await service.list_events()
    if events is None:
        return PlainTextResponse("Failed to fetch webhook events", status_code=500)
    return events


@api.post("/webhooks/test", tags=["Webhooks"])
async def test_webhook(service: WebhookService = Depends(get_webhook_service)):
    result = await service.process_event(dict(SAMPLE_TOKEN_CREATED_EVENT))
    return JSONResponse(
        status_code=200 if result.success else 500,
        content={"message": "Test webhook processed", "result": result.to_dict()},
    )
