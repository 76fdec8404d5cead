from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from checkout_server.api.dependencies import get_checkout_context, get_order_service
from checkout_server.integrations.contracts.interfaces import CheckoutContext
from checkout_server.integrations.policy.order_service import OrderService

api = APIRouter()
billing_api = api


class CreateAgreementBody(BaseModel):
    token: str


class CaptureWithAgreementBody(BaseModel):
    billing_agreement_id: str = Field(..., alias="billingAgreementId")
    amount: Optional[str] = None


@api.post("/ba/create-billing-token", tags=["Billing Agreements"])
async def create_billing_token(service: OrderService = Depends(get_order_service)):
    return await service.create_billing_agreement_token()


@api.post("/ba/create-agreement", tags=["Billing Agreements"])
async def create_agreement(body: CreateAgreementBody, service: OrderService = Depends(get_order_service)):
    return await service.create_billing_agreement(body.token)


@api.post("/ba/capture-order", tags=["Billing Agreements"])
async def capture_with_agreement(
    body: CaptureWithAgreementBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.capture_with_billing_agreement(body.billing_agreement_id, body.amount, context)
