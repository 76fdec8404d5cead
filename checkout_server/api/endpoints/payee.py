from typing import Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from checkout_server.api.dependencies import get_checkout_context, get_order_service
from checkout_server.integrations.contracts.interfaces import CheckoutContext
from checkout_server.integrations.policy.order_service import OrderService

api = APIRouter()
payee_api = api


class PayeeOrderBody(BaseModel):
    payee_merchant_id: str = Field(..., alias="payeeMerchantId", min_length=1)
    amount: Optional[Union[str, float]] = None


class CapturePayeeOrderBody(BaseModel):
    order_id: str = Field(..., alias="orderId", min_length=1)
    payee_merchant_id: Optional[str] = Field(default=None, alias="payeeMerchantId")


class VaultedPayeeOrderBody(BaseModel):
    vaulted_token: str = Field(..., alias="vaultedToken", min_length=1)
    payee_merchant_id: str = Field(..., alias="payeeMerchantId", min_length=1)
    amount: Optional[Union[str, float]] = None


@api.post("/test-onetime-payee", tags=["Payee"])
async def create_onetime_payee_order(
    body: PayeeOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_payee_order(body.payee_merchant_id, body.amount, context)


@api.post("/capture-onetime-payee", tags=["Payee"])
async def capture_onetime_payee_order(body: CapturePayeeOrderBody, service: OrderService = Depends(get_order_service)):
    return await service.capture_payee_order(body.order_id, body.payee_merchant_id)


@api.post("/test-vaulted-payee", tags=["Payee"])
@api.post("/test-vaulted-same-merchant-different-payee", tags=["Payee"])
async def create_vaulted_payee_order(
    body: VaultedPayeeOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_vaulted_payee_order(
        body.vaulted_token, body.payee_merchant_id, body.amount, context
    )


@api.post("/test-vault-v3-payee", tags=["Payee"])
async def create_vault_v3_payee_order(
    body: VaultedPayeeOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_vaulted_payee_order(
        body.vaulted_token, body.payee_merchant_id, body.amount, context, payment_method_token=True
    )
