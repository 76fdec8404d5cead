from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from checkout_server.api.dependencies import get_checkout_context, get_order_service, get_vault_service
from checkout_server.integrations.contracts.interfaces import CheckoutContext
from checkout_server.integrations.policy.order_service import OrderService
from checkout_server.integrations.policy.vault_service import VaultService

api = APIRouter()
vault_api = api


class SetupTokenBody(BaseModel):
    payment_source: Optional[str] = Field(default=None, alias="paymentSource")


class CustomerBody(BaseModel):
    customer_id: Optional[str] = Field(default=None, alias="customerId")


class CustomersBody(BaseModel):
    customer_ids: Optional[List[str]] = Field(default=None, alias="customerIds")


class RecurringOrderBody(BaseModel):
    payment_token_id: str = Field(..., alias="paymentTokenId")


class VaultOrderBody(BaseModel):
    vault_id: str = Field(..., alias="vaultId")
    amount: Optional[str] = None


@api.post("/vault/setup-token", tags=["Vault"])
async def create_setup_token(
    body: SetupTokenBody,
    service: VaultService = Depends(get_vault_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_setup_token(body.payment_source, context)


@api.post("/vault/recurring-setup-token", tags=["Vault"])
async def create_recurring_setup_token(
    body: SetupTokenBody,
    service: VaultService = Depends(get_vault_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_recurring_setup_token(body.payment_source, context)


@api.post("/vault/payment-token/{setup_token}", tags=["Vault"])
async def create_payment_token(
    setup_token: str,
    service: VaultService = Depends(get_vault_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_payment_token(setup_token, context)


@api.post("/vault/payment-token", tags=["Vault"])
async def create_payment_token_for_customer(
    body: CustomerBody,
    service: VaultService = Depends(get_vault_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    customer_id = body.customer_id or context.customer_id
    if not customer_id:
        raise HTTPException(status_code=400, detail="customerId is required")
    return await service.create_payment_token_for_customer(customer_id, context)


@api.get("/payment-tokens", tags=["Vault"])
async def list_payment_tokens(
    customer_id: str = Query(..., min_length=1),
    service: VaultService = Depends(get_vault_service),
):
    return await service.list_payment_tokens(customer_id)


@api.post("/vault/customers", tags=["Vault"])
async def list_customers(body: CustomersBody, service: VaultService = Depends(get_vault_service)):
    return await service.get_customers(body.customer_ids)


@api.post("/vault/recurring-order", tags=["Vault"])
async def create_recurring_order(
    body: RecurringOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_recurring_order(body.payment_token_id, context)


@api.post("/vault/create-order", tags=["Vault"])
async def create_order_with_vault_id(
    body: VaultOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_order_with_vault_id(body.vault_id, body.amount, context)
