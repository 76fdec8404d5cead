from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from checkout_server.api.dependencies import get_checkout_context, get_order_service
from checkout_server.integrations.contracts.interfaces import CheckoutContext, PaymentSourceType
from checkout_server.integrations.contracts.orders import CheckoutOrderRequest, parse_contact_info
from checkout_server.integrations.contracts.vault import UnsupportedPaymentSource
from checkout_server.integrations.policy.order_service import OrderService

api = APIRouter()
orders_api = api


class CheckoutOrderBody(BaseModel):
    payment_source: Optional[str] = Field(default=None, alias="paymentSource")
    total_amount: Optional[str] = Field(default=None, alias="totalAmount")
    shipping_info: Optional[Dict[str, Any]] = Field(default=None, alias="shippingInfo")
    billing_info: Optional[Dict[str, Any]] = Field(default=None, alias="billingInfo")
    customer_id: Optional[str] = Field(default=None, alias="customerId")
    vault: bool = False

    def to_request(self) -> CheckoutOrderRequest:
        kind = None
        if self.payment_source:
            try:
                kind = PaymentSourceType(self.payment_source.strip().lower())
            except ValueError as exc:
                raise UnsupportedPaymentSource(f"Unsupported payment source: {self.payment_source!r}") from exc
        return CheckoutOrderRequest(
            payment_source=kind,
            total_amount=self.total_amount,
            shipping_info=parse_contact_info(self.shipping_info),
            billing_info=parse_contact_info(self.billing_info),
            customer_id=self.customer_id,
            vault=self.vault,
        )


class UpstreamOrderBody(BaseModel):
    total_amount: Union[str, float] = Field(default="100.00", alias="totalAmount")


class FetchOrdersBody(BaseModel):
    order_ids: Optional[List[Union[str, Dict[str, Any]]]] = Field(default=None, alias="orderIds")


@api.post("/orders", tags=["Orders"])
async def create_order(
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_default_order(context)


@api.post("/checkout-orders", tags=["Orders"])
async def create_checkout_order(
    body: CheckoutOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_checkout_order(body.to_request(), context)


@api.post("/upstream-orders", tags=["Orders"])
async def create_upstream_order(
    body: UpstreamOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_upstream_order(body.total_amount, context)


@api.post("/upstream-ql-orders", tags=["Orders"])
async def create_upstream_callback_order(
    body: UpstreamOrderBody,
    service: OrderService = Depends(get_order_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_upstream_order(body.total_amount, context, server_callbacks=True)


@api.post("/orders/fetch", tags=["Orders"])
async def fetch_orders(body: FetchOrdersBody, service: OrderService = Depends(get_order_service)):
    return await service.get_orders_by_ids(body.order_ids)


@api.get("/orders/{order_id}", tags=["Orders"])
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return await service.get_order(order_id)


@api.post("/orders/{order_id}/capture", tags=["Orders"])
async def capture_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return await service.capture_order(order_id)


@api.post("/orders/{order_id}/authorize", tags=["Orders"])
async def authorize_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return await service.authorize_order(order_id)


@api.post("/orders/{order_id}/capture-authorized", tags=["Orders"])
async def capture_authorized_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return await service.capture_authorized_order(order_id)
