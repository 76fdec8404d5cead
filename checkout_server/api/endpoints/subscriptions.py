from fastapi import APIRouter, Depends

from checkout_server.api.dependencies import get_checkout_context, get_subscription_service
from checkout_server.integrations.contracts.interfaces import CheckoutContext
from checkout_server.integrations.policy.subscription_service import SubscriptionService

api = APIRouter()
subscriptions_api = api


@api.post("/subscriptions/create-plan", tags=["Subscriptions"])
async def create_plan(
    service: SubscriptionService = Depends(get_subscription_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.create_plan(context)


@api.get("/subscriptions/plan/{plan_id}", tags=["Subscriptions"])
async def get_plan(plan_id: str, service: SubscriptionService = Depends(get_subscription_service)):
    return await service.get_plan(plan_id)
