"""
Subscription Service for the platform's catalog and billing plan APIs.
"""

import logging
from typing import Any, Dict

from checkout_server.integrations.contracts.interfaces import CheckoutContext, PlatformClient
from checkout_server.integrations.contracts.subscriptions import build_monthly_plan, build_subscription_product

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, client: PlatformClient):
        self.client = client

    async def create_plan(self, context: CheckoutContext) -> Dict[str, Any]:
        """
        Create the catalog product, then the monthly plan that references it.
        """
        product = await self.client.create_product(
            build_subscription_product(), request_id=f"product-{context.request_id}"
        )
        logger.info("Product created: %s", product.get("id"))

        plan = await self.client.create_plan(
            build_monthly_plan(product["id"]), request_id=f"plan-{context.request_id}"
        )
        logger.info("Subscription plan created: %s", plan.get("id"))
        return plan

    async def get_plan(self, plan_id: str) -> Dict[str, Any]:
        return await self.client.get_plan(plan_id)
