"""
Vault Service

Setup/payment token issuance and customer payment-method lookups.
"""

import logging
from typing import Any, Dict, List, Optional

from checkout_server.integrations.contracts.interfaces import CheckoutContext, PlatformClient
from checkout_server.integrations.contracts.vault import (
    CustomerTokens,
    build_payment_token_from_customer,
    build_payment_token_from_setup,
    build_recurring_setup_token,
    build_setup_token,
    summarize_customers,
)
from checkout_server.integrations.policy.response_wrappers import PlatformAPIError

logger = logging.getLogger(__name__)


class VaultService:
    def __init__(self, client: PlatformClient):
        self.client = client

    async def create_setup_token(self, payment_source: Optional[str], context: CheckoutContext) -> Dict[str, Any]:
        payload = build_setup_token(payment_source)
        return await self.client.create_setup_token(payload, request_id=context.request_id)

    async def create_recurring_setup_token(self, payment_source: Optional[str], context: CheckoutContext) -> Dict[str, Any]:
        logger.info("Creating recurring payment setup token for payment source: %s", payment_source)
        payload = build_recurring_setup_token(payment_source)
        return await self.client.create_setup_token(payload, request_id=context.request_id)

    async def create_payment_token(self, setup_token_id: str, context: CheckoutContext) -> Dict[str, Any]:
        payload = build_payment_token_from_setup(setup_token_id)
        return await self.client.create_payment_token(payload, request_id=context.request_id)

    async def create_payment_token_for_customer(self, customer_id: str, context: CheckoutContext) -> Dict[str, Any]:
        payload = build_payment_token_from_customer(customer_id)
        return await self.client.create_payment_token(payload, request_id=context.request_id)

    async def list_payment_tokens(self, customer_id: str) -> List[Dict[str, Any]]:
        logger.info("Fetching payment tokens for customer ID: %s", customer_id)
        return await self.client.list_payment_tokens(customer_id)

    async def get_customers(self, customer_ids: Optional[List[str]]) -> Dict[str, Any]:
        """Payment methods for each known customer id plus aggregate counts."""
        customers: List[CustomerTokens] = []
        for customer_id in customer_ids or []:
            try:
                tokens = await self.client.list_payment_tokens(str(customer_id))
                customers.append(CustomerTokens(customer_id=str(customer_id), payment_tokens=tokens))
            except PlatformAPIError as exc:
                logger.error("Error fetching tokens for customer %s: %s", customer_id, exc.message)
                customers.append(CustomerTokens(customer_id=str(customer_id), error=exc.message))

        return {
            "customers": [c.to_dict() for c in customers if c.payment_tokens or c.error],
            "stats": summarize_customers(customers),
            "message": None if customers else "No customer IDs provided.",
        }

    async def returning_user_token(self, customer_id: Optional[str]) -> Dict[str, Any]:
        if not customer_id:
            raise PlatformAPIError(400, "customerId is required")
        return {"idToken": await self.client.get_id_token(customer_id)}

    async def first_time_user_token(self) -> Dict[str, Any]:
        return {"idToken": await self.client.get_id_token()}
