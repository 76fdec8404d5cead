from fastapi import APIRouter, Depends

from checkout_server.api.dependencies import get_checkout_context, get_platform_client, get_vault_service
from checkout_server.api.endpoints.vault import CustomerBody
from checkout_server.integrations.contracts.interfaces import CheckoutContext, PlatformClient
from checkout_server.integrations.policy.vault_service import VaultService

api = APIRouter()
tokens_api = api


@api.post("/returning-user-token", tags=["Tokens"])
async def returning_user_token(
    body: CustomerBody,
    service: VaultService = Depends(get_vault_service),
    context: CheckoutContext = Depends(get_checkout_context),
):
    return await service.returning_user_token(body.customer_id or context.customer_id)


@api.post("/first-time-user-token", tags=["Tokens"])
async def first_time_user_token(service: VaultService = Depends(get_vault_service)):
    return await service.first_time_user_token()


@api.get("/client-token", tags=["Tokens"])
async def client_token(client: PlatformClient = Depends(get_platform_client)):
    token = await client.generate_client_token()
    return {"clientId": client.client_id, "clientToken": token.get("client_token")}
