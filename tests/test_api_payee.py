import pytest

from checkout_server.integrations.clients.mocks.paypal import PayPalMockClient
from checkout_server.integrations.contracts.interfaces import CheckoutContext
from checkout_server.integrations.policy.order_service import OrderService
from checkout_server.integrations.policy.response_wrappers import PlatformAPIError


def test_onetime_payee_order_then_capture(api_client):
    created = api_client.post("/api/test-onetime-payee", json={"payeeMerchantId": "MERCHANT-B", "amount": "15.00"})
    assert created.status_code == 200
    body = created.json()
    assert body["success"] is True
    assert body["status"] == "PAYER_ACTION_REQUIRED"
    assert body["payeeMerchantId"] == "MERCHANT-B"
    assert body["approvalUrl"].endswith(body["orderId"])
    unit = body["orderCreation"]["purchase_units"][0]
    assert unit["payee"] == {"merchant_id": "MERCHANT-B"}
    assert unit["amount"]["value"] == "15.00"

    captured = api_client.post(
        "/api/capture-onetime-payee", json={"orderId": body["orderId"], "payeeMerchantId": "MERCHANT-B"}
    )
    assert captured.status_code == 200
    capture = captured.json()["capture"]
    assert capture["success"] is True
    assert capture["captureId"]
    assert capture["amount"] == "15.00"
    assert capture["result"]["status"] == "COMPLETED"


def test_onetime_payee_requires_merchant_id(api_client):
    response = api_client.post("/api/test-onetime-payee", json={"amount": "15.00"})
    assert response.status_code == 422


def test_capture_unknown_payee_order_passes_status_through(api_client):
    response = api_client.post("/api/capture-onetime-payee", json={"orderId": "MISSING"})
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.parametrize("path", ["/api/test-vaulted-payee", "/api/test-vaulted-same-merchant-different-payee"])
def test_vaulted_payee_order_completes_on_creation(api_client, path):
    response = api_client.post(path, json={"vaultedToken": "VAULT-1", "payeeMerchantId": "MERCHANT-C", "amount": "8"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "COMPLETED"
    assert body["capture"]["success"] is True
    assert body["capture"]["error"] is None
    order = body["orderCreation"]
    assert order["payment_source"] == {"paypal": {"vault_id": "VAULT-1"}}
    assert order["purchase_units"][0]["payee"] == {"merchant_id": "MERCHANT-C"}
    assert order["purchase_units"][0]["amount"]["value"] == "8.00"


def test_vault_v3_payee_order_uses_payment_method_token(api_client):
    response = api_client.post(
        "/api/test-vault-v3-payee", json={"vaultedToken": "TOKEN-3", "payeeMerchantId": "MERCHANT-D"}
    )
    assert response.status_code == 200
    order = response.json()["orderCreation"]
    assert order["payment_source"] == {"token": {"id": "TOKEN-3", "type": "PAYMENT_METHOD_TOKEN"}}
    assert order["purchase_units"][0]["amount"]["value"] == "10.00"
    assert order["status"] == "COMPLETED"


def test_payee_order_with_invalid_amount_is_400(api_client):
    response = api_client.post("/api/test-onetime-payee", json={"payeeMerchantId": "MERCHANT-B", "amount": "ten"})
    assert response.status_code == 400
    assert "Invalid amount" in response.text


class _ApprovedOrderClient(PayPalMockClient):
    """Leaves vaulted orders APPROVED and declines the follow-up capture."""

    async def create_order(self, payload, request_id=None):
        order_id = self._new_id()
        order = {
            "id": order_id,
            "intent": "CAPTURE",
            "status": "APPROVED",
            "payment_source": payload.get("payment_source"),
            "purchase_units": payload.get("purchase_units", []),
        }
        self._orders[order_id] = order
        return order

    async def capture_order(self, order_id):
        raise PlatformAPIError(422, "INSTRUMENT_DECLINED")


@pytest.mark.asyncio
async def test_vaulted_payee_capture_failure_is_reported_inline(config):
    service = OrderService(_ApprovedOrderClient(), config)

    result = await service.create_vaulted_payee_order(
        "VAULT-1", "MERCHANT-C", None, CheckoutContext(request_id="req-1")
    )

    assert result["success"] is True
    assert result["status"] == "APPROVED"
    assert result["capture"] == {
        "success": False,
        "result": None,
        "error": {"message": "INSTRUMENT_DECLINED", "status": 422},
    }
