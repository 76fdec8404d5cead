import pytest


def test_create_default_order(api_client):
    response = api_client.post("/api/orders")
    assert response.status_code == 200
    order = response.json()
    assert order["status"] == "PAYER_ACTION_REQUIRED"
    assert order["purchase_units"][0]["amount"]["value"] == "100.00"


def test_checkout_order_uses_customer_header(api_client, mock_client):
    response = api_client.post(
        "/api/checkout-orders",
        json={"paymentSource": "card", "totalAmount": "20.00"},
        headers={"X-Customer-Id": "CUST-42"},
    )
    assert response.status_code == 200
    order = response.json()
    assert order["intent"] == "AUTHORIZE"
    assert order["payment_source"]["card"]["attributes"]["customer"] == {"id": "CUST-42"}


def test_checkout_order_unknown_source_is_400(api_client):
    response = api_client.post("/api/checkout-orders", json={"paymentSource": "cash"})
    assert response.status_code == 400
    assert "cash" in response.text


def test_upstream_callback_order_points_at_shipping_callback(api_client):
    response = api_client.post("/api/upstream-ql-orders", json={"totalAmount": "30.00"})
    assert response.status_code == 200
    context = response.json()["payment_source"]["paypal"]["experience_context"]
    assert context["order_update_callback_config"]["callback_url"] == "http://testserver/api/shipping-callback"

    plain = api_client.post("/api/upstream-orders", json={"totalAmount": "30.00"}).json()
    assert "order_update_callback_config" not in plain["payment_source"]["paypal"]["experience_context"]


def test_unknown_order_passes_platform_status_through(api_client):
    response = api_client.get("/api/orders/DOES-NOT-EXIST")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")
    assert "RESOURCE_NOT_FOUND" in response.text


def test_authorize_then_capture_authorized(api_client):
    order_id = api_client.post("/api/checkout-orders", json={"paymentSource": "paypal"}).json()["id"]

    authorized = api_client.post(f"/api/orders/{order_id}/authorize")
    assert authorized.status_code == 200
    assert authorized.json()["purchase_units"][0]["payments"]["authorizations"][0]["status"] == "CREATED"

    captured = api_client.post(f"/api/orders/{order_id}/capture-authorized")
    assert captured.status_code == 200
    assert captured.json()["status"] == "COMPLETED"


def test_capture_authorized_without_authorization_is_422(api_client):
    order_id = api_client.post("/api/orders").json()["id"]
    response = api_client.post(f"/api/orders/{order_id}/capture-authorized")
    assert response.status_code == 422


def test_fetch_orders_reports_failures_inline_newest_first(api_client):
    first = api_client.post("/api/orders").json()["id"]
    second = api_client.post("/api/orders").json()["id"]

    response = api_client.post(
        "/api/orders/fetch",
        json={"orderIds": [first, {"id": "MISSING", "timestamp": 123}, second]},
    )
    body = response.json()
    assert response.status_code == 200
    assert body["totalCount"] == 3
    assert [o["id"] for o in body["orders"]] == [second, "MISSING", first]
    assert "Failed to fetch order details" in body["orders"][1]["error"]
    assert body["orders"][1]["client_order_timestamp"] == 123


def test_fetch_orders_without_ids(api_client):
    body = api_client.post("/api/orders/fetch", json={}).json()
    assert body["orders"] == []
    assert "No order IDs provided" in body["message"]


def test_billing_agreement_flow(api_client):
    token = api_client.post("/api/ba/create-billing-token").json()
    agreement = api_client.post("/api/ba/create-agreement", json={"token": token["token_id"]}).json()
    assert agreement["state"] == "ACTIVE"

    order = api_client.post("/api/ba/capture-order", json={"billingAgreementId": agreement["id"]}).json()
    assert order["payment_source"]["token"] == {"id": agreement["id"], "type": "BILLING_AGREEMENT"}
    assert order["purchase_units"][0]["amount"]["value"] == "10.00"


def test_subscription_plan_round_trip(api_client):
    plan = api_client.post("/api/subscriptions/create-plan").json()
    assert plan["product_id"].startswith("PROD-")

    fetched = api_client.get(f"/api/subscriptions/plan/{plan['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == plan["id"]
    assert api_client.get("/api/subscriptions/plan/P-NOPE").status_code == 404


def test_health_and_diagnostics_hide_secrets(api_client):
    assert api_client.get("/health").json()["status"] == "healthy"
    diagnostics = api_client.get("/api/diagnostics").json()
    assert diagnostics["clientIdSet"] is True
    assert diagnostics["usingRealClient"] is False
    assert "test-secret" not in str(diagnostics)


def test_checkout_order_with_non_numeric_amount_is_400(api_client):
    response = api_client.post("/api/checkout-orders", json={"paymentSource": "paypal", "totalAmount": "abc"})
    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert "Invalid amount" in response.text


@pytest.mark.parametrize("path", ["/api/upstream-orders", "/api/upstream-ql-orders"])
def test_upstream_order_with_non_numeric_amount_is_400(api_client, path):
    response = api_client.post(path, json={"totalAmount": "abc"})
    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert "'abc'" in response.text
