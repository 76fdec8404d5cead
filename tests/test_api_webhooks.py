SIGNED_HEADERS = {
    "paypal-auth-algo": "SHA256withRSA",
    "paypal-cert-id": "CERT-1",
    "paypal-transmission-id": "T-1",
    "paypal-transmission-sig": "signature",
    "paypal-transmission-time": "2026-01-01T00:00:00Z",
}


def test_verified_event_is_processed(api_client):
    event = {"event_type": "VAULT.CREDIT-CARD.CREATED", "resource": {"id": "CARD-1"}}
    response = api_client.post("/api/webhooks", json=event, headers=SIGNED_HEADERS)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_unsigned_event_is_rejected(api_client):
    response = api_client.post("/api/webhooks", json={"event_type": "VAULT.CREDIT-CARD.CREATED"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid webhook signature"}


def test_handler_failure_is_500(api_client):
    event = {"event_type": "VAULT.PAYMENT-TOKEN.CREATED", "resource": {}}
    response = api_client.post("/api/webhooks", json=event, headers=SIGNED_HEADERS)
    assert response.status_code == 500
    assert response.json()["success"] is False


def test_webhook_info_and_events(api_client):
    info = api_client.get("/api/webhooks/info")
    assert info.status_code == 200
    assert info.json()["id"] == "WH-TEST"
    assert api_client.get("/api/webhooks/events").json() == {"events": [], "count": 0}


def test_webhook_info_404_when_unknown(api_client, config):
    config.webhook_id = "WH-UNKNOWN"
    assert api_client.get("/api/webhooks/info").status_code == 404


def test_test_webhook(api_client):
    response = api_client.post("/api/webhooks/test")
    assert response.status_code == 200
    assert response.json()["result"]["success"] is True
