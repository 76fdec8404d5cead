def _callback_body(country="US", option_id=None, item_total="100.00"):
    body = {
        "id": "ORDER-API-1",
        "shipping_address": {"country_code": country, "admin_area_1": "NY", "admin_area_2": "New York", "postal_code": "10001"},
        "purchase_units": [{"amount": {"currency_code": "USD", "value": item_total, "breakdown": {"item_total": {"currency_code": "USD", "value": item_total}}}}],
    }
    if option_id:
        body["shipping_option"] = {"id": option_id}
    return body


def test_callback_returns_recalculated_unit(api_client):
    response = api_client.post("/api/shipping-callback", json=_callback_body(option_id="1", item_total="55.00"))
    assert response.status_code == 200
    unit = response.json()["purchase_units"][0]
    assert unit["amount"]["value"] == "55.00"
    assert unit["amount"]["breakdown"]["shipping"]["value"] == "0.00"


def test_callback_rejects_non_us_with_422(api_client):
    response = api_client.post("/api/shipping-callback", json=_callback_body(country="MX"))
    assert response.status_code == 422
    assert response.json() == {"name": "UNPROCESSABLE_ENTITY", "details": [{"issue": "COUNTRY_ERROR"}]}


def test_callback_computation_error_is_plain_text_500(api_client):
    body = _callback_body()
    body["purchase_units"][0]["amount"]["breakdown"]["item_total"]["value"] = "not-a-number"
    response = api_client.post("/api/shipping-callback", json=body)
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert "item_total" in response.text


def test_callback_invalid_json_is_plain_text_500(api_client):
    response = api_client.post(
        "/api/shipping-callback", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")


def test_server_keeps_serving_after_failure(api_client):
    failed = api_client.post("/api/shipping-callback", json={"shipping_address": {"country_code": "US"}})
    assert failed.status_code == 500
    assert failed.headers["content-type"].startswith("text/plain")
    assert failed.text == "purchase_units is required"

    response = api_client.post("/api/shipping-callback", json=_callback_body())
    assert response.status_code == 200
    assert response.json()["purchase_units"][0]["amount"]["value"] == "110.00"


def test_express_option_is_marked_selected(api_client):
    response = api_client.post("/api/shipping-callback", json=_callback_body(option_id="2", item_total="12.34"))
    unit = response.json()["purchase_units"][0]
    assert unit["amount"]["value"] == "22.34"
    assert [o["selected"] for o in unit["shipping_options"]] == [False, True]


def test_identical_callbacks_return_identical_bytes(api_client):
    first = api_client.post("/api/shipping-callback", json=_callback_body(option_id="1"))
    second = api_client.post("/api/shipping-callback", json=_callback_body(option_id="1"))
    assert first.status_code == second.status_code == 200
    assert first.content == second.content


def test_negative_zero_item_total_is_unsigned(api_client):
    response = api_client.post("/api/shipping-callback", json=_callback_body(option_id="1", item_total="-0"))
    assert response.status_code == 200
    amount = response.json()["purchase_units"][0]["amount"]
    assert amount["value"] == "0.00"
    assert amount["breakdown"]["item_total"]["value"] == "0.00"


def test_overflowing_item_total_is_plain_text_500(api_client):
    response = api_client.post(
        "/api/shipping-callback", json=_callback_body(option_id="2", item_total="99999999999999999999999999.99")
    )
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("Invalid item_total value")
