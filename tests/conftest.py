"""Pytest fixtures for the checkout API and platform clients."""

import pytest
from fastapi.testclient import TestClient

from checkout_server.api.dependencies import get_config, get_platform_client
from checkout_server.api.main import app
from checkout_server.integrations.clients.mocks.paypal import PayPalMockClient
from checkout_server.utils.config_loader import PlatformConfig


@pytest.fixture
def config():
    return PlatformConfig(
        client_id="test-client",
        app_secret="test-secret",
        webhook_id="WH-TEST",
        base_url="http://testserver",
        integrations_mode="mock",
    )


@pytest.fixture
def mock_client():
    """Fresh in-memory platform client per test."""
    return PayPalMockClient(webhook_id="WH-TEST")


@pytest.fixture
def api_client(config, mock_client):
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_platform_client] = lambda: mock_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
