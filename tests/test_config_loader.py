import pytest

from checkout_server.utils.config_loader import PlatformConfig, load_platform_config

ENV_NAMES = ["PAYPAL_API_BASE", "CLIENT_ID", "APP_SECRET", "WEBHOOK_ID", "BASE_URL", "CALLBACK_URL", "LOG_LEVEL", "INTEGRATIONS_MODE"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_yaml_values_are_loaded(tmp_path):
    path = tmp_path / "platform.yml"
    path.write_text("api_base: https://api.example\nbase_url: https://shop.example\ntimeout_seconds: 5\n", encoding="utf-8")

    cfg = load_platform_config(path)

    assert cfg.api_base == "https://api.example"
    assert cfg.timeout_seconds == 5
    assert cfg.shipping_callback_url == "https://shop.example/api/shipping-callback"
    assert cfg.has_credentials is False


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "platform.yml"
    path.write_text("base_url: https://shop.example\nlog_level: INFO\n", encoding="utf-8")
    monkeypatch.setenv("CLIENT_ID", "cid")
    monkeypatch.setenv("APP_SECRET", "secret")
    monkeypatch.setenv("CALLBACK_URL", "https://tunnel.example/cb")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("INTEGRATIONS_MODE", "MOCK")

    cfg = load_platform_config(path)

    assert cfg.has_credentials is True
    assert cfg.shipping_callback_url == "https://tunnel.example/cb"
    assert cfg.log_level == "DEBUG"
    assert cfg.integrations_mode == "mock"
    assert cfg.use_real_client() is False


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_platform_config(tmp_path / "missing.yml")


@pytest.mark.parametrize(
    "mode,credentials,expected",
    [
        ("auto", False, False),
        ("auto", True, True),
        ("real", False, True),
        ("live", False, True),
        ("test", True, False),
    ],
)
def test_client_selection(mode, credentials, expected):
    values = {"client_id": "cid", "app_secret": "secret"} if credentials else {}
    assert PlatformConfig(integrations_mode=mode, **values).use_real_client() is expected
