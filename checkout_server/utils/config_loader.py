"""
Platform configuration loader (API base, credentials, callback URLs).

Non-secret settings live in config/platform_config.yml; credentials and
per-deployment values come from the environment (.env supported) and win
over the YAML file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "platform_config.yml"

# env var -> PlatformConfig field
_ENV_OVERRIDES = {
    "PAYPAL_API_BASE": "api_base",
    "CLIENT_ID": "client_id",
    "APP_SECRET": "app_secret",
    "WEBHOOK_ID": "webhook_id",
    "BASE_URL": "base_url",
    "CALLBACK_URL": "callback_url",
    "LOG_LEVEL": "log_level",
    "INTEGRATIONS_MODE": "integrations_mode",
}


class ExperienceConfig(BaseModel):
    return_url: str = "http://localhost:8888/"
    cancel_url: str = "https://example.com/cancel"


class PlatformConfig(BaseModel):
    api_base: str = "https://api-m.sandbox.paypal.com"
    client_id: Optional[str] = None
    app_secret: Optional[str] = None
    webhook_id: Optional[str] = None
    base_url: str = "http://localhost:8888"
    callback_url: Optional[str] = None
    timeout_seconds: float = Field(default=20.0, gt=0, le=120)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    integrations_mode: Literal["auto", "real", "live", "mock", "test"] = "auto"
    experience: ExperienceConfig = Field(default_factory=ExperienceConfig)

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.app_secret)

    @property
    def shipping_callback_url(self) -> str:
        return self.callback_url or f"{self.base_url.rstrip('/')}/api/shipping-callback"

    def use_real_client(self) -> bool:
        if self.integrations_mode in {"real", "live"}:
            return True
        if self.integrations_mode in {"mock", "test"}:
            return False
        return self.has_credentials


def _env_overrides() -> dict:
    overrides = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name, "").strip()
        if value:
            overrides[field_name] = value.upper() if field_name == "log_level" else value
    if "integrations_mode" in overrides:
        overrides["integrations_mode"] = overrides["integrations_mode"].lower()
    return overrides


def load_platform_config(config_path: Optional[Path] = None) -> PlatformConfig:
    """
    Load and validate platform configuration.

    Args:
        config_path: Path to a YAML file. Defaults to config/platform_config.yml;
            a missing default file means "defaults + environment".

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist
        ValidationError: If the merged config doesn't match the schema
    """
    data: dict = {}
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Platform config file not found: {config_path}")

    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning("Platform config %s not found; using defaults and environment", path)

    data.update(_env_overrides())

    try:
        cfg = PlatformConfig(**data)
        logger.info("Loaded platform config (api_base=%s, credentials=%s)", cfg.api_base, cfg.has_credentials)
        return cfg
    except ValidationError as e:
        logger.error("Platform config validation failed: %s", e)
        raise
