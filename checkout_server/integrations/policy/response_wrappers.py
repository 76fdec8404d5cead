from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError


class PlatformAPIError(Exception):
    """Non-2xx answer from the payment platform; carries its status and body text."""

    def __init__(self, status_code: int, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class AccessTokenResponseModel(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    id_token: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class ClientTokenResponseModel(BaseModel):
    client_token: str
    expires_in: int = 0
    raw: Dict[str, Any] = Field(default_factory=dict)


class WebhookVerificationModel(BaseModel):
    verification_status: str
    raw: Dict[str, Any] = Field(default_factory=dict)

    @property
    def verified(self) -> bool:
        return self.verification_status == "SUCCESS"


def normalize_access_token_response(raw: Dict[str, Any]) -> AccessTokenResponseModel:
    return _build_model(
        AccessTokenResponseModel,
        {
            "access_token": _first_non_empty(raw, "access_token"),
            "token_type": str(_first_non_empty(raw, "token_type", default="Bearer")),
            "expires_in": int(_first_non_empty(raw, "expires_in", default=0)),
            "id_token": raw.get("id_token"),
            "raw": raw,
        },
        raw,
    )


def normalize_id_token_response(raw: Dict[str, Any]) -> str:
    return str(_first_non_empty(raw, "id_token"))


def normalize_client_token_response(raw: Dict[str, Any]) -> ClientTokenResponseModel:
    return _build_model(
        ClientTokenResponseModel,
        {
            "client_token": _first_non_empty(raw, "client_token"),
            "expires_in": int(_first_non_empty(raw, "expires_in", default=0)),
            "raw": raw,
        },
        raw,
    )


def normalize_verification_response(raw: Dict[str, Any]) -> WebhookVerificationModel:
    status = str(_first_non_empty(raw, "verification_status", default="FAILURE")).upper()
    return _build_model(WebhookVerificationModel, {"verification_status": status, "raw": raw}, raw)


def normalize_payment_tokens(raw: Any) -> List[Dict[str, Any]]:
    if isinstance(raw, list):
        return raw
    tokens = (raw or {}).get("payment_tokens")
    if tokens is None:
        return []
    if not isinstance(tokens, list):
        raise IntegrationResponseError("payment_tokens must be a list.", payload=raw)
    return tokens


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
