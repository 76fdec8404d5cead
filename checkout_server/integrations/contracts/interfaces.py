from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class OrderIntent(str, Enum):
    CAPTURE = "CAPTURE"
    AUTHORIZE = "AUTHORIZE"


class PaymentSourceType(str, Enum):
    PAYPAL = "paypal"
    VENMO = "venmo"
    CARD = "card"
    APPLE_PAY = "apple_pay"
    GOOGLE_PAY = "google_pay"


class ShippingPreference(str, Enum):
    GET_FROM_FILE = "GET_FROM_FILE"
    SET_PROVIDED_ADDRESS = "SET_PROVIDED_ADDRESS"
    NO_SHIPPING = "NO_SHIPPING"


class WebhookEventType(str, Enum):
    PAYMENT_TOKEN_CREATED = "VAULT.PAYMENT-TOKEN.CREATED"
    CREDIT_CARD_CREATED = "VAULT.CREDIT-CARD.CREATED"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class Address:
    address_line_1: str
    admin_area_2: str                    # city
    admin_area_1: str                    # state / province
    postal_code: str
    country_code: str = "US"


@dataclass
class ContactInfo:
    first_name: str
    last_name: str
    address: Address

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class CheckoutContext:
    """Per-request checkout state handed to every handler."""
    request_id: str
    customer_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WebhookHeaders:
    auth_algo: Optional[str]
    cert_id: Optional[str]
    transmission_id: Optional[str]
    transmission_sig: Optional[str]
    transmission_time: Optional[str]


# ---------------------------------------------------------------------------
# Platform client interface
# ---------------------------------------------------------------------------

class PlatformClient(ABC):
    """
    Abstract interface for the payment platform REST API.

    Both the real HTTP client and the mock client implement this, so the
    API layer never cares which one it is talking to. Every method returns
    the platform's JSON body as a dict (or list) and raises
    PlatformAPIError for non-2xx answers.
    """

    @property
    @abstractmethod
    def client_id(self) -> Optional[str]: ...

    # -- auth -------------------------------------------------------------

    @abstractmethod
    async def get_access_token(self) -> str: ...

    @abstractmethod
    async def get_id_token(self, customer_id: Optional[str] = None) -> str: ...

    @abstractmethod
    async def generate_client_token(self) -> Dict[str, Any]: ...

    # -- orders -----------------------------------------------------------

    @abstractmethod
    async def create_order(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_order(self, order_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def capture_order(self, order_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def authorize_order(self, order_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def capture_authorization(self, authorization_id: str) -> Dict[str, Any]: ...

    # -- vault ------------------------------------------------------------

    @abstractmethod
    async def create_setup_token(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]: ...

    @abstractmethod
    async def create_payment_token(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_payment_token(self, token_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def list_payment_tokens(self, customer_id: str) -> List[Dict[str, Any]]: ...

    # -- billing agreements -----------------------------------------------

    @abstractmethod
    async def create_billing_agreement_token(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def create_billing_agreement(self, token_id: str) -> Dict[str, Any]: ...

    # -- subscriptions ----------------------------------------------------

    @abstractmethod
    async def create_product(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]: ...

    @abstractmethod
    async def create_plan(self, payload: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_plan(self, plan_id: str) -> Dict[str, Any]: ...

    # -- webhooks ---------------------------------------------------------

    @abstractmethod
    async def verify_webhook_signature(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_webhook(self, webhook_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def list_webhook_events(self) -> Dict[str, Any]: ...
