"""
Typed gateway configuration.

``load_config`` reads the ``PAYZA_*`` Django settings once and returns an
immutable ``GatewayConfig`` which is handed to the checkout builder and the
IPN reconciler.
"""
import enum
from dataclasses import dataclass
from typing import Any, Optional

from .exceptions import ConfigurationError

LIVE_CHECKOUT_URL = "https://secure.payza.com/checkout"
SANDBOX_CHECKOUT_URL = "https://sandbox.payza.com/sandbox/payprocess.aspx"
LIVE_IPN_URL = "https://secure.payza.com/ipn2.ashx"
SANDBOX_IPN_URL = "https://sandbox.payza.com/sandbox/ipn2.ashx"

# https://dev.payza.com/resources/references/currency-codes
SUPPORTED_CURRENCIES = frozenset({
    "AUD", "BGN", "CAD", "CHF", "CZK", "DKK", "EEK", "EUR", "GBP", "HKD", "HUF", "INR",
    "LTL", "MYR", "MKD", "NOK", "NZD", "PLN", "RON", "SEK", "SGD", "USD", "ZAR",
})

_TRUE = {"yes", "true", "1", "on"}
_FALSE = {"no", "false", "0", "off", ""}


class Environment(str, enum.Enum):
    SANDBOX = "sandbox"
    LIVE = "live"


@dataclass(frozen=True)
class GatewayConfig:
    environment: Environment = Environment.SANDBOX
    sandbox_email: str = ""
    live_email: str = ""
    enabled: bool = False
    ipn_configured: bool = False
    debug: bool = False
    title: str = "Payza"
    description: str = ""
    alert_url: str = ""
    live_checkout_url: str = LIVE_CHECKOUT_URL
    sandbox_checkout_url: str = SANDBOX_CHECKOUT_URL
    live_ipn_url: str = LIVE_IPN_URL
    sandbox_ipn_url: str = SANDBOX_IPN_URL

    @property
    def is_sandbox(self) -> bool:
        return self.environment is Environment.SANDBOX

    @property
    def merchant_email(self) -> str:
        email = self.sandbox_email if self.is_sandbox else self.live_email
        if not email:
            raise ConfigurationError(f"No Payza merchant email configured for {self.environment.value} mode")
        return email

    @property
    def checkout_url(self) -> str:
        return self.sandbox_checkout_url if self.is_sandbox else self.live_checkout_url

    @property
    def ipn_exchange_url(self) -> str:
        return self.sandbox_ipn_url if self.is_sandbox else self.live_ipn_url

    @property
    def display_description(self) -> str:
        if self.is_sandbox:
            return f"{self.description} SANDBOX MODE ENABLED".strip()
        return self.description

    @property
    def ipn_ready(self) -> bool:
        # live payments only reach us if the merchant registered the alert URL with Payza
        return not (self.enabled and not self.is_sandbox and not self.ipn_configured)


def _flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a yes/no flag, got {value!r}")


def _environment(value: Any) -> Environment:
    try:
        return Environment(str(value or "sandbox").strip().lower())
    except ValueError:
        raise ConfigurationError(f"PAYZA_ENVIRONMENT must be 'sandbox' or 'live', got {value!r}") from None


def load_config(settings=None) -> GatewayConfig:
    if settings is None:
        from django.conf import settings

    def get(name: str, default: Any = "") -> Any:
        return getattr(settings, name, default)

    return GatewayConfig(
        environment=_environment(get("PAYZA_ENVIRONMENT", "sandbox")),
        sandbox_email=(get("PAYZA_SANDBOX_EMAIL") or "").strip(),
        live_email=(get("PAYZA_LIVE_EMAIL") or "").strip(),
        enabled=_flag("PAYZA_ENABLED", get("PAYZA_ENABLED", False)),
        ipn_configured=_flag("PAYZA_IPN_CONFIGURED", get("PAYZA_IPN_CONFIGURED", False)),
        debug=_flag("PAYZA_DEBUG", get("PAYZA_DEBUG", False)),
        title=get("PAYZA_TITLE", "Payza") or "Payza",
        description=get("PAYZA_DESCRIPTION", "") or "",
        alert_url=(get("PAYZA_ALERT_URL") or "").strip(),
    )


def is_available(config: GatewayConfig, currency: Optional[str]) -> bool:
    """Whether Payza can be offered for a payment in ``currency``."""
    if not config.enabled:
        return False
    if not (config.sandbox_email if config.is_sandbox else config.live_email):
        return False
    if not config.is_sandbox and not config.ipn_configured:
        return False
    return (currency or "").upper() in SUPPORTED_CURRENCIES
