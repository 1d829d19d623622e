"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway for production, selected with ``PAYMENT_GATEWAY=stripe``
"""

import os

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent
from payments.gateway.stripe_adapter import StripeGateway

__all__ = [
    "FakeGateway",
    "GatewayError",
    "PaymentGateway",
    "PaymentIntent",
    "StripeGateway",
    "get_currency",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def _gateway_from_environment() -> PaymentGateway:
    if os.environ.get("PAYMENT_GATEWAY", "fake").lower() == "stripe":
        api_key = os.environ.get("STRIPE_SECRET_KEY")
        if not api_key:
            raise RuntimeError("STRIPE_SECRET_KEY must be set when PAYMENT_GATEWAY=stripe")
        return StripeGateway(api_key=api_key)
    return FakeGateway()


def get_currency() -> str:
    return os.environ.get("STORE_CURRENCY", "eur").lower()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _gateway_from_environment()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
