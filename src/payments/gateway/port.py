"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.

Amounts are integer minor units (cents).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

SUCCEEDED = "succeeded"


class GatewayError(Exception):
    """The payment processor could not be reached or rejected the request."""


@dataclass(frozen=True)
class PaymentIntent:
    """A request to collect ``amount`` from the customer, as the processor sees it."""

    intent_id: str
    amount: int
    currency: str
    status: str
    client_secret: str | None = None
    metadata: dict = field(default_factory=dict)
    failure_reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_intent(self, amount: int, currency: str, metadata: dict | None = None) -> PaymentIntent:
        """Create a payment intent the client confirms with the customer's card."""
        ...

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        """Fetch the current state of a payment intent."""
        ...
