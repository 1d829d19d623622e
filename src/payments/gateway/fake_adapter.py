"""Configurable fake payment gateway for development and testing.

This adapter simulates a card processor without any external calls.
Intents are kept in memory. Whether an intent succeeds is decided when it is
retrieved, using the behaviour configured at that moment, the way a customer
confirming (or failing to confirm) a card would.
"""

from dataclasses import replace
from uuid import uuid4

from payments.gateway.port import SUCCEEDED, GatewayError, PaymentGateway, PaymentIntent

REQUIRES_PAYMENT_METHOD = "requires_payment_method"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.intents: dict[str, PaymentIntent] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_intent(self, amount: int, currency: str, metadata: dict | None = None) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": amount,
                "currency": currency,
                "metadata": dict(metadata or {}),
            }
        )
        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = PaymentIntent(
            intent_id=intent_id,
            amount=amount,
            currency=currency,
            status=REQUIRES_PAYMENT_METHOD,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            metadata=dict(metadata or {}),
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        self.calls.append({"method": "retrieve_intent", "intent_id": intent_id})
        intent = self.intents.get(intent_id)
        if intent is None:
            raise GatewayError(f"No such payment intent: {intent_id}")

        if self.should_succeed:
            intent = replace(intent, status=SUCCEEDED, failure_reason=None)
        else:
            intent = replace(intent, status=REQUIRES_PAYMENT_METHOD, failure_reason=self.failure_reason)
        self.intents[intent_id] = intent
        return intent
