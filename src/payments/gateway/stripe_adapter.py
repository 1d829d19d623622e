"""Stripe payment gateway adapter.

Creates PaymentIntents with automatic payment methods; the storefront client
confirms them with Stripe.js using the returned client secret.
"""

import stripe
import structlog

from payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent

logger = structlog.get_logger(__name__)


def _to_intent(intent) -> PaymentIntent:
    error = getattr(intent, "last_payment_error", None)
    return PaymentIntent(
        intent_id=intent.id,
        amount=intent.amount,
        currency=intent.currency,
        status=intent.status,
        client_secret=getattr(intent, "client_secret", None),
        failure_reason=getattr(error, "message", None) if error else None,
    )


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def create_intent(self, amount: int, currency: str, metadata: dict | None = None) -> PaymentIntent:
        stripe.api_key = self.api_key
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata={key: str(value) for key, value in (metadata or {}).items()},
            )
        except stripe.StripeError as exc:
            logger.error("Stripe payment intent creation failed", amount=amount, error=str(exc))
            raise GatewayError(str(exc)) from exc
        return _to_intent(intent)

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        stripe.api_key = self.api_key
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id)
        except stripe.StripeError as exc:
            logger.error("Stripe payment intent lookup failed", intent_id=intent_id, error=str(exc))
            raise GatewayError(str(exc)) from exc
        return _to_intent(intent)
