"""Checkout: turning a priced cart into a paid order.

Checkout is two steps around the customer's card confirmation:

1. ``BeginCheckout`` prices the cart against one snapshot of the store
   settings, creates a payment intent for the total and freezes the priced
   cart on the ``ShoppingCart``.
2. ``PlaceOrder`` asks the payment processor how the intent ended. A
   successful payment creates the ``Order`` from the frozen snapshot and
   empties the cart. An unsuccessful one discards the snapshot and creates
   nothing.

While a checkout is open the cart cannot change. ``AbandonCheckout`` closes an
unpaid checkout so the customer can edit the cart again; a checkout whose
payment already went through can only end in ``PlaceOrder``.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.quote import quote_cart
from ordering.domain import ordering
from ordering.errors import DeliveryUnavailable
from ordering.order.order import Order
from ordering.settings.delivery import load_delivery_config
from ordering.settings.discounts import load_discount_config
from payments.gateway import get_currency, get_gateway

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class BeginCheckout:
    """Price the cart for delivery to ``city`` and open a payment intent for the total."""

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    city = String(max_length=255)


@ordering.command(part_of="ShoppingCart")
class PlaceOrder:
    """Create the order once the customer has confirmed payment."""

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255)


@ordering.command(part_of="ShoppingCart")
class AbandonCheckout:
    """Close an unpaid checkout so the cart can be changed again."""

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class CheckoutHandler:
    @handle(BeginCheckout)
    def begin_checkout(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        cart.assert_editable()

        if not cart.entries:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})
        city = (command.city or "").strip()
        if not city:
            raise ValidationError({"city": ["A delivery city is required"]})

        quote = quote_cart(cart, city, load_delivery_config(), load_discount_config())
        if not quote.deliverable:
            raise DeliveryUnavailable(f"Delivery is not available to {city}")
        if quote.discount is None and cart.applied_discount is not None:
            # Code was disabled after it was applied
            cart.applied_discount = None
        elif quote.discount is not None and quote.discount != cart.discount():
            cart.apply_discount(quote.discount)

        breakdown = quote.breakdown
        intent = get_gateway().create_intent(
            amount=breakdown.total,
            currency=get_currency(),
            metadata={"cart_id": str(cart.id), "user_id": str(cart.user_id)},
        )
        cart.begin_checkout(payment_intent_id=intent.intent_id, city=city, breakdown=breakdown)
        repo.add(cart)

        logger.info(
            "Checkout started",
            cart_id=str(cart.id),
            payment_intent_id=intent.intent_id,
            total=breakdown.total,
        )
        return {
            "payment_intent_id": intent.intent_id,
            "client_secret": intent.client_secret,
            "currency": intent.currency,
            **quote.to_dict(),
        }

    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)

        snapshot = cart.checkout
        if snapshot is None:
            raise ValidationError({"checkout": ["No checkout is in progress for this cart"]})
        if snapshot.payment_intent_id != command.payment_intent_id:
            raise ValidationError({"payment_intent_id": ["Payment does not belong to this checkout"]})

        intent = get_gateway().retrieve_intent(command.payment_intent_id)
        if intent.amount != snapshot.total:
            raise ValidationError({"payment_intent_id": ["Paid amount does not match the order total"]})

        if not intent.succeeded:
            cart.abandon_checkout(reason=intent.failure_reason or intent.status)
            repo.add(cart)
            logger.warning(
                "Payment not completed",
                cart_id=str(cart.id),
                payment_intent_id=intent.intent_id,
                status=intent.status,
            )
            return None

        order = Order.create(
            user_id=cart.user_id,
            lines=cart.line_items(),
            breakdown=snapshot.breakdown(),
            city=snapshot.city,
            applied_discount=cart.discount(),
            payment_intent_id=intent.intent_id,
        )
        current_domain.repository_for(Order).add(order)

        cart.mark_checked_out(order_id=order.id)
        repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            total=snapshot.total,
        )
        return str(order.id)

    @handle(AbandonCheckout)
    def abandon_checkout(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)

        snapshot = cart.checkout
        if snapshot is None:
            raise ValidationError({"checkout": ["No checkout is in progress for this cart"]})

        intent = get_gateway().retrieve_intent(snapshot.payment_intent_id)
        if intent.succeeded:
            raise ValidationError({"checkout": ["Payment already succeeded; place the order instead"]})

        cart.abandon_checkout(reason="Abandoned by customer")
        repo.add(cart)

        logger.info("Checkout abandoned", cart_id=str(cart.id), payment_intent_id=snapshot.payment_intent_id)
