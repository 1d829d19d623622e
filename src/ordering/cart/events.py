"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A food selection was added to the cart, or merged into a matching entry."""

    __version__ = 1

    cart_id = Identifier(required=True)
    entry_key = String(required=True)
    food_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart entry was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    entry_key = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemCustomized:
    """The free-text customization of a cart entry was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    entry_key = String(required=True)
    customization = String()


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """An entry was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    entry_key = String(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """The customer emptied the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CartDiscountApplied:
    """A discount code was accepted, replacing any previously applied code."""

    __version__ = 1

    cart_id = Identifier(required=True)
    code = String(required=True)
    percent = Float(required=True)
    kind = String(required=True)


@ordering.event(part_of="ShoppingCart")
class CartDiscountRemoved:
    """The applied discount code was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CheckoutStarted:
    """The cart was priced and a payment intent was created for its total."""

    __version__ = 1

    cart_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    city = String(required=True)
    total = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CheckoutAbandoned:
    """Payment did not succeed; the checkout was discarded without an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    reason = String()
    abandoned_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCheckedOut:
    """Payment succeeded and the cart became an order; the cart is now empty."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
