"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import (
    CartCleared,
    CartDiscountApplied,
    CartDiscountRemoved,
    CartItemAdded,
    CartItemCustomized,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderProcessingStarted,
    TrackingNumberAssigned,
)
from ordering.order.order import Order
from ordering.pricing.discounts import AppliedDiscount, DiscountKind
from protean.exceptions import ValidationError
from protean.testing import given as given_
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderCreated": OrderCreated,
    "OrderProcessingStarted": OrderProcessingStarted,
    "OrderCompleted": OrderCompleted,
    "OrderCancelled": OrderCancelled,
    "TrackingNumberAssigned": TrackingNumberAssigned,
}

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemCustomized": CartItemCustomized,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
    "CartDiscountApplied": CartDiscountApplied,
    "CartDiscountRemoved": CartDiscountRemoved,
}

ORDER_PLACED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_id():
    return "ord-001"


@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def error():
    """Container for captured validation errors (used by cart tests)."""
    return {"exc": None}


def minutes_after_placement(minutes):
    return ORDER_PLACED_AT + timedelta(minutes=minutes)


@pytest.fixture()
def after_placement():
    """Moment a given number of minutes after the order was placed."""
    return minutes_after_placement


# ---------------------------------------------------------------------------
# Event fixtures (past tense: what happened)
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_created(order_id, customer_id):
    return OrderCreated(
        order_id=order_id,
        user_id=customer_id,
        items=json.dumps(
            [
                {
                    "id": "item-1",
                    "food_id": "pizza",
                    "name": "Margherita",
                    "unit_price": 1100,
                    "quantity": 2,
                    "addons": json.dumps([]),
                }
            ]
        ),
        subtotal=2200,
        discount=0,
        delivery_fee=300,
        total_amount=2500,
        city="Galway",
        payment_intent_id="pi_test_001",
        created_at=ORDER_PLACED_AT,
    )


@pytest.fixture()
def processing_started(order_id):
    return OrderProcessingStarted(order_id=order_id, started_by="admin", started_at=minutes_after_placement(12))


@pytest.fixture()
def tracking_number_assigned(order_id):
    return TrackingNumberAssigned(
        order_id=order_id,
        tracking_number="DPD-001",
        assigned_at=minutes_after_placement(30),
    )


@pytest.fixture()
def order_completed(order_id):
    return OrderCompleted(order_id=order_id, completed_by="admin", completed_at=minutes_after_placement(60))


@pytest.fixture()
def order_cancelled(order_id, customer_id):
    return OrderCancelled(
        order_id=order_id,
        cancelled_by=customer_id,
        previous_status="pending",
        cancelled_at=minutes_after_placement(2),
    )


# ---------------------------------------------------------------------------
# Given steps: Order (event sourcing via protean.testing)
# ---------------------------------------------------------------------------
@given("an order was placed", target_fixture="order")
def _(order_created):
    return given_(Order, order_created)


@given("the order is being processed", target_fixture="order")
def _(order, processing_started):
    return order.after(processing_started)


@given("a tracking number was assigned", target_fixture="order")
def _(order, tracking_number_assigned):
    return order.after(tracking_number_assigned)


@given("the order was completed", target_fixture="order")
def _(order, order_completed):
    return order.after(order_completed)


@given("the order was cancelled", target_fixture="order")
def _(order, order_cancelled):
    return order.after(order_cancelled)


# ---------------------------------------------------------------------------
# Given steps: Shopping Cart (standard DDD)
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart(customer_id):
    cart = ShoppingCart.create(user_id=customer_id)
    cart._events.clear()
    return cart


@given(parsers.cfparse('the cart holds {qty:d} "{food_id}" at {price:d} cents'), target_fixture="cart")
def cart_with_food(cart, qty, food_id, price):
    cart.add_item(food_id=food_id, unit_price=price, quantity=qty)
    cart._events.clear()
    return cart


@given(parsers.cfparse('the discount code "{code}" is applied'), target_fixture="cart")
def cart_with_discount(cart, code):
    cart.apply_discount(AppliedDiscount(code=code, percent=10, kind=DiscountKind.STANDARD))
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Then steps: Order (shared, plain assertions)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert order.status == status


@then("the order action fails with a validation error")
def _(order):
    assert order.rejected
    assert isinstance(order.rejection, ValidationError)


@then(parsers.cfparse("the order action is rejected with {error_type}"))
def _(order, error_type):
    assert order.rejected
    assert type(order.rejection).__name__ == error_type


@then(parsers.cfparse("an {event_type} order event is raised"))
def _(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert event_cls in order.events


@then(parsers.cfparse("a {event_type} order event is raised"))
def _(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert event_cls in order.events


# ---------------------------------------------------------------------------
# Then steps: Cart (shared)
# ---------------------------------------------------------------------------
@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"
