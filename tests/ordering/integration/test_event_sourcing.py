"""Integration tests for Event Sourcing specifics: event store round-trips,
event replay, and aggregate reconstruction.
"""

from datetime import timedelta

from ordering.order.cancellation import CancelOrder
from ordering.order.fulfillment import StartProcessing
from ordering.order.lifecycle import OrderStatus
from ordering.order.order import Order
from ordering.pricing.calculator import price
from ordering.pricing.discounts import AppliedDiscount, DiscountKind
from ordering.pricing.lines import Addon, LineItem
from protean import current_domain

LINES = (
    LineItem(
        food_id="pizza",
        name="Pizza",
        unit_price=1000,
        quantity=2,
        addons=(Addon("olives", 100), Addon("basil", 0)),
        customization="Crispy",
    ),
)


def _create_order():
    discount = AppliedDiscount(code="FAMILY", percent=15, kind=DiscountKind.FAMILY)
    order = Order.create(
        user_id="cust-es-001",
        lines=LINES,
        breakdown=price(LINES, discount, 700),
        city="Dublin",
        applied_discount=discount,
        payment_intent_id="pi_test_001",
    )
    current_domain.repository_for(Order).add(order)
    return str(order.id)


def _read_events(order_id):
    return current_domain.event_store.store.read(f"ordering::order-{order_id}")


class TestEventStorePersistence:
    def test_events_stored_in_event_store(self):
        order_id = _create_order()

        messages = _read_events(order_id)
        assert len(messages) == 1
        assert messages[0].metadata.headers.type == "Ordering.OrderCreated.v1"

    def test_transitions_append_events(self):
        order_id = _create_order()
        created_at = current_domain.repository_for(Order).get(order_id).created_at
        current_domain.process(
            StartProcessing(
                order_id=order_id,
                actor_id="admin",
                actor_is_admin=True,
                requested_at=created_at + timedelta(minutes=15),
            ),
            asynchronous=False,
        )
        current_domain.process(
            CancelOrder(order_id=order_id, actor_id="admin", actor_is_admin=True),
            asynchronous=False,
        )

        event_types = [m.metadata.headers.type for m in _read_events(order_id)]
        assert event_types == [
            "Ordering.OrderCreated.v1",
            "Ordering.OrderProcessingStarted.v1",
            "Ordering.OrderCancelled.v1",
        ]


class TestEventReplayRoundTrip:
    def test_aggregate_reconstructed_from_events(self):
        order_id = _create_order()

        order = current_domain.repository_for(Order).get(order_id)

        assert order.user_id == "cust-es-001"
        assert order.status == OrderStatus.PENDING.value
        assert order.city == "Dublin"
        assert order.discount_code == "FAMILY"
        assert order.payment_intent_id == "pi_test_001"
        assert order.pricing.subtotal == 2200
        assert order.pricing.discount == 330
        assert order.pricing.delivery_fee == 700
        assert order.pricing.total_amount == 2570

    def test_line_items_survive_replay(self):
        order_id = _create_order()

        order = current_domain.repository_for(Order).get(order_id)

        assert order.line_items() == LINES

    def test_item_ids_are_stable_across_replays(self):
        order_id = _create_order()

        first = {str(item.id) for item in current_domain.repository_for(Order).get(order_id).items}
        second = {str(item.id) for item in current_domain.repository_for(Order).get(order_id).items}

        assert first == second

    def test_cancellation_survives_replay(self):
        order_id = _create_order()
        current_domain.process(
            CancelOrder(order_id=order_id, actor_id="cust-es-001"),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_by == "cust-es-001"


class TestEventStoreStreamNaming:
    def test_event_version_is_v1(self):
        order_id = _create_order()

        for msg in _read_events(order_id):
            assert msg.metadata.headers.type.endswith(".v1")
