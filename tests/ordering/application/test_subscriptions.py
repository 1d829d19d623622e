"""Application tests for change notifications."""

from datetime import timedelta

from ordering.order.cancellation import CancelOrder
from ordering.order.order import Order
from ordering.pricing.calculator import price
from ordering.pricing.delivery import DeliveryRegionConfig
from ordering.pricing.lines import LineItem
from ordering.settings.management import UpdateDeliverySettings, UpdateDiscountSettings
from ordering.subscriptions import (
    DELIVERY,
    DISCOUNTS,
    on_config_changed,
    on_order_changed,
)
from protean import current_domain

LINES = (LineItem(food_id="soup", name="Soup", unit_price=600, quantity=1),)


def _update_delivery(**changes):
    current_domain.process(
        UpdateDeliverySettings(actor_id="admin", actor_is_admin=True, **changes),
        asynchronous=False,
    )


def _create_order():
    order = Order.create(user_id="cust-001", lines=LINES, breakdown=price(LINES, None, 300), city="Galway")
    current_domain.repository_for(Order).add(order)
    return order


class TestConfigChangeListeners:
    def test_listener_receives_delivery_config(self):
        received = []
        on_config_changed(received.append)

        _update_delivery(enabled_region_a=True, fee_region_a=300)

        assert len(received) == 1
        assert received[0].kind == DELIVERY
        assert received[0].config == DeliveryRegionConfig(enabled_region_a=True, fee_region_a=300)
        assert received[0].updated_by == "admin"

    def test_listener_receives_discount_config(self):
        received = []
        on_config_changed(received.append)

        current_domain.process(
            UpdateDiscountSettings(
                actor_id="admin",
                actor_is_admin=True,
                standard_enabled=True,
                standard_code="SAVE10",
                standard_percent=10,
            ),
            asynchronous=False,
        )

        assert received[0].kind == DISCOUNTS
        assert received[0].config.standard_code == "SAVE10"

    def test_unsubscribed_listener_is_not_called(self):
        received = []
        unsubscribe = on_config_changed(received.append)
        unsubscribe()

        _update_delivery(enabled_region_b=True, fee_region_b=700)

        assert received == []

    def test_failing_listener_does_not_block_others(self):
        def broken(change):
            raise RuntimeError("listener crashed")

        received = []
        on_config_changed(broken)
        on_config_changed(received.append)

        _update_delivery(enabled_region_a=True, fee_region_a=300)

        assert len(received) == 1


class TestOrderChangeListeners:
    def test_listener_sees_creation(self):
        received = []
        on_order_changed(received.append)

        order = _create_order()

        assert [change.event for change in received] == ["OrderCreated"]
        assert received[0].order_id == str(order.id)
        assert received[0].status == "pending"

    def test_listener_sees_cancellation(self):
        order = _create_order()
        received = []
        on_order_changed(received.append)

        current_domain.process(
            CancelOrder(
                order_id=str(order.id),
                actor_id="cust-001",
                requested_at=order.created_at + timedelta(minutes=1),
            ),
            asynchronous=False,
        )

        assert received[-1].event == "OrderCancelled"
        assert received[-1].status == "cancelled"
