"""Change notifications for storefront clients.

Clients register plain callables; Protean event handlers call them after the
change has been committed. The pricing and lifecycle code never depends on
anyone listening.

    unsubscribe = on_order_changed(lambda change: print(change.status))
    ...
    unsubscribe()
"""

from dataclasses import dataclass
from typing import Callable

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderProcessingStarted,
    TrackingNumberAssigned,
)
from ordering.order.order import Order
from ordering.pricing.delivery import DeliveryRegionConfig
from ordering.pricing.discounts import DiscountConfig
from ordering.settings.delivery import DeliverySettings
from ordering.settings.discounts import DiscountSettings
from ordering.settings.events import DeliverySettingsUpdated, DiscountSettingsUpdated

logger = structlog.get_logger(__name__)

DELIVERY = "delivery"
DISCOUNTS = "discounts"


@dataclass(frozen=True)
class ConfigChange:
    kind: str  # DELIVERY or DISCOUNTS
    config: object  # DeliveryRegionConfig or DiscountConfig
    updated_by: str | None = None


@dataclass(frozen=True)
class OrderChange:
    order_id: str
    user_id: str
    status: str
    event: str
    is_completed: bool = False
    tracking_number: str | None = None


_config_listeners: list[Callable[[ConfigChange], None]] = []
_order_listeners: list[Callable[[OrderChange], None]] = []


def _subscribe(listeners, callback):
    listeners.append(callback)

    def unsubscribe():
        if callback in listeners:
            listeners.remove(callback)

    return unsubscribe


def on_config_changed(callback: Callable[[ConfigChange], None]) -> Callable[[], None]:
    """Call ``callback`` whenever the delivery or discount settings change."""
    return _subscribe(_config_listeners, callback)


def on_order_changed(callback: Callable[[OrderChange], None]) -> Callable[[], None]:
    """Call ``callback`` whenever an order is created or changes state."""
    return _subscribe(_order_listeners, callback)


def clear_listeners() -> None:
    _config_listeners.clear()
    _order_listeners.clear()


def _notify(listeners, change):
    for callback in list(listeners):
        try:
            callback(change)
        except Exception:
            # A broken listener must not stop the others
            logger.exception("Change listener failed", change=repr(change))


def notify_config_changed(change: ConfigChange) -> None:
    _notify(_config_listeners, change)


def notify_order_changed(change: OrderChange) -> None:
    _notify(_order_listeners, change)


# ---------------------------------------------------------------------------
# Event handlers
# ---------------------------------------------------------------------------
@ordering.event_handler(part_of=DeliverySettings)
class DeliverySettingsNotifier:
    @handle(DeliverySettingsUpdated)
    def on_delivery_settings_updated(self, event: DeliverySettingsUpdated) -> None:
        config = DeliveryRegionConfig(
            enabled_region_a=event.enabled_region_a,
            fee_region_a=event.fee_region_a,
            enabled_region_b=event.enabled_region_b,
            fee_region_b=event.fee_region_b,
            region_a_keyword=event.region_a_keyword,
            eta_region_a=event.eta_region_a,
            eta_region_b=event.eta_region_b,
        )
        notify_config_changed(ConfigChange(kind=DELIVERY, config=config, updated_by=event.updated_by))


@ordering.event_handler(part_of=DiscountSettings)
class DiscountSettingsNotifier:
    @handle(DiscountSettingsUpdated)
    def on_discount_settings_updated(self, event: DiscountSettingsUpdated) -> None:
        config = DiscountConfig(
            standard_enabled=event.standard_enabled,
            standard_code=event.standard_code or "",
            standard_percent=event.standard_percent,
            family_enabled=event.family_enabled,
            family_code=event.family_code or "",
            family_percent=event.family_percent,
        )
        notify_config_changed(ConfigChange(kind=DISCOUNTS, config=config, updated_by=event.updated_by))


@ordering.event_handler(part_of=Order)
class OrderChangeNotifier:
    """Reports every committed order change with the order's state after it."""

    def _publish(self, order_id, event_name):
        order = current_domain.repository_for(Order).get(str(order_id))
        logger.debug("Publishing order change", order_id=str(order_id), change=event_name)
        notify_order_changed(
            OrderChange(
                order_id=str(order.id),
                user_id=str(order.user_id),
                status=order.status,
                event=event_name,
                is_completed=bool(order.is_completed),
                tracking_number=order.tracking_number,
            )
        )

    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        self._publish(event.order_id, "OrderCreated")

    @handle(OrderProcessingStarted)
    def on_processing_started(self, event: OrderProcessingStarted) -> None:
        self._publish(event.order_id, "OrderProcessingStarted")

    @handle(OrderCompleted)
    def on_order_completed(self, event: OrderCompleted) -> None:
        self._publish(event.order_id, "OrderCompleted")

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        self._publish(event.order_id, "OrderCancelled")

    @handle(TrackingNumberAssigned)
    def on_tracking_number_assigned(self, event: TrackingNumberAssigned) -> None:
        self._publish(event.order_id, "TrackingNumberAssigned")
