"""Order aggregate (Event Sourced): a price-frozen snapshot of a paid cart.

The Order aggregate uses event sourcing: all state changes are captured as
domain events, and the current state is rebuilt by replaying events via
@apply decorators. Because every write carries the aggregate's expected
version, two conflicting transitions on the same order cannot both commit.

Monetary fields are fixed by OrderCreated and never recomputed: later changes
to delivery or discount settings do not touch existing orders. After creation
only the status, the completion flag and the tracking number change.

See ``ordering.order.lifecycle`` for the state machine and its guards.
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

from protean import apply
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import InvalidTransition, PermissionDenied
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderProcessingStarted,
    TrackingNumberAssigned,
)
from ordering.order.lifecycle import OrderStatus, ensure_transition
from ordering.pricing.lines import Addon, LineItem


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderPricing:
    """Financial summary of an order, in cents: subtotal, discount, delivery fee and total.

    Prices are locked at checkout and never change, even if the menu prices or
    store settings change later.
    """

    subtotal = Integer(default=0)
    discount = Integer(default=0)
    delivery_fee = Integer(default=0)
    total_amount = Integer(default=0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line of the order: one food with its selected add-ons at a quantity."""

    food_id = Identifier(required=True)
    name = String(max_length=255)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    addons = Text()  # JSON: list of {name, price, is_available}
    customization = String(max_length=500)

    def to_line_item(self) -> LineItem:
        addons = json.loads(self.addons) if self.addons else []
        return LineItem(
            food_id=str(self.food_id),
            unit_price=self.unit_price,
            quantity=self.quantity,
            name=self.name or "",
            addons=tuple(Addon.from_dict(addon) for addon in addons),
            customization=self.customization,
        )


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@ordering.aggregate(is_event_sourced=True)
class Order:
    user_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    discount_code = String(max_length=100)
    discount_percent = Float()
    city = String(max_length=255)
    payment_intent_id = String(max_length=255)
    is_completed = Boolean(default=False)
    tracking_number = String(max_length=255)
    cancelled_by = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        user_id,
        lines,
        breakdown,
        city,
        applied_discount=None,
        payment_intent_id=None,
    ):
        """Create a pending order from a priced cart.

        Args:
            user_id: The customer placing the order.
            lines: The cart's ``LineItem`` values.
            breakdown: The ``PriceBreakdown`` the customer paid.
            city: Delivery city the fee was resolved for.
            applied_discount: The ``AppliedDiscount`` used for pricing, if any.
            payment_intent_id: The payment processor's reference.
        """
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})
        if breakdown.total != breakdown.subtotal + breakdown.delivery_fee - breakdown.discount:
            raise ValidationError({"pricing": ["Total must equal subtotal plus delivery fee minus discount"]})

        now = datetime.now(UTC)

        # Pre-generate item IDs for deterministic replay
        items_data = [
            {
                "id": str(uuid4()),
                "food_id": str(line.food_id),
                "name": line.name,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "addons": json.dumps([addon.to_dict() for addon in line.addons]),
                "customization": line.customization,
            }
            for line in lines
        ]

        order = cls._create_new()
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(items_data),
                subtotal=breakdown.subtotal,
                discount=breakdown.discount,
                discount_code=applied_discount.code if applied_discount else None,
                discount_percent=applied_discount.percent if applied_discount else None,
                delivery_fee=breakdown.delivery_fee,
                total_amount=breakdown.total,
                city=city,
                payment_intent_id=payment_intent_id,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(item.to_line_item() for item in self.items)

    @property
    def customer_tracking_number(self):
        """Tracking number as shown to the customer: withheld until the order is completed."""
        return self.tracking_number if self.is_completed else None

    def _transition(self, target, actor, now):
        ensure_transition(
            current=self.status,
            target=target,
            actor=actor,
            owner_id=self.user_id,
            created_at=self.created_at,
            now=now or datetime.now(UTC),
        )

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def start_processing(self, actor, now=None):
        """Start preparing the order. Administrators only, after the cancellation window."""
        self._transition(OrderStatus.PROCESSING, actor, now)
        self.raise_(
            OrderProcessingStarted(
                order_id=str(self.id),
                started_by=str(actor.user_id),
                started_at=datetime.now(UTC),
            )
        )

    def complete(self, actor, now=None):
        """Mark the order fulfilled. Administrators only."""
        self._transition(OrderStatus.COMPLETED, actor, now)
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                completed_by=str(actor.user_id),
                completed_at=datetime.now(UTC),
            )
        )

    def cancel(self, actor, now=None):
        """Cancel the order: its customer within the window, an administrator at any time."""
        previous = self.status
        self._transition(OrderStatus.CANCELLED, actor, now)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                cancelled_by=str(actor.user_id),
                cancelled_by_admin=actor.is_admin,
                previous_status=previous,
                cancelled_at=datetime.now(UTC),
            )
        )

    def assign_tracking_number(self, tracking_number, actor):
        """Record the carrier tracking number once the order is being processed."""
        if not actor.is_admin:
            raise PermissionDenied("Only an administrator can assign tracking numbers")
        if OrderStatus(self.status) not in (OrderStatus.PROCESSING, OrderStatus.COMPLETED):
            raise InvalidTransition("Tracking numbers can only be assigned to processing or completed orders")
        if self.tracking_number:
            raise ValidationError({"tracking_number": ["A tracking number was already assigned"]})

        self.raise_(
            TrackingNumberAssigned(
                order_id=str(self.id),
                tracking_number=tracking_number,
                assigned_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # @apply methods: rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_order_created(self, event: OrderCreated):
        self.id = event.order_id
        self.user_id = event.user_id
        self.status = OrderStatus.PENDING.value
        self.is_completed = False
        self.city = event.city
        self.discount_code = event.discount_code
        self.discount_percent = event.discount_percent
        self.payment_intent_id = event.payment_intent_id
        self.created_at = event.created_at
        self.updated_at = event.created_at

        # Reconstruct items from JSON (includes IDs for deterministic replay)
        items_data = json.loads(event.items) if isinstance(event.items, str) else []
        self.items = [OrderItem(**item_data) for item_data in items_data]

        self.pricing = OrderPricing(
            subtotal=event.subtotal,
            discount=event.discount or 0,
            delivery_fee=event.delivery_fee,
            total_amount=event.total_amount,
        )

    @apply
    def _on_processing_started(self, event: OrderProcessingStarted):
        self.status = OrderStatus.PROCESSING.value
        self.updated_at = event.started_at

    @apply
    def _on_order_completed(self, event: OrderCompleted):
        self.status = OrderStatus.COMPLETED.value
        self.is_completed = True
        self.updated_at = event.completed_at

    @apply
    def _on_order_cancelled(self, event: OrderCancelled):
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_by = event.cancelled_by
        self.updated_at = event.cancelled_at

    @apply
    def _on_tracking_number_assigned(self, event: TrackingNumberAssigned):
        self.tracking_number = event.tracking_number
        self.updated_at = event.assigned_at
