"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes.
Events are persisted to the event store and used for:
- Rebuilding aggregate state via @apply (event sourcing)
- Updating projections via projectors
- Notifying change listeners registered with ``ordering.subscriptions``

Amounts are integer cents.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A paid checkout became an order. Its prices are frozen from here on."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    subtotal = Integer(required=True)
    discount = Integer(default=0)
    discount_code = String()
    discount_percent = Float()
    delivery_fee = Integer(required=True)
    total_amount = Integer(required=True)
    city = String(required=True)
    payment_intent_id = String()
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderProcessingStarted:
    """An administrator started preparing the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    started_by = String(required=True)
    started_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """The order was fulfilled; its tracking number is now visible to the customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    completed_by = String(required=True)
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by its customer or an administrator."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_by = String(required=True)
    cancelled_by_admin = Boolean(default=False)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class TrackingNumberAssigned:
    """A carrier tracking number was generated for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    assigned_at = DateTime(required=True)
