"""Order lifecycle rules: states, transitions and their guards.

State Machine:
    PENDING → PROCESSING → COMPLETED
    PENDING → CANCELLED
    PROCESSING → CANCELLED
    COMPLETED and CANCELLED are terminal.

Guards are evaluated against the time of the request and the order's creation
time. For the first ten minutes a pending order belongs to its customer, who may
cancel it; after that only administrators may cancel it, and only then may they
start processing it. Guard evaluation is synchronous and touches no storage.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from ordering.errors import (
    CancellationWindowExpired,
    InvalidTransition,
    PermissionDenied,
    ProcessingTooEarly,
)

CANCELLATION_WINDOW = timedelta(minutes=10)


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = {status for status, targets in _VALID_TRANSITIONS.items() if not targets}


def as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def elapsed_since(created_at: datetime, now: datetime) -> timedelta:
    return as_utc(now) - as_utc(created_at)


def within_cancellation_window(created_at: datetime, now: datetime) -> bool:
    return elapsed_since(created_at, now) <= CANCELLATION_WINDOW


def ensure_transition(current, target, actor, owner_id, created_at, now):
    """Raise unless ``actor`` may move an order from ``current`` to ``target`` at ``now``."""
    current = OrderStatus(current)
    target = OrderStatus(target)
    if target not in _VALID_TRANSITIONS[current]:
        raise InvalidTransition(f"Cannot transition from {current.value} to {target.value}")

    elapsed = elapsed_since(created_at, now)

    if target is OrderStatus.CANCELLED:
        if actor.is_admin:
            return
        if not actor.owns(owner_id):
            raise PermissionDenied("Only the customer who placed the order or an administrator can cancel it")
        if current is not OrderStatus.PENDING:
            raise PermissionDenied("Only an administrator can cancel an order that is being processed")
        if elapsed > CANCELLATION_WINDOW:
            raise CancellationWindowExpired(CANCELLATION_WINDOW, elapsed)
        return

    if not actor.is_admin:
        raise PermissionDenied(f"Only an administrator can move an order to {target.value}")

    if target is OrderStatus.PROCESSING and elapsed <= CANCELLATION_WINDOW:
        raise ProcessingTooEarly(CANCELLATION_WINDOW - elapsed)
