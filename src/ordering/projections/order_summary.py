"""Order summary: listing and history view for customers and administrators."""

import json

from protean.core.projector import on
from protean.fields import Boolean, DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderProcessingStarted,
    TrackingNumberAssigned,
)
from ordering.order.lifecycle import OrderStatus
from ordering.order.order import Order


@ordering.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    user_id = Identifier(required=True)
    status = String(required=True)
    item_count = Integer(default=0)
    subtotal = Integer(default=0)
    discount = Integer(default=0)
    delivery_fee = Integer(default=0)
    total_amount = Integer(default=0)
    discount_code = String()
    city = String()
    is_completed = Boolean(default=False)
    tracking_number = String()
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                user_id=event.user_id,
                status=OrderStatus.PENDING.value,
                item_count=sum(item.get("quantity", 1) for item in items),
                subtotal=event.subtotal,
                discount=event.discount or 0,
                delivery_fee=event.delivery_fee,
                total_amount=event.total_amount,
                discount_code=event.discount_code,
                city=event.city,
                created_at=event.created_at,
                updated_at=event.created_at,
            )
        )

    def _update_status(self, order_id, status, updated_at=None):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(order_id)
        summary.status = status
        if status == OrderStatus.COMPLETED.value:
            summary.is_completed = True
        if updated_at:
            summary.updated_at = updated_at
        repo.add(summary)

    @on(OrderProcessingStarted)
    def on_processing_started(self, event):
        self._update_status(event.order_id, OrderStatus.PROCESSING.value, event.started_at)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._update_status(event.order_id, OrderStatus.COMPLETED.value, event.completed_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update_status(event.order_id, OrderStatus.CANCELLED.value, event.cancelled_at)

    @on(TrackingNumberAssigned)
    def on_tracking_number_assigned(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.tracking_number = event.tracking_number
        summary.updated_at = event.assigned_at
        repo.add(summary)


def orders_for_user(user_id) -> list[OrderSummary]:
    """A customer's order history, newest first.

    The projection's default page size is lifted so long histories come back whole.
    """
    repo = current_domain.repository_for(OrderSummary)
    return repo._dao.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items


def all_orders(status: str | None = None, since=None) -> list[OrderSummary]:
    """Every order, newest first, optionally narrowed to one status or to those created since a moment."""
    query = current_domain.repository_for(OrderSummary)._dao.query
    if status:
        query = query.filter(status=status)
    if since is not None:
        query = query.filter(created_at__gte=since)
    return query.order_by("-created_at").limit(None).all().items
