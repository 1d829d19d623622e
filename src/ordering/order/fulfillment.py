"""Order fulfillment: commands and handler.

Handles the kitchen side of the lifecycle: starting to process an order once
the customer can no longer cancel it, and recording the carrier tracking number.
"""

from protean import handle
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.shared.actor import Actor


@ordering.command(part_of="Order")
class StartProcessing:
    """Signal that the kitchen has started preparing the order."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)
    requested_at = DateTime()


@ordering.command(part_of="Order")
class AssignTrackingNumber:
    """Record the carrier tracking number generated for the delivery label."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)
    tracking_number = String(required=True, max_length=255)


@ordering.command_handler(part_of=Order)
class RecordFulfillmentHandler:
    @handle(StartProcessing)
    def start_processing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.start_processing(
            actor=Actor(user_id=str(command.actor_id), is_admin=bool(command.actor_is_admin)),
            now=command.requested_at,
        )
        repo.add(order)

    @handle(AssignTrackingNumber)
    def assign_tracking_number(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assign_tracking_number(
            tracking_number=command.tracking_number,
            actor=Actor(user_id=str(command.actor_id), is_admin=bool(command.actor_is_admin)),
        )
        repo.add(order)
