"""Order completion: command and handler."""

from protean import handle
from protean.fields import Boolean, DateTime, Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.shared.actor import Actor


@ordering.command(part_of="Order")
class CompleteOrder:
    """Mark a processing order as fulfilled, releasing its tracking number to the customer."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)
    requested_at = DateTime()


@ordering.command_handler(part_of=Order)
class CompleteOrderHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.complete(
            actor=Actor(user_id=str(command.actor_id), is_admin=bool(command.actor_is_admin)),
            now=command.requested_at,
        )
        repo.add(order)
