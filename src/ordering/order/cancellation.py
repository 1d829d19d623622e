"""Order cancellation: command and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.shared.actor import Actor

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    """Cancel an order on behalf of its customer or an administrator.

    ``requested_at`` is the moment the actor asked; it defaults to the time the
    command is handled.
    """

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)
    requested_at = DateTime()


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(
            actor=Actor(user_id=str(command.actor_id), is_admin=bool(command.actor_is_admin)),
            now=command.requested_at,
        )
        repo.add(order)
        logger.info(
            "Order cancelled",
            order_id=str(command.order_id),
            cancelled_by=str(command.actor_id),
            by_admin=bool(command.actor_is_admin),
        )
