"""Cart discount codes: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from ordering.errors import DiscountCodeRejected
from ordering.pricing.discounts import DiscountRejected, resolve_discount
from ordering.settings.discounts import load_discount_config

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class ApplyDiscountCode:
    """Apply a discount code to a shopping cart, replacing any code already applied."""

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    code = String(max_length=100)


@ordering.command(part_of="ShoppingCart")
class RemoveDiscountCode:
    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageDiscountCodeHandler:
    @handle(ApplyDiscountCode)
    def apply_discount_code(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)

        result = resolve_discount(command.code, load_discount_config())
        if isinstance(result, DiscountRejected):
            logger.info("Discount code rejected", cart_id=str(command.cart_id), reason=result.reason)
            raise DiscountCodeRejected(result.reason)

        cart.apply_discount(result)
        repo.add(cart)
        return {"code": result.code, "percent": result.percent, "kind": result.kind.value}

    @handle(RemoveDiscountCode)
    def remove_discount_code(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        cart.remove_discount()
        repo.add(cart)
