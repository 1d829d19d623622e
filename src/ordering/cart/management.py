"""Cart management: commands and handler.

Handles cart creation and emptying a cart.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    """Create a new shopping cart for a signed-in customer."""

    user_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    """Remove every entry and the applied discount."""

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(user_id=command.user_id)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        cart.clear()
        repo.add(cart)
