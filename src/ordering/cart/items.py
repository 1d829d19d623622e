"""Cart item management: commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from ordering.pricing.lines import Addon


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    food_id = Identifier(required=True)
    name = String(max_length=255)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True)
    addons = Text()  # JSON: list of {name, price, is_available}
    customization = String(max_length=500)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    entry_key = String(required=True, max_length=500)
    new_quantity = Integer(required=True)


@ordering.command(part_of="ShoppingCart")
class CustomizeCartItem:
    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    entry_key = String(required=True, max_length=500)
    customization = String(max_length=500)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    entry_key = String(required=True, max_length=500)


def _parse_addons(raw):
    if not raw:
        return ()
    addons = json.loads(raw) if isinstance(raw, str) else raw
    return tuple(Addon.from_dict(addon) for addon in addons)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        key = cart.add_item(
            food_id=command.food_id,
            unit_price=command.unit_price,
            quantity=command.quantity,
            addons=_parse_addons(command.addons),
            customization=command.customization,
            name=command.name or "",
        )
        repo.add(cart)
        return key

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        cart.update_item_quantity(
            entry_key=command.entry_key,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(CustomizeCartItem)
    def customize_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        cart.customize_item(
            entry_key=command.entry_key,
            customization=command.customization,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.assert_owned_by(command.user_id)
        cart.remove_item(entry_key=command.entry_key)
        repo.add(cart)
