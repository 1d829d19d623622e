"""Application tests for cart commands."""

import json

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, CustomizeCartItem, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart, CreateCart
from ordering.errors import CartEntryNotFound, InvalidQuantity, PermissionDenied
from protean import current_domain


def _create_cart(user_id="cust-001"):
    return current_domain.process(CreateCart(user_id=user_id), asynchronous=False)


def _add(cart_id, food_id="burger", quantity=1, addons=None, user_id="cust-001", **extra):
    return current_domain.process(
        AddToCart(
            cart_id=cart_id,
            user_id=user_id,
            food_id=food_id,
            unit_price=900,
            quantity=quantity,
            addons=json.dumps(addons or []),
            **extra,
        ),
        asynchronous=False,
    )


def _cart(cart_id):
    return current_domain.repository_for(ShoppingCart).get(cart_id)


class TestCreateCart:
    def test_create_cart_persists(self):
        cart_id = _create_cart()

        cart = _cart(cart_id)
        assert cart.user_id == "cust-001"
        assert len(cart.entries) == 0


class TestCartItemCommands:
    def test_add_to_cart_returns_entry_key(self):
        cart_id = _create_cart()
        key = _add(cart_id, addons=[{"name": "Extra cheese", "price": 150}])

        assert key == "burger-Extra cheese"

    def test_merged_entries_are_persisted(self):
        cart_id = _create_cart()
        _add(cart_id, quantity=2, addons=[{"name": "Extra cheese", "price": 150}])
        _add(cart_id, quantity=1, addons=[{"name": "Extra cheese", "price": 150}])
        _add(cart_id, quantity=1)

        cart = _cart(cart_id)
        quantities = {line.key: line.quantity for line in cart.line_items()}
        assert quantities == {"burger-Extra cheese": 3, "burger": 1}

    def test_persisted_line_items_keep_addons_and_order(self):
        cart_id = _create_cart()
        _add(cart_id, food_id="fries")
        _add(cart_id, food_id="burger", addons=[{"name": "Bacon", "price": 200}], customization="Rare", name="Burger")

        lines = _cart(cart_id).line_items()
        assert [line.food_id for line in lines] == ["fries", "burger"]
        assert lines[1].addons[0].name == "Bacon"
        assert lines[1].addons[0].price == 200
        assert lines[1].customization == "Rare"
        assert lines[1].name == "Burger"

    def test_zero_quantity_is_rejected(self):
        cart_id = _create_cart()

        with pytest.raises(InvalidQuantity):
            _add(cart_id, quantity=0)

    def test_update_quantity(self):
        cart_id = _create_cart()
        key = _add(cart_id, quantity=1)
        current_domain.process(
            UpdateCartQuantity(cart_id=cart_id, user_id="cust-001", entry_key=key, new_quantity=4),
            asynchronous=False,
        )

        assert _cart(cart_id).line_items()[0].quantity == 4

    def test_customize_item(self):
        cart_id = _create_cart()
        key = _add(cart_id)
        current_domain.process(
            CustomizeCartItem(cart_id=cart_id, user_id="cust-001", entry_key=key, customization="No onions"),
            asynchronous=False,
        )

        assert _cart(cart_id).line_items()[0].customization == "No onions"

    def test_remove_item(self):
        cart_id = _create_cart()
        key = _add(cart_id)
        _add(cart_id, food_id="fries")
        current_domain.process(
            RemoveFromCart(cart_id=cart_id, user_id="cust-001", entry_key=key),
            asynchronous=False,
        )

        assert [line.key for line in _cart(cart_id).line_items()] == ["fries"]

    def test_remove_unknown_entry(self):
        cart_id = _create_cart()

        with pytest.raises(CartEntryNotFound):
            current_domain.process(
                RemoveFromCart(cart_id=cart_id, user_id="cust-001", entry_key="pizza"),
                asynchronous=False,
            )

    def test_clear_cart(self):
        cart_id = _create_cart()
        _add(cart_id)
        _add(cart_id, food_id="fries")
        current_domain.process(ClearCart(cart_id=cart_id, user_id="cust-001"), asynchronous=False)

        assert len(_cart(cart_id).entries) == 0


class TestCartOwnership:
    def test_other_users_cannot_add(self):
        cart_id = _create_cart("cust-001")

        with pytest.raises(PermissionDenied):
            _add(cart_id, user_id="cust-999")

        assert len(_cart(cart_id).entries) == 0

    def test_other_users_cannot_clear(self):
        cart_id = _create_cart("cust-001")
        _add(cart_id)

        with pytest.raises(PermissionDenied):
            current_domain.process(ClearCart(cart_id=cart_id, user_id="cust-999"), asynchronous=False)
