"""Application tests for applying and removing discount codes."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.discounts import ApplyDiscountCode, RemoveDiscountCode
from ordering.cart.management import CreateCart
from ordering.errors import DiscountCodeRejected
from ordering.pricing.discounts import EMPTY_CODE, INVALID_CODE
from ordering.settings.management import UpdateDiscountSettings
from protean import current_domain


def _configure_discounts(**changes):
    current_domain.process(
        UpdateDiscountSettings(actor_id="admin", actor_is_admin=True, **changes),
        asynchronous=False,
    )


def _apply(cart_id, code):
    return current_domain.process(
        ApplyDiscountCode(cart_id=cart_id, user_id="cust-001", code=code),
        asynchronous=False,
    )


@pytest.fixture()
def cart_id():
    return current_domain.process(CreateCart(user_id="cust-001"), asynchronous=False)


@pytest.fixture()
def discounts():
    _configure_discounts(
        standard_enabled=True,
        standard_code="SAVE10",
        standard_percent=10,
        family_enabled=True,
        family_code="FAMILY20",
        family_percent=20,
    )


class TestApplyDiscountCode:
    def test_valid_code_is_applied(self, cart_id, discounts):
        result = _apply(cart_id, " save10 ")

        assert result == {"code": "SAVE10", "percent": 10.0, "kind": "standard"}
        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        assert cart.applied_discount.code == "SAVE10"

    def test_second_code_replaces_first(self, cart_id, discounts):
        _apply(cart_id, "SAVE10")
        _apply(cart_id, "FAMILY20")

        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        assert cart.applied_discount.code == "FAMILY20"
        assert cart.applied_discount.kind == "family"

    def test_invalid_code_is_rejected(self, cart_id, discounts):
        with pytest.raises(DiscountCodeRejected) as exc_info:
            _apply(cart_id, "FREEFOOD")

        assert exc_info.value.reason == INVALID_CODE

    def test_empty_code_is_rejected(self, cart_id, discounts):
        with pytest.raises(DiscountCodeRejected) as exc_info:
            _apply(cart_id, "   ")

        assert exc_info.value.reason == EMPTY_CODE

    def test_rejection_keeps_previous_discount(self, cart_id, discounts):
        _apply(cart_id, "SAVE10")

        with pytest.raises(DiscountCodeRejected):
            _apply(cart_id, "FREEFOOD")

        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        assert cart.applied_discount.code == "SAVE10"

    def test_no_settings_means_no_valid_codes(self, cart_id):
        with pytest.raises(DiscountCodeRejected):
            _apply(cart_id, "SAVE10")


class TestRemoveDiscountCode:
    def test_remove(self, cart_id, discounts):
        _apply(cart_id, "SAVE10")
        current_domain.process(RemoveDiscountCode(cart_id=cart_id, user_id="cust-001"), asynchronous=False)

        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        assert cart.applied_discount is None
