"""Tests for pricing a cart against a snapshot of the store settings."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.quote import quote_cart
from ordering.pricing.delivery import DeliveryRegionConfig
from ordering.pricing.discounts import AppliedDiscount, DiscountConfig, DiscountKind

DELIVERY = DeliveryRegionConfig(
    enabled_region_a=True,
    fee_region_a=300,
    enabled_region_b=True,
    fee_region_b=700,
    eta_region_a=45,
)
DISCOUNTS = DiscountConfig(standard_enabled=True, standard_code="SAVE10", standard_percent=10)


@pytest.fixture()
def cart():
    cart = ShoppingCart.create(user_id="cust-001")
    cart.add_item(food_id="pizza", unit_price=1000, quantity=2)
    return cart


class TestQuoteCart:
    def test_prices_cart_for_city(self, cart):
        quote = quote_cart(cart, "Galway", DELIVERY, DISCOUNTS)

        assert quote.breakdown.subtotal == 2000
        assert quote.breakdown.delivery_fee == 300
        assert quote.breakdown.total == 2300
        assert quote.deliverable is True
        assert quote.estimated_delivery_minutes == 45

    def test_applied_code_is_honoured(self, cart):
        cart.apply_discount(AppliedDiscount(code="SAVE10", percent=10, kind=DiscountKind.STANDARD))
        quote = quote_cart(cart, "Dublin", DELIVERY, DISCOUNTS)

        assert quote.breakdown.discount == 200
        assert quote.breakdown.total == 2000 + 700 - 200
        assert quote.discount.code == "SAVE10"

    def test_code_disabled_after_applying_no_longer_discounts(self, cart):
        cart.apply_discount(AppliedDiscount(code="SAVE10", percent=10, kind=DiscountKind.STANDARD))
        disabled = DiscountConfig(standard_enabled=False, standard_code="SAVE10", standard_percent=10)

        quote = quote_cart(cart, "Galway", DELIVERY, disabled)

        assert quote.discount is None
        assert quote.breakdown.discount == 0

    def test_changed_percentage_is_picked_up(self, cart):
        cart.apply_discount(AppliedDiscount(code="SAVE10", percent=10, kind=DiscountKind.STANDARD))
        raised = DiscountConfig(standard_enabled=True, standard_code="SAVE10", standard_percent=25)

        assert quote_cart(cart, "Galway", DELIVERY, raised).breakdown.discount == 500

    def test_undeliverable_city(self, cart):
        quote = quote_cart(cart, "Galway", None, None)

        assert quote.deliverable is False
        assert quote.breakdown.delivery_fee == 0
        assert quote.breakdown.total == 2000

    def test_to_dict(self, cart):
        assert quote_cart(cart, "Galway", DELIVERY, DISCOUNTS).to_dict() == {
            "subtotal": 2000,
            "discount": 0,
            "delivery_fee": 300,
            "total": 2300,
            "discount_code": None,
            "discount_percent": None,
            "deliverable": True,
            "estimated_delivery_minutes": 45,
        }
