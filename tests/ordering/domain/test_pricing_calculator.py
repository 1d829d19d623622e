"""Tests for cart pricing: item totals, subtotal, discount and total."""

from ordering.pricing.calculator import PriceBreakdown, discount_amount, item_total, price, subtotal
from ordering.pricing.discounts import AppliedDiscount, DiscountKind
from ordering.pricing.lines import Addon, LineItem

CHEESE = Addon(name="Extra cheese", price=150)
SOLD_OUT = Addon(name="Truffle", price=500, is_available=False)


def _ten_percent():
    return AppliedDiscount(code="SAVE10", percent=10, kind=DiscountKind.STANDARD)


class TestItemTotal:
    def test_unit_price_times_quantity(self):
        assert item_total(LineItem(food_id="fries", unit_price=300, quantity=3)) == 900

    def test_paid_addons_are_charged_per_unit(self):
        line = LineItem(food_id="burger", unit_price=900, quantity=2, addons=(CHEESE,))
        assert item_total(line) == (900 + 150) * 2

    def test_unavailable_addons_are_not_charged(self):
        line = LineItem(food_id="burger", unit_price=900, quantity=1, addons=(SOLD_OUT,))
        assert item_total(line) == 900


class TestSubtotal:
    def test_empty_cart(self):
        assert subtotal(()) == 0

    def test_sum_of_item_totals(self):
        cart = (
            LineItem(food_id="burger", unit_price=900, quantity=2, addons=(CHEESE,)),
            LineItem(food_id="fries", unit_price=300, quantity=1),
        )
        assert subtotal(cart) == 2100 + 300


class TestDiscountAmount:
    def test_percentage_of_amount(self):
        assert discount_amount(2000, 10) == 200

    def test_rounds_half_up_to_whole_cents(self):
        assert discount_amount(1005, 10) == 101
        assert discount_amount(1004, 10) == 100

    def test_fractional_percent(self):
        assert discount_amount(1000, 12.5) == 125


class TestPrice:
    CART = (LineItem(food_id="burger", unit_price=1000, quantity=2),)

    def test_without_discount(self):
        assert price(self.CART, None, 350) == PriceBreakdown(subtotal=2000, discount=0, delivery_fee=350, total=2350)

    def test_discount_applies_to_subtotal_only(self):
        breakdown = price(self.CART, _ten_percent(), 350)

        assert breakdown.discount == 200
        assert breakdown.total == 2000 + 350 - 200

    def test_total_identity_holds(self):
        breakdown = price(self.CART, _ten_percent(), 500)
        assert breakdown.total == breakdown.subtotal + breakdown.delivery_fee - breakdown.discount

    def test_total_is_not_clamped(self):
        generous = AppliedDiscount(code="ALL", percent=150, kind=DiscountKind.FAMILY)
        breakdown = price(self.CART, generous, 0)

        assert breakdown.discount == 3000
        assert breakdown.total == -1000

    def test_empty_cart_pays_only_delivery(self):
        assert price((), None, 300).total == 300

    def test_to_dict(self):
        assert price(self.CART, None, 0).to_dict() == {
            "subtotal": 2000,
            "discount": 0,
            "delivery_fee": 0,
            "total": 2000,
        }
