"""Cart pricing.

``price()`` turns normalized line items, at most one applied discount and a
delivery fee into a ``PriceBreakdown``. The discount applies to the subtotal
only and the total is never clamped, so a discount above 100% can produce a
negative total.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ordering.pricing.lines import chargeable_addons


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: int
    discount: int
    delivery_fee: int
    total: int

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "delivery_fee": self.delivery_fee,
            "total": self.total,
        }


def item_total(line) -> int:
    unit = line.unit_price + sum(addon.price for addon in chargeable_addons(line.addons))
    return unit * line.quantity


def subtotal(cart) -> int:
    return sum(item_total(line) for line in cart)


def discount_amount(amount: int, percent) -> int:
    """``percent`` of ``amount`` cents, rounded half-up to a whole cent."""
    value = Decimal(amount) * Decimal(str(percent)) / Decimal(100)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def price(cart, applied_discount, delivery_fee: int) -> PriceBreakdown:
    sub = subtotal(cart)
    discount = discount_amount(sub, applied_discount.percent) if applied_discount is not None else 0
    return PriceBreakdown(
        subtotal=sub,
        discount=discount,
        delivery_fee=delivery_fee,
        total=sub + delivery_fee - discount,
    )
