"""Pricing a cart for display.

A quote is computed against one snapshot of the delivery and discount
settings. The applied code is resolved again against that snapshot, so a
code that was disabled after it was applied no longer reduces the price.
"""

from dataclasses import dataclass

from ordering.pricing.calculator import PriceBreakdown, price
from ordering.pricing.delivery import estimate_delivery_minutes, is_deliverable, resolve_fee
from ordering.pricing.discounts import AppliedDiscount, resolve_discount


@dataclass(frozen=True)
class CartQuote:
    breakdown: PriceBreakdown
    discount: AppliedDiscount | None
    deliverable: bool
    estimated_delivery_minutes: int | None = None

    def to_dict(self) -> dict:
        return {
            **self.breakdown.to_dict(),
            "discount_code": self.discount.code if self.discount else None,
            "discount_percent": self.discount.percent if self.discount else None,
            "deliverable": self.deliverable,
            "estimated_delivery_minutes": self.estimated_delivery_minutes,
        }


def current_discount(cart, discount_config) -> AppliedDiscount | None:
    held = cart.discount()
    if held is None:
        return None
    result = resolve_discount(held.code, discount_config)
    return result if isinstance(result, AppliedDiscount) else None


def quote_cart(cart, city, delivery_config, discount_config) -> CartQuote:
    """Price ``cart`` for delivery to ``city``.

    ``cart`` is a ``ShoppingCart``; the two configs are the snapshots to price
    against (either may be ``None`` when never configured).
    """
    fee = resolve_fee(city, delivery_config)
    discount = current_discount(cart, discount_config)
    return CartQuote(
        breakdown=price(cart.line_items(), discount, fee),
        discount=discount,
        deliverable=is_deliverable(fee),
        estimated_delivery_minutes=estimate_delivery_minutes(city, delivery_config),
    )
