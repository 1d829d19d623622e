"""Shopping Cart aggregate: the customer's selections before checkout.

Merge semantics come from ``ordering.pricing.lines``: the aggregate converts its
entries into ``LineItem`` values, lets the normalizer compute the new cart, and
writes the result back. At most one discount is held at a time, and a priced
checkout snapshot is kept while payment is in flight. The entries and the
discount are frozen while that snapshot exists, so an order is always created
from exactly what was priced and paid for.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from ordering.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartDiscountApplied,
    CartDiscountRemoved,
    CartItemAdded,
    CartItemCustomized,
    CartItemRemoved,
    CartQuantityUpdated,
    CheckoutAbandoned,
    CheckoutStarted,
)
from ordering.domain import ordering
from ordering.errors import CheckoutInProgress, PermissionDenied
from ordering.pricing import lines as normalizer
from ordering.pricing.calculator import PriceBreakdown
from ordering.pricing.discounts import AppliedDiscount, DiscountKind
from ordering.pricing.lines import Addon, LineItem


@ordering.value_object(part_of="ShoppingCart")
class CartDiscount:
    """The single discount applied to a cart."""

    code = String(required=True, max_length=100)
    percent = Float(required=True, min_value=0.0)
    kind = String(required=True, choices=DiscountKind)

    def to_applied(self) -> AppliedDiscount:
        return AppliedDiscount(code=self.code, percent=self.percent, kind=DiscountKind(self.kind))


@ordering.value_object(part_of="ShoppingCart")
class CheckoutSnapshot:
    """What the customer is paying for: the priced cart at the moment checkout began."""

    payment_intent_id = String(required=True, max_length=255)
    city = String(required=True, max_length=255)
    subtotal = Integer(required=True)
    discount = Integer(default=0)
    delivery_fee = Integer(required=True)
    total = Integer(required=True)
    started_at = DateTime()

    def breakdown(self) -> PriceBreakdown:
        return PriceBreakdown(
            subtotal=self.subtotal,
            discount=self.discount or 0,
            delivery_fee=self.delivery_fee,
            total=self.total,
        )


@ordering.entity(part_of="ShoppingCart")
class CartEntry:
    entry_key = String(required=True, max_length=500)
    food_id = Identifier(required=True)
    name = String(max_length=255)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    addons = Text()  # JSON: list of {name, price, is_available}
    customization = String(max_length=500)
    position = Integer(default=0)
    added_at = DateTime()

    def to_line_item(self) -> LineItem:
        addons = json.loads(self.addons) if self.addons else []
        return LineItem(
            food_id=str(self.food_id),
            unit_price=self.unit_price,
            quantity=self.quantity,
            name=self.name or "",
            addons=tuple(Addon.from_dict(addon) for addon in addons),
            customization=self.customization,
        )


@ordering.aggregate
class ShoppingCart:
    user_id = Identifier(required=True)
    entries = HasMany(CartEntry)
    applied_discount = ValueObject(CartDiscount)
    checkout = ValueObject(CheckoutSnapshot)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_items(self) -> tuple[LineItem, ...]:
        ordered = sorted(self.entries, key=lambda entry: entry.position or 0)
        return tuple(entry.to_line_item() for entry in ordered)

    def discount(self) -> AppliedDiscount | None:
        return self.applied_discount.to_applied() if self.applied_discount else None

    def assert_owned_by(self, user_id):
        if str(self.user_id) != str(user_id):
            raise PermissionDenied("Only the cart's owner can change it")

    def assert_editable(self):
        if self.checkout is not None:
            raise CheckoutInProgress()

    def _entry(self, entry_key):
        return next((e for e in self.entries if e.entry_key == entry_key), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def _write_back(self, lines, now):
        """Make the entries match ``lines``, keeping entity identity per composite key."""
        existing = {entry.entry_key: entry for entry in self.entries}
        next_position = max((entry.position or 0 for entry in self.entries), default=-1) + 1

        for line in lines:
            entry = existing.pop(line.key, None)
            if entry is None:
                self.add_entries(
                    CartEntry(
                        entry_key=line.key,
                        food_id=line.food_id,
                        name=line.name,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                        addons=json.dumps([addon.to_dict() for addon in line.addons]),
                        customization=line.customization,
                        position=next_position,
                        added_at=now,
                    )
                )
                next_position += 1
            else:
                entry.quantity = line.quantity
                entry.customization = line.customization

        for stale in existing.values():
            self.remove_entries(stale)

        self.updated_at = now

    def add_item(self, food_id, unit_price, quantity, addons=(), customization=None, name=""):
        """Add a selection to the cart (or increase the quantity of a matching entry)."""
        self.assert_editable()
        lines = normalizer.add_to_cart(
            self.line_items(),
            food_id=food_id,
            unit_price=unit_price,
            quantity=quantity,
            addons=addons,
            customization=customization,
            name=name,
        )
        key = normalizer.composite_key(food_id, addons)
        new_quantity = next(line.quantity for line in lines if line.key == key)
        self._write_back(lines, datetime.now(UTC))

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                entry_key=key,
                food_id=str(food_id),
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )
        return key

    def update_item_quantity(self, entry_key, new_quantity):
        """Update the quantity of an existing entry. Use ``remove_item`` instead of zero."""
        self.assert_editable()
        lines = normalizer.set_quantity(self.line_items(), entry_key, new_quantity)
        previous_quantity = self._entry(entry_key).quantity
        self._write_back(lines, datetime.now(UTC))

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                entry_key=entry_key,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def customize_item(self, entry_key, customization):
        self.assert_editable()
        lines = normalizer.update_customization(self.line_items(), entry_key, customization)
        self._write_back(lines, datetime.now(UTC))

        self.raise_(
            CartItemCustomized(
                cart_id=str(self.id),
                entry_key=entry_key,
                customization=customization or None,
            )
        )

    def remove_item(self, entry_key):
        """Remove an entry from the cart."""
        self.assert_editable()
        lines = normalizer.remove_from_cart(self.line_items(), entry_key)
        self._write_back(lines, datetime.now(UTC))

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                entry_key=entry_key,
            )
        )

    def clear(self):
        """Empty the cart and drop its discount."""
        self.assert_editable()
        self._write_back((), datetime.now(UTC))
        self.applied_discount = None

        self.raise_(CartCleared(cart_id=str(self.id)))

    # -------------------------------------------------------------------
    # Discount management
    # -------------------------------------------------------------------
    def apply_discount(self, applied):
        """Hold ``applied`` as the cart's discount, replacing any previous one."""
        self.assert_editable()
        self.applied_discount = CartDiscount(
            code=applied.code,
            percent=applied.percent,
            kind=applied.kind.value,
        )
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartDiscountApplied(
                cart_id=str(self.id),
                code=applied.code,
                percent=applied.percent,
                kind=applied.kind.value,
            )
        )

    def remove_discount(self):
        self.assert_editable()
        if self.applied_discount is None:
            raise ValidationError({"discount_code": ["No discount code is applied"]})

        self.applied_discount = None
        self.updated_at = datetime.now(UTC)

        self.raise_(CartDiscountRemoved(cart_id=str(self.id)))

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def begin_checkout(self, payment_intent_id, city, breakdown):
        """Freeze the priced cart while the customer pays ``breakdown.total``."""
        self.assert_editable()
        if not self.entries:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        now = datetime.now(UTC)
        self.checkout = CheckoutSnapshot(
            payment_intent_id=payment_intent_id,
            city=city,
            subtotal=breakdown.subtotal,
            discount=breakdown.discount,
            delivery_fee=breakdown.delivery_fee,
            total=breakdown.total,
            started_at=now,
        )
        self.updated_at = now

        self.raise_(
            CheckoutStarted(
                cart_id=str(self.id),
                payment_intent_id=payment_intent_id,
                city=city,
                total=breakdown.total,
            )
        )

    def abandon_checkout(self, reason=None):
        if self.checkout is None:
            raise ValidationError({"checkout": ["No checkout is in progress"]})

        payment_intent_id = self.checkout.payment_intent_id
        now = datetime.now(UTC)
        self.checkout = None
        self.updated_at = now

        self.raise_(
            CheckoutAbandoned(
                cart_id=str(self.id),
                payment_intent_id=payment_intent_id,
                reason=reason,
                abandoned_at=now,
            )
        )

    def mark_checked_out(self, order_id):
        """The order exists: empty the cart for the next one."""
        self._write_back((), datetime.now(UTC))
        self.applied_discount = None
        self.checkout = None

        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                order_id=str(order_id),
            )
        )
