"""Line-item normalization for carts.

A cart is an ordered tuple of ``LineItem`` values. Adding the same food with the
same set of paid, available add-ons merges into one line; any other add-on
selection is a distinct line. All functions here are pure: they return a new
cart and never mutate their input.

Amounts are integer cents.
"""

from dataclasses import dataclass, replace

from protean.exceptions import ValidationError

from ordering.errors import CartEntryNotFound, InvalidQuantity


@dataclass(frozen=True)
class Addon:
    name: str
    price: int = 0
    is_available: bool = True

    @property
    def is_chargeable(self) -> bool:
        return self.is_available and self.price > 0

    def to_dict(self) -> dict:
        return {"name": self.name, "price": self.price, "is_available": self.is_available}

    @classmethod
    def from_dict(cls, data: dict) -> "Addon":
        return cls(
            name=data["name"],
            price=int(data.get("price", 0)),
            is_available=bool(data.get("is_available", True)),
        )


def chargeable_addons(addons) -> tuple[Addon, ...]:
    return tuple(addon for addon in addons if addon.is_chargeable)


def composite_key(food_id: str, addons) -> str:
    """Identity of a cart line: the food plus the sorted names of its paid, available add-ons."""
    names = sorted(addon.name for addon in chargeable_addons(addons))
    return f"{food_id}-{','.join(names)}" if names else str(food_id)


@dataclass(frozen=True)
class LineItem:
    food_id: str
    unit_price: int
    quantity: int
    name: str = ""
    addons: tuple[Addon, ...] = ()
    customization: str | None = None

    @property
    def key(self) -> str:
        return composite_key(self.food_id, self.addons)


def _find(cart, key):
    for index, line in enumerate(cart):
        if line.key == key:
            return index
    raise CartEntryNotFound(f"No cart entry with key {key!r}")


def add_to_cart(cart, food_id, unit_price, quantity, addons=(), customization=None, name=""):
    """Return ``cart`` with the selection added, merging into an existing line when keys match."""
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1")
    if unit_price < 0:
        raise ValidationError({"unit_price": ["Unit price cannot be negative"]})

    cart = tuple(cart)
    addons = tuple(addons)
    key = composite_key(food_id, addons)
    for index, line in enumerate(cart):
        if line.key == key:
            merged = replace(line, quantity=line.quantity + quantity)
            return cart[:index] + (merged,) + cart[index + 1 :]

    line = LineItem(
        food_id=str(food_id),
        unit_price=unit_price,
        quantity=quantity,
        name=name,
        addons=addons,
        customization=customization,
    )
    return cart + (line,)


def remove_from_cart(cart, key):
    cart = tuple(cart)
    index = _find(cart, key)
    return cart[:index] + cart[index + 1 :]


def set_quantity(cart, key, quantity):
    """Set a line's quantity. Zero is not a quantity: remove the line instead."""
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1; remove the item instead")
    cart = tuple(cart)
    index = _find(cart, key)
    return cart[:index] + (replace(cart[index], quantity=quantity),) + cart[index + 1 :]


def update_customization(cart, key, customization):
    cart = tuple(cart)
    index = _find(cart, key)
    return cart[:index] + (replace(cart[index], customization=customization or None),) + cart[index + 1 :]
