"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Amounts are integer cents.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddonSchema(BaseModel):
    name: str
    price: int = 0
    is_available: bool = True


class PriceBreakdownSchema(BaseModel):
    subtotal: int
    discount: int
    delivery_fee: int
    total: int


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    food_id: str
    name: str = ""
    unit_price: int
    quantity: int = 1
    addons: list[AddonSchema] = Field(default_factory=list)
    customization: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "food_id": "margherita",
                    "name": "Margherita",
                    "unit_price": 1100,
                    "quantity": 2,
                    "addons": [{"name": "Extra cheese", "price": 150, "is_available": True}],
                    "customization": "Well done",
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int | None = None
    customization: str | None = None


class ApplyDiscountRequest(BaseModel):
    code: str = ""


class BeginCheckoutRequest(BaseModel):
    city: str = ""


class PlaceOrderRequest(BaseModel):
    payment_intent_id: str


# ---------------------------------------------------------------------------
# Cart Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class EntryKeyResponse(BaseModel):
    entry_key: str


class CartEntrySchema(BaseModel):
    entry_key: str
    food_id: str
    name: str
    unit_price: int
    quantity: int
    addons: list[AddonSchema]
    customization: str | None = None
    item_total: int


class CartQuoteSchema(PriceBreakdownSchema):
    discount_code: str | None = None
    discount_percent: float | None = None
    deliverable: bool
    estimated_delivery_minutes: int | None = None


class CartResponse(BaseModel):
    cart_id: str
    user_id: str
    entries: list[CartEntrySchema]
    discount_code: str | None = None
    quote: CartQuoteSchema | None = None
    checkout_in_progress: bool = False


class AppliedDiscountResponse(BaseModel):
    code: str
    percent: float
    kind: str


class CheckoutResponse(CartQuoteSchema):
    payment_intent_id: str
    client_secret: str | None = None
    currency: str


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemSchema(BaseModel):
    food_id: str
    name: str
    unit_price: int
    quantity: int
    addons: list[AddonSchema]
    customization: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    status: str
    items: list[OrderItemSchema]
    pricing: PriceBreakdownSchema
    discount_code: str | None = None
    city: str | None = None
    is_completed: bool
    tracking_number: str | None = None
    created_at: datetime | None = None


class OrderSummarySchema(BaseModel):
    order_id: str
    user_id: str
    status: str
    item_count: int
    total_amount: int
    city: str | None = None
    is_completed: bool
    tracking_number: str | None = None
    created_at: datetime | None = None


class AssignTrackingNumberRequest(BaseModel):
    tracking_number: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Settings Schemas
# ---------------------------------------------------------------------------
class DeliverySettingsSchema(BaseModel):
    enabled_region_a: bool | None = None
    fee_region_a: int | None = None
    enabled_region_b: bool | None = None
    fee_region_b: int | None = None
    region_a_keyword: str | None = None
    eta_region_a: int | None = None
    eta_region_b: int | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "enabled_region_a": True,
                    "fee_region_a": 300,
                    "enabled_region_b": True,
                    "fee_region_b": 700,
                    "eta_region_a": 45,
                    "eta_region_b": 90,
                }
            ]
        }
    }


class DiscountSettingsSchema(BaseModel):
    standard_enabled: bool | None = None
    standard_code: str | None = None
    standard_percent: float | None = None
    family_enabled: bool | None = None
    family_code: str | None = None
    family_percent: float | None = None


class DeliveryQuoteResponse(BaseModel):
    city: str
    delivery_fee: int
    deliverable: bool
    estimated_delivery_minutes: int | None = None


# ---------------------------------------------------------------------------
# Admin Schemas
# ---------------------------------------------------------------------------
class SalesOverviewResponse(BaseModel):
    days: int
    total_orders: int
    revenue: int
    average_order_value: int
    status_counts: dict[str, int]


class StatusResponse(BaseModel):
    status: str = "ok"
