"""FastAPI routes for the storefront: carts, orders, store settings and the admin dashboard."""

import json
from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from ordering.api.dependencies import admin_actor, current_actor
from ordering.api.errors import PaymentNotCompleted
from ordering.api.schemas import (
    AddToCartRequest,
    AppliedDiscountResponse,
    ApplyDiscountRequest,
    AssignTrackingNumberRequest,
    BeginCheckoutRequest,
    CartIdResponse,
    CartResponse,
    CheckoutResponse,
    DeliveryQuoteResponse,
    DeliverySettingsSchema,
    DiscountSettingsSchema,
    EntryKeyResponse,
    OrderIdResponse,
    OrderResponse,
    OrderSummarySchema,
    PlaceOrderRequest,
    SalesOverviewResponse,
    StatusResponse,
    UpdateCartItemRequest,
)
from ordering.cart.cart import ShoppingCart
from ordering.cart.discounts import ApplyDiscountCode, RemoveDiscountCode
from ordering.cart.items import AddToCart, CustomizeCartItem, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart, CreateCart
from ordering.cart.quote import quote_cart
from ordering.checkout.checkout import AbandonCheckout, BeginCheckout, PlaceOrder
from ordering.errors import PermissionDenied
from ordering.order.cancellation import CancelOrder
from ordering.order.completion import CompleteOrder
from ordering.order.fulfillment import AssignTrackingNumber, StartProcessing
from ordering.order.order import Order
from ordering.pricing.calculator import item_total
from ordering.pricing.delivery import DeliveryRegionConfig, estimate_delivery_minutes, is_deliverable, resolve_fee
from ordering.pricing.discounts import DiscountConfig
from ordering.projections.order_summary import all_orders, orders_for_user
from ordering.projections.sales_overview import DEFAULT_WINDOW_DAYS, summarize_orders
from ordering.settings.delivery import load_delivery_config
from ordering.settings.discounts import load_discount_config
from ordering.settings.management import UpdateDeliverySettings, UpdateDiscountSettings
from ordering.shared.actor import Actor


def _load_cart(cart_id: str, actor: Actor) -> ShoppingCart:
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    if not (actor.is_admin or actor.owns(cart.user_id)):
        raise PermissionDenied("Only the cart's owner can view it")
    return cart


def _cart_response(cart: ShoppingCart, city: str | None = None) -> CartResponse:
    quote = None
    if city:
        quote = quote_cart(cart, city, load_delivery_config(), load_discount_config()).to_dict()
    return CartResponse(
        cart_id=str(cart.id),
        user_id=str(cart.user_id),
        entries=[
            {
                "entry_key": line.key,
                "food_id": line.food_id,
                "name": line.name,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "addons": [addon.to_dict() for addon in line.addons],
                "customization": line.customization,
                "item_total": item_total(line),
            }
            for line in cart.line_items()
        ],
        discount_code=cart.applied_discount.code if cart.applied_discount else None,
        quote=quote,
        checkout_in_progress=cart.checkout is not None,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(actor: Actor = Depends(current_actor)) -> CartIdResponse:
    result = current_domain.process(CreateCart(user_id=actor.user_id), asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, city: str | None = None, actor: Actor = Depends(current_actor)) -> CartResponse:
    """The cart's entries, priced for delivery to ``city`` when one is given."""
    return _cart_response(_load_cart(cart_id, actor), city)


@cart_router.post("/{cart_id}/items", response_model=EntryKeyResponse)
async def add_cart_item(
    cart_id: str, body: AddToCartRequest, actor: Actor = Depends(current_actor)
) -> EntryKeyResponse:
    command = AddToCart(
        cart_id=cart_id,
        user_id=actor.user_id,
        food_id=body.food_id,
        name=body.name,
        unit_price=body.unit_price,
        quantity=body.quantity,
        addons=json.dumps([addon.model_dump() for addon in body.addons]),
        customization=body.customization,
    )
    entry_key = current_domain.process(command, asynchronous=False)
    return EntryKeyResponse(entry_key=entry_key)


@cart_router.put("/{cart_id}/items/{entry_key:path}", response_model=StatusResponse)
async def update_cart_item(
    cart_id: str, entry_key: str, body: UpdateCartItemRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    if body.quantity is not None:
        current_domain.process(
            UpdateCartQuantity(
                cart_id=cart_id,
                user_id=actor.user_id,
                entry_key=entry_key,
                new_quantity=body.quantity,
            ),
            asynchronous=False,
        )
    if "customization" in body.model_fields_set:
        current_domain.process(
            CustomizeCartItem(
                cart_id=cart_id,
                user_id=actor.user_id,
                entry_key=entry_key,
                customization=body.customization,
            ),
            asynchronous=False,
        )
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{entry_key:path}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, entry_key: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, user_id=actor.user_id, entry_key=entry_key)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id, user_id=actor.user_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/discount", response_model=AppliedDiscountResponse)
async def apply_discount(
    cart_id: str, body: ApplyDiscountRequest, actor: Actor = Depends(current_actor)
) -> AppliedDiscountResponse:
    command = ApplyDiscountCode(cart_id=cart_id, user_id=actor.user_id, code=body.code)
    result = current_domain.process(command, asynchronous=False)
    return AppliedDiscountResponse(**result)


@cart_router.delete("/{cart_id}/discount", response_model=StatusResponse)
async def remove_discount(cart_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(RemoveDiscountCode(cart_id=cart_id, user_id=actor.user_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=CheckoutResponse)
async def begin_checkout(
    cart_id: str, body: BeginCheckoutRequest, actor: Actor = Depends(current_actor)
) -> CheckoutResponse:
    """Price the cart and open a payment intent the client confirms with the processor."""
    command = BeginCheckout(cart_id=cart_id, user_id=actor.user_id, city=body.city)
    result = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(**result)


@cart_router.delete("/{cart_id}/checkout", response_model=StatusResponse)
async def abandon_checkout(cart_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    """Close an unpaid checkout so the cart can be changed again."""
    current_domain.process(AbandonCheckout(cart_id=cart_id, user_id=actor.user_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/orders", status_code=201, response_model=OrderIdResponse)
async def place_order(
    cart_id: str, body: PlaceOrderRequest, actor: Actor = Depends(current_actor)
) -> OrderIdResponse:
    """Create the order after the customer confirmed payment.

    Responds 402 when the payment did not succeed; the cart is kept so the
    customer can try again.
    """
    command = PlaceOrder(cart_id=cart_id, user_id=actor.user_id, payment_intent_id=body.payment_intent_id)
    order_id = current_domain.process(command, asynchronous=False)
    if order_id is None:
        raise PaymentNotCompleted("Payment was not completed")
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _summary_response(summary, actor: Actor) -> OrderSummarySchema:
    visible = actor.is_admin or summary.is_completed
    return OrderSummarySchema(
        order_id=str(summary.order_id),
        user_id=str(summary.user_id),
        status=summary.status,
        item_count=summary.item_count or 0,
        total_amount=summary.total_amount or 0,
        city=summary.city,
        is_completed=bool(summary.is_completed),
        tracking_number=summary.tracking_number if visible else None,
        created_at=summary.created_at,
    )


def _order_response(order: Order, actor: Actor) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        user_id=str(order.user_id),
        status=order.status,
        items=[
            {
                "food_id": line.food_id,
                "name": line.name,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "addons": [addon.to_dict() for addon in line.addons],
                "customization": line.customization,
            }
            for line in order.line_items()
        ],
        pricing={
            "subtotal": order.pricing.subtotal,
            "discount": order.pricing.discount,
            "delivery_fee": order.pricing.delivery_fee,
            "total": order.pricing.total_amount,
        },
        discount_code=order.discount_code,
        city=order.city,
        is_completed=bool(order.is_completed),
        tracking_number=order.tracking_number if actor.is_admin else order.customer_tracking_number,
        created_at=order.created_at,
    )


def _actor_fields(actor: Actor) -> dict:
    return {"actor_id": actor.user_id, "actor_is_admin": actor.is_admin}


@order_router.get("", response_model=list[OrderSummarySchema])
async def list_my_orders(actor: Actor = Depends(current_actor)) -> list[OrderSummarySchema]:
    return [_summary_response(summary, actor) for summary in orders_for_user(actor.user_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if not (actor.is_admin or actor.owns(order.user_id)):
        raise PermissionDenied("Only the customer who placed the order can view it")
    return _order_response(order, actor)


@order_router.post("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = CancelOrder(order_id=order_id, requested_at=datetime.now(UTC), **_actor_fields(actor))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/processing", response_model=StatusResponse)
async def start_processing(order_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = StartProcessing(order_id=order_id, requested_at=datetime.now(UTC), **_actor_fields(actor))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    command = CompleteOrder(order_id=order_id, requested_at=datetime.now(UTC), **_actor_fields(actor))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/tracking", response_model=StatusResponse)
async def assign_tracking_number(
    order_id: str, body: AssignTrackingNumberRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    command = AssignTrackingNumber(order_id=order_id, tracking_number=body.tracking_number, **_actor_fields(actor))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Settings Router
# ---------------------------------------------------------------------------
settings_router = APIRouter(prefix="/settings", tags=["settings"])


@settings_router.get("/delivery", response_model=DeliverySettingsSchema)
async def get_delivery_settings() -> DeliverySettingsSchema:
    config = load_delivery_config() or DeliveryRegionConfig()
    return DeliverySettingsSchema(**vars(config))


@settings_router.put("/delivery", response_model=DeliverySettingsSchema)
async def update_delivery_settings(
    body: DeliverySettingsSchema, actor: Actor = Depends(current_actor)
) -> DeliverySettingsSchema:
    command = UpdateDeliverySettings(**_actor_fields(actor), **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return DeliverySettingsSchema(**vars(load_delivery_config()))


@settings_router.get("/delivery/quote", response_model=DeliveryQuoteResponse)
async def quote_delivery(city: str = "") -> DeliveryQuoteResponse:
    """Delivery fee and estimated time for ``city``; a fee of 0 means no delivery."""
    config = load_delivery_config()
    fee = resolve_fee(city, config)
    return DeliveryQuoteResponse(
        city=city,
        delivery_fee=fee,
        deliverable=is_deliverable(fee),
        estimated_delivery_minutes=estimate_delivery_minutes(city, config),
    )


@settings_router.get("/discounts", response_model=DiscountSettingsSchema)
async def get_discount_settings(actor: Actor = Depends(admin_actor)) -> DiscountSettingsSchema:  # noqa: ARG001
    config = load_discount_config() or DiscountConfig()
    return DiscountSettingsSchema(**vars(config))


@settings_router.put("/discounts", response_model=DiscountSettingsSchema)
async def update_discount_settings(
    body: DiscountSettingsSchema, actor: Actor = Depends(current_actor)
) -> DiscountSettingsSchema:
    command = UpdateDiscountSettings(**_actor_fields(actor), **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return DiscountSettingsSchema(**vars(load_discount_config()))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/orders", response_model=list[OrderSummarySchema])
async def list_all_orders(status: str | None = None, actor: Actor = Depends(admin_actor)) -> list[OrderSummarySchema]:
    return [_summary_response(summary, actor) for summary in all_orders(status)]


@admin_router.get("/overview", response_model=SalesOverviewResponse)
async def sales_overview(
    days: int = DEFAULT_WINDOW_DAYS, actor: Actor = Depends(admin_actor)  # noqa: ARG001
) -> SalesOverviewResponse:
    now = datetime.now(UTC)
    overview = summarize_orders(all_orders(since=now - timedelta(days=days)), now=now, days=days)
    return SalesOverviewResponse(**overview.to_dict())
