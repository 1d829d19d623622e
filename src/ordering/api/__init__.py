from ordering.api.errors import register_error_handlers
from ordering.api.routes import admin_router, cart_router, order_router, settings_router

__all__ = ["admin_router", "cart_router", "order_router", "register_error_handlers", "settings_router"]
