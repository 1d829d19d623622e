"""Ordering bounded context: menu carts, pricing, checkout and order lifecycle.

Handles the shopping cart (CQRS), store delivery and discount settings, the
checkout flow that turns a priced cart into an order, and the order lifecycle
(event-sourced).
"""

import structlog
from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
