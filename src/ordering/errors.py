"""Domain errors raised by the ordering context.

Every error is a Protean ``ValidationError`` so command processing rejects it
the same way it rejects field validation failures. Subclasses let callers (the
HTTP layer, tests) tell the failure kinds apart.
"""

from datetime import timedelta

from protean.exceptions import ValidationError


class OrderingError(ValidationError):
    field = "order"

    def __init__(self, message):
        super().__init__({self.field: [message]})
        self.message = message


class InvalidQuantity(OrderingError):
    field = "quantity"


class CartEntryNotFound(OrderingError):
    field = "entry_key"


class DiscountCodeRejected(OrderingError):
    field = "discount_code"

    def __init__(self, reason):
        super().__init__(f"Discount code rejected: {reason}")
        self.reason = reason


class DeliveryUnavailable(OrderingError):
    field = "city"


class PermissionDenied(OrderingError):
    field = "actor"


class InvalidTransition(OrderingError):
    field = "status"


class CancellationWindowExpired(OrderingError):
    field = "status"

    def __init__(self, window: timedelta, elapsed: timedelta):
        minutes = int(window.total_seconds() // 60)
        super().__init__(f"Orders can only be cancelled within {minutes} minutes of being placed")
        self.window = window
        self.elapsed = elapsed


class ProcessingTooEarly(OrderingError):
    field = "status"

    def __init__(self, wait: timedelta):
        seconds = max(int(wait.total_seconds()), 0)
        minutes, seconds = divmod(seconds, 60)
        super().__init__(f"Processing can start in {minutes}m {seconds:02d}s, once the cancellation window closes")
        self.wait = wait


class CheckoutInProgress(OrderingError):
    field = "checkout"

    def __init__(self):
        super().__init__("The cart is being paid for; abandon the checkout before changing it")
