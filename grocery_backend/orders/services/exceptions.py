# orders/services/exceptions.py

"""
ORDER SERVICE ERRORS

Centralized domain errors for checkout and order state transitions.
"""


class OrderError(Exception):
    """Base exception for all order failures."""


class EmptyCartError(OrderError):
    """Checkout attempted with nothing in the cart."""


class OrderValidationError(OrderError):
    """Order input is well-formed but violates a business rule."""


class OrderNotFoundError(OrderError):
    """Order does not exist (or is not visible to the caller)."""


class InvalidStatusTransitionError(OrderError):
    """Fulfillment status change not allowed from the current state."""


class InvalidPaymentTransitionError(OrderError):
    """Payment status change not allowed from the current state (e.g. paid -> failed)."""
