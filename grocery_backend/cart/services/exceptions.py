# cart/services/exceptions.py

"""
CART SERVICE ERRORS
"""


class CartError(Exception):
    """Base exception for all cart failures."""


class ProductUnavailableError(CartError):
    """Product does not exist or has been deactivated."""


class CartItemNotFoundError(CartError):
    """The product is not in the caller's cart."""


class InvalidQuantityError(CartError):
    """Quantity is not a valid integer for the operation."""
