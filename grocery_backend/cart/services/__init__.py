from .cart_pricing import (
    add_to_cart,
    clear_cart,
    get_cart,
    get_or_create_cart,
    remove_from_cart,
    update_cart_item,
)

__all__ = [
    "get_or_create_cart",
    "get_cart",
    "add_to_cart",
    "update_cart_item",
    "remove_from_cart",
    "clear_cart",
]
