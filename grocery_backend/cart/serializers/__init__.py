from .cart import AddCartItemInputSerializer, CartSerializer, UpdateCartItemInputSerializer
from .cart_item import CartItemSerializer

__all__ = [
    "CartSerializer",
    "CartItemSerializer",
    "AddCartItemInputSerializer",
    "UpdateCartItemInputSerializer",
]
