from .api import (
    AddCartItemView,
    CartView,
    ClearCartView,
    RemoveCartItemView,
    UpdateCartItemView,
)

__all__ = [
    "CartView",
    "AddCartItemView",
    "UpdateCartItemView",
    "RemoveCartItemView",
    "ClearCartView",
]
