"""
PATH: cart/urls.py

CART URLS (mounted at /api/cart/)
"""

from django.urls import path

from cart.views import (
    AddCartItemView,
    CartView,
    ClearCartView,
    RemoveCartItemView,
    UpdateCartItemView,
)

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("add/", AddCartItemView.as_view(), name="add"),
    path("update/", UpdateCartItemView.as_view(), name="update"),
    path("remove/<uuid:product_id>/", RemoveCartItemView.as_view(), name="remove"),
    path("clear/", ClearCartView.as_view(), name="clear"),
]
