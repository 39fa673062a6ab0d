# cart/views/api.py

"""
CART API VIEWS

Purpose:
- Lazily-created per-user cart
- Add/update/remove/clear items (server-owned pricing snapshots)

Hard rules:
- Money is server-owned: price_at_add is snapshotted from
  Product.effective_price on first add and never refreshed.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from cart.serializers import (
    AddCartItemInputSerializer,
    CartItemSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from cart.services.cart_pricing import (
    add_to_cart,
    clear_cart,
    get_cart,
    remove_from_cart,
    update_cart_item,
)
from cart.services.exceptions import (
    CartError,
    CartItemNotFoundError,
    InvalidQuantityError,
    ProductUnavailableError,
)

logger = logging.getLogger(__name__)


def cart_error_response(exc: CartError):
    if isinstance(exc, ProductUnavailableError):
        return error_response(code="PRODUCT_NOT_FOUND", message=str(exc), http_status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, CartItemNotFoundError):
        return error_response(code="CART_ITEM_NOT_FOUND", message=str(exc), http_status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, InvalidQuantityError):
        return error_response(code="INVALID_QUANTITY", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)

    return error_response(code="CART_ERROR", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)


class CartView(APIView):
    """
    Retrieve (or lazily create) the authenticated user's cart.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def get(self, request):
        cart = get_cart(user=request.user)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class AddCartItemView(APIView):
    """
    Add a product to the cart.

    - New line: snapshots the current effective price
    - Existing line: increments quantity, snapshot unchanged
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartItemSerializer

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartItemSerializer},
        examples=[
            OpenApiExample(
                "Add two units",
                value={"productId": "07d0722f-92fd-4a83-b84e-6e25f034a647", "quantity": 2},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = add_to_cart(
                user=request.user,
                product_id=serializer.validated_data["productId"],
                quantity=serializer.validated_data["quantity"],
            )
        except CartError as exc:
            return cart_error_response(exc)

        return Response(CartItemSerializer(item).data, status=status.HTTP_200_OK)


class UpdateCartItemView(APIView):
    """
    Set an item's quantity. quantity <= 0 removes it.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartItemSerializer

    @extend_schema(
        request=UpdateCartItemInputSerializer,
        responses={200: CartItemSerializer},
        description="Returns the updated item, or {removed: true, productId} when quantity <= 0.",
    )
    def put(self, request):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product_id = serializer.validated_data["productId"]

        try:
            item = update_cart_item(
                user=request.user,
                product_id=product_id,
                quantity=serializer.validated_data["quantity"],
            )
        except CartError as exc:
            return cart_error_response(exc)

        if item is None:
            return Response({"removed": True, "productId": str(product_id)}, status=status.HTTP_200_OK)

        return Response(CartItemSerializer(item).data, status=status.HTTP_200_OK)


class RemoveCartItemView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request, product_id):
        try:
            remove_from_cart(user=request.user, product_id=product_id)
        except CartError as exc:
            return cart_error_response(exc)

        return Response(CartSerializer(get_cart(user=request.user)).data, status=status.HTTP_200_OK)


class ClearCartView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request):
        clear_cart(user=request.user)
        return Response(CartSerializer(get_cart(user=request.user)).data, status=status.HTTP_200_OK)
