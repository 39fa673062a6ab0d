"""
PATH: cart/serializers/cart_item.py

CART ITEM SERIALIZER

- priceAtAdd is read-only (server-controlled snapshot).
- currentPrice shows today's effective price next to the snapshot so the UI
  can hint at a newer discount without the cart changing underneath.
"""

from rest_framework import serializers

from cart.models import CartItem


class CartItemSerializer(serializers.ModelSerializer):
    productId = serializers.UUIDField(source="product.id", read_only=True)
    productName = serializers.CharField(source="product.name", read_only=True)
    imageUrl = serializers.CharField(source="product.image_url", read_only=True)

    priceAtAdd = serializers.DecimalField(source="price_at_add", max_digits=10, decimal_places=2, read_only=True)
    currentPrice = serializers.DecimalField(
        source="product.effective_price", max_digits=10, decimal_places=2, read_only=True
    )
    lineTotal = serializers.DecimalField(source="line_total", max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "productId",
            "productName",
            "imageUrl",
            "quantity",
            "priceAtAdd",
            "currentPrice",
            "lineTotal",
        ]
        read_only_fields = fields
