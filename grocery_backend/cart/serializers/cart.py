# cart/serializers/cart.py

"""
CART SERIALIZER

Guarantees:
- items are read-only
- totals are computed server-side from price_at_add snapshots
"""

from decimal import Decimal

from rest_framework import serializers

from cart.models import Cart

from .cart_item import CartItemSerializer


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)

    itemCount = serializers.SerializerMethodField()
    subtotal = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ["id", "items", "itemCount", "subtotal"]
        read_only_fields = fields

    def get_itemCount(self, obj) -> int:
        # total units, not number of lines
        return sum(int(i.quantity or 0) for i in obj.items.all())

    def get_subtotal(self, obj) -> str:
        subtotal = sum((i.line_total for i in obj.items.all()), Decimal("0.00"))
        return f"{subtotal:.2f}"


class AddCartItemInputSerializer(serializers.Serializer):
    productId = serializers.UUIDField()
    quantity = serializers.IntegerField(default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    productId = serializers.UUIDField()
    quantity = serializers.IntegerField(help_text="0 or less removes the item")
