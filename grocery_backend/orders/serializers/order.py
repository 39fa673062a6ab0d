# orders/serializers/order.py

"""
ORDER SERIALIZERS

- OrderSerializer: read model (camelCase wire format)
- CreateOrderInputSerializer: checkout command. Line items always come from
  the server-side cart; an `items` array sent by the client is accepted for
  compatibility and ignored.
"""

from decimal import Decimal

from rest_framework import serializers

from orders.models import Order


class ShippingAddressSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=120)
    phone = serializers.CharField(max_length=20)
    addressLine1 = serializers.CharField(max_length=255)
    addressLine2 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=120)
    state = serializers.CharField(max_length=120)
    pincode = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "pincode must be 6 digits"})


class OrderTotalsInputSerializer(serializers.Serializer):
    shippingAmount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0.00")
    )
    discountAmount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0.00")
    )


class CreateOrderInputSerializer(serializers.Serializer):
    shippingAddress = ShippingAddressSerializer()
    paymentMethod = serializers.ChoiceField(choices=[c for c, _ in Order.PAYMENT_METHOD_CHOICES])
    totals = OrderTotalsInputSerializer(required=False)
    items = serializers.ListField(child=serializers.DictField(), required=False)

    def validate(self, attrs):
        totals = attrs.get("totals") or {}
        attrs["shipping_amount"] = totals.get("shippingAmount", Decimal("0.00"))
        attrs["discount_amount"] = totals.get("discountAmount", Decimal("0.00"))
        return attrs


class FulfillmentStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c for c, _ in Order.STATUS_CHOICES])


class PaymentStatusInputSerializer(serializers.Serializer):
    paymentStatus = serializers.ChoiceField(choices=[c for c, _ in Order.PAYMENT_STATUS_CHOICES])


class OrderSerializer(serializers.ModelSerializer):
    userId = serializers.UUIDField(source="user_id", read_only=True)
    shippingAddress = serializers.JSONField(source="shipping_address", read_only=True)
    paymentStatus = serializers.CharField(source="payment_status", read_only=True)
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)

    subtotalAmount = serializers.DecimalField(source="subtotal_amount", max_digits=12, decimal_places=2, read_only=True)
    shippingAmount = serializers.DecimalField(source="shipping_amount", max_digits=12, decimal_places=2, read_only=True)
    discountAmount = serializers.DecimalField(source="discount_amount", max_digits=12, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=12, decimal_places=2, read_only=True)

    gatewayOrderId = serializers.CharField(source="gateway_order_id", read_only=True)
    paidAt = serializers.DateTimeField(source="paid_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "userId",
            "items",
            "shippingAddress",
            "status",
            "paymentStatus",
            "paymentMethod",
            "subtotalAmount",
            "shippingAmount",
            "discountAmount",
            "totalAmount",
            "gatewayOrderId",
            "paidAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
