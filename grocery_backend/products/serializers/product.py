# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for the storefront and the back-office.
- Wire format is camelCase (categoryId, imageUrl, expiryDate, ...).

GUARANTEES:
- nearExpiry / discountPercent are READ-ONLY. They are derived by the
  expiry classifier on save and can never be set by a client.
- effectivePrice is what add-to-cart will snapshot right now.
"""

from rest_framework import serializers

from products.models import Category, Product


class ProductSerializer(serializers.ModelSerializer):
    categoryId = serializers.PrimaryKeyRelatedField(
        source="category",
        queryset=Category.objects.all(),
        required=False,
        allow_null=True,
    )
    categoryName = serializers.CharField(source="category.name", read_only=True, default=None)

    imageUrl = serializers.URLField(source="image_url", required=False, allow_blank=True, max_length=500)
    expiryDate = serializers.DateField(source="expiry_date", required=False, allow_null=True)

    nearExpiry = serializers.BooleanField(source="near_expiry", read_only=True)
    discountPercent = serializers.DecimalField(
        source="discount_percent", max_digits=5, decimal_places=2, read_only=True
    )
    effectivePrice = serializers.DecimalField(max_digits=10, decimal_places=2, source="effective_price", read_only=True)

    isActive = serializers.BooleanField(source="is_active", required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "categoryId",
            "categoryName",
            "imageUrl",
            "expiryDate",
            "nearExpiry",
            "discountPercent",
            "effectivePrice",
            "isActive",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("name is required")
        return value

    def validate_price(self, value):
        # Keep consistent with Product.clean(): strictly positive
        if value is None or value <= 0:
            raise serializers.ValidationError("price must be greater than zero")
        return value
