# products/serializers/category.py

from rest_framework import serializers

from products.models import Category


class CategorySerializer(serializers.ModelSerializer):
    """
    Read-only category listing (categories are managed in Django admin).
    """

    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "createdAt"]
        read_only_fields = fields
