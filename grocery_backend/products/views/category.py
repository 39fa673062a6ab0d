# products/views/category.py

from rest_framework import viewsets
from rest_framework.permissions import AllowAny

from products.models import Category
from products.serializers.category import CategorySerializer


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Category API (read-only; managed through Django admin).

    Public so the storefront can render category filters.
    """

    queryset = Category.objects.all().order_by("name")
    serializer_class = CategorySerializer
    permission_classes = [AllowAny]
