# products/filters.py

"""
CATALOG QUERY FILTERS (django-filter)

GET /api/products/?categoryId=<uuid>&nearExpiry=true&search=<text>
"""

import django_filters
from django.db.models import Q

from products.models import Product


class ProductFilter(django_filters.FilterSet):
    categoryId = django_filters.UUIDFilter(field_name="category_id")
    nearExpiry = django_filters.BooleanFilter(field_name="near_expiry")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Product
        fields = ["categoryId", "nearExpiry", "search"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))
