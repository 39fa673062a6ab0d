# products/urls.py

"""
PRODUCTS URLS

Mounted at /api/ :
    /api/products/                 list / create
    /api/products/<id>/            retrieve / update / soft delete
    /api/products/featured/
    /api/products/near-expiry/
    /api/products/low-stock/
    /api/categories/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import CategoryViewSet, ProductViewSet

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
