# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Public catalog browsing (AllowAny, active products only)
- Back-office product management (capability protected)
- Near-expiry / low-stock / featured listings

Key rule alignment:
- Writes go through products.services.catalog so the expiry classifier
  runs in the same transaction as the save.
- DELETE is a soft delete (is_active=False).
"""

from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import error_response
from permissions.roles import (
    CAP_CATALOG_DELETE,
    CAP_CATALOG_EDIT,
    HasCapability,
    user_has_capability,
)
from products.filters import ProductFilter
from products.models import Product
from products.serializers.product import ProductSerializer
from products.services.catalog import create_product, deactivate_product, update_product
from products.services.near_expiry import near_expiry_products

FEATURED_LIMIT = 8


def _default_low_stock_threshold() -> int:
    catalog = getattr(settings, "CATALOG", {}) or {}
    return int(catalog.get("LOW_STOCK_THRESHOLD", 10))


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    Public:
    - GET /api/products/?categoryId=<uuid>&nearExpiry=true&search=<text>
    - GET /api/products/<id>/
    - GET /api/products/featured/

    Back-office:
    - POST/PUT/PATCH (catalog.edit), DELETE (catalog.delete)
    - GET /api/products/near-expiry/
    - GET /api/products/low-stock/?threshold=<int>
    """

    serializer_class = ProductSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    # Capability hook used by HasCapability
    required_capability = None

    def get_permissions(self):
        if self.action in {"list", "retrieve", "featured"}:
            return [AllowAny()]

        if self.action == "destroy":
            self.required_capability = CAP_CATALOG_DELETE
        else:
            self.required_capability = CAP_CATALOG_EDIT

        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        qs = Product.objects.select_related("category").order_by("-created_at")

        # Back-office may open/edit deactivated products; everyone else sees active only
        if self.action in {"retrieve", "update", "partial_update", "destroy"} and user_has_capability(
            self.request.user, CAP_CATALOG_EDIT, request=self.request
        ):
            return qs

        return qs.filter(is_active=True)

    # -----------------------------
    # Writes (classifier hook)
    # -----------------------------
    def perform_create(self, serializer):
        serializer.instance = create_product(data=serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_product(
            product=serializer.instance,
            data=serializer.validated_data,
        )

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        if not product.is_active:
            return error_response(
                code="PRODUCT_ALREADY_INACTIVE",
                message="Product is already deactivated.",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        deactivate_product(product=product)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -----------------------------
    # Storefront: featured
    # -----------------------------
    @extend_schema(
        responses={200: ProductSerializer(many=True)},
        description="Newest active, in-stock products.",
    )
    @action(detail=False, methods=["get"], url_path="featured")
    def featured(self, request):
        qs = Product.objects.select_related("category").filter(is_active=True, stock__gt=0).order_by("-created_at")[
            :FEATURED_LIMIT
        ]
        data = self.get_serializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    # -----------------------------
    # Alerts: near expiry
    # -----------------------------
    @extend_schema(
        responses={200: ProductSerializer(many=True)},
        description="Active products currently flagged near-expiry, soonest expiry first.",
    )
    @action(detail=False, methods=["get"], url_path="near-expiry")
    def near_expiry(self, request):
        qs = near_expiry_products().select_related("category")
        data = self.get_serializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    # -----------------------------
    # Alerts: low stock
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Stock at or below this value is low (default 10).",
            ),
        ],
        responses={
            200: OpenApiResponse(response=ProductSerializer(many=True)),
            400: OpenApiResponse(description="Invalid threshold"),
        },
    )
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        raw_threshold = (request.query_params.get("threshold") or "").strip()

        if raw_threshold:
            try:
                threshold = int(raw_threshold)
                if threshold < 0:
                    raise ValueError
            except ValueError:
                return error_response(
                    code="INVALID_THRESHOLD",
                    message="threshold must be a non-negative integer",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )
        else:
            threshold = _default_low_stock_threshold()

        qs = (
            Product.objects.select_related("category")
            .filter(is_active=True, stock__lte=threshold)
            .order_by("stock", "name")
        )
        data = self.get_serializer(qs, many=True).data
        return Response({"count": len(data), "threshold": threshold, "results": data})
