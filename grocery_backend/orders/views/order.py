# orders/views/order.py

"""
ORDER API VIEWS

Customer:
- POST /api/orders/                      checkout the cart
- GET  /api/orders/                      own orders
- GET  /api/orders/<id>/
- POST /api/orders/<id>/confirm-upi/     client-confirmed UPI payment

Back-office:
- GET  /api/orders/                      all orders (orders.view_all)
- PUT  /api/orders/<id>/status/          fulfillment (orders.manage)
- PUT  /api/orders/<id>/payment-status/  manual payment (payments.reconcile)
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response, internal_error_response
from orders.models import Order
from orders.serializers import (
    CreateOrderInputSerializer,
    FulfillmentStatusInputSerializer,
    OrderSerializer,
    PaymentStatusInputSerializer,
)
from orders.services.exceptions import OrderError
from orders.services.fulfillment import update_fulfillment_status
from orders.services.order_service import place_order_from_cart
from orders.services.payment_confirmation import confirm_upi_payment, set_payment_status
from orders.views.errors import order_error_response
from payments.services.checkout import build_payment_payload
from permissions.roles import (
    CAP_ORDERS_MANAGE,
    CAP_ORDERS_VIEW_ALL,
    CAP_PAYMENTS_RECONCILE,
    HasCapability,
    user_has_capability,
)

logger = logging.getLogger(__name__)


def _visible_orders(request):
    qs = Order.objects.select_related("user").order_by("-created_at")
    if user_has_capability(request.user, CAP_ORDERS_VIEW_ALL, request=request):
        return qs
    return qs.filter(user=request.user)


class OrderListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(responses={200: OrderSerializer(many=True)})
    def get(self, request):
        qs = _visible_orders(request)

        payment_status = (request.query_params.get("paymentStatus") or "").strip()
        if payment_status:
            qs = qs.filter(payment_status=payment_status)

        return Response(OrderSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=CreateOrderInputSerializer,
        responses={
            201: OpenApiResponse(description="{order} plus {upi} or {razorpay} for UPI orders"),
            400: OpenApiResponse(description="Validation error or empty cart"),
        },
        examples=[
            OpenApiExample(
                "UPI checkout",
                value={
                    "paymentMethod": "upi",
                    "shippingAddress": {
                        "fullName": "Asha Rao",
                        "phone": "9876543210",
                        "addressLine1": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                    },
                    "totals": {"shippingAmount": "40.00", "discountAmount": "0.00"},
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = CreateOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = place_order_from_cart(
                user=request.user,
                shipping_address=data["shippingAddress"],
                payment_method=data["paymentMethod"],
                shipping_amount=data["shipping_amount"],
                discount_amount=data["discount_amount"],
            )
        except OrderError as exc:
            return order_error_response(exc)
        except Exception:
            return internal_error_response(context="Order creation failed", user_id=str(request.user.pk))

        body = {}
        if order.payment_method == Order.METHOD_UPI:
            kind, payload = build_payment_payload(order=order)
            body[kind] = payload

        body["order"] = OrderSerializer(order).data
        return Response(body, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(responses={200: OrderSerializer, 404: OpenApiResponse(description="Order not found")})
    def get(self, request, order_id):
        order = _visible_orders(request).filter(pk=order_id).first()
        if order is None:
            return error_response(
                code="ORDER_NOT_FOUND",
                message="Order not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE
    serializer_class = OrderSerializer

    @extend_schema(request=FulfillmentStatusInputSerializer, responses={200: OrderSerializer})
    def put(self, request, order_id):
        serializer = FulfillmentStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_fulfillment_status(
                order_id=order_id,
                status=serializer.validated_data["status"],
                actor=request.user,
            )
        except OrderError as exc:
            return order_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderPaymentStatusView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENTS_RECONCILE
    serializer_class = OrderSerializer

    @extend_schema(request=PaymentStatusInputSerializer, responses={200: OrderSerializer})
    def put(self, request, order_id):
        serializer = PaymentStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = set_payment_status(
                order_id=order_id,
                payment_status=serializer.validated_data["paymentStatus"],
                actor=request.user,
            )
        except OrderError as exc:
            return order_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class ConfirmUpiPaymentView(APIView):
    """
    The payer says "I paid" after scanning the QR. No independent check
    against the UPI network happens here.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(request=None, responses={200: OrderSerializer})
    def post(self, request, order_id):
        try:
            order, outcome = confirm_upi_payment(order_id=order_id, user=request.user)
        except OrderError as exc:
            return order_error_response(exc)

        return Response(
            {"order": OrderSerializer(order).data, "outcome": outcome},
            status=status.HTTP_200_OK,
        )
