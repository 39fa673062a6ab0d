# payments/views/verify.py

"""
CLIENT-RELAYED GATEWAY VERIFICATION

POST /api/payments/gateway/verify/
    {providerOrderId, paymentId, signature, orderId}

expected = HMAC-SHA256(key_secret, providerOrderId + "|" + paymentId)
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from orders.models import Order
from orders.services.exceptions import InvalidPaymentTransitionError
from orders.services.payment_confirmation import try_mark_paid
from payments.serializers import GatewayVerifySerializer, PaymentAckSerializer
from payments.services.exceptions import GatewayNotConfiguredError, SignatureVerificationError
from payments.services.razorpay import ensure_checkout_signature
from permissions.roles import CAP_ORDERS_VIEW_ALL, user_has_capability

logger = logging.getLogger(__name__)


class GatewayVerifyView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=GatewayVerifySerializer,
        responses={
            200: PaymentAckSerializer,
            400: OpenApiResponse(description="Missing parameters, invalid signature or provider order mismatch"),
            404: OpenApiResponse(description="Order not found"),
            409: OpenApiResponse(description="Order payment already failed"),
            503: OpenApiResponse(description="Gateway secret not configured"),
        },
    )
    def post(self, request):
        serializer = GatewayVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            ensure_checkout_signature(
                provider_order_id=data["providerOrderId"],
                payment_id=data["paymentId"],
                signature=data["signature"],
            )
        except GatewayNotConfiguredError:
            logger.error("Gateway verification requested but RAZORPAY_KEY_SECRET is not configured")
            return error_response(
                code="GATEWAY_NOT_CONFIGURED",
                message="Payment gateway is not configured",
                http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        except SignatureVerificationError:
            logger.warning(
                "Gateway signature rejected",
                extra={"order_id": str(data["orderId"]), "razorpay_order_id": data["providerOrderId"]},
            )
            return error_response(
                code="INVALID_SIGNATURE",
                message="Invalid signature",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        qs = Order.objects.filter(pk=data["orderId"])
        if not user_has_capability(request.user, CAP_ORDERS_VIEW_ALL, request=request):
            qs = qs.filter(user=request.user)

        order = qs.first()
        if order is None:
            return error_response(
                code="ORDER_NOT_FOUND",
                message="Order not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        if order.gateway_order_id and order.gateway_order_id != data["providerOrderId"]:
            logger.warning(
                "Gateway order id does not belong to this order",
                extra={"order_id": str(order.id), "razorpay_order_id": data["providerOrderId"]},
            )
            return error_response(
                code="GATEWAY_ORDER_MISMATCH",
                message="Payment does not belong to this order",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            outcome = try_mark_paid(order.id, source="razorpay_verify")
        except InvalidPaymentTransitionError as exc:
            return error_response(
                code="INVALID_PAYMENT_TRANSITION",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )

        return Response({"ok": True, "outcome": outcome}, status=status.HTTP_200_OK)
