# payments/views/webhook.py

"""
RAZORPAY WEBHOOK

POST /api/payments/webhook/   (unauthenticated, signature-verified)

Rules:
- HMAC-SHA256 over the RAW body with RAZORPAY_WEBHOOK_SECRET, compared to
  X-Razorpay-Signature. Missing/invalid signature -> 400, no state change.
- payment.captured / order.paid -> try_mark_paid(notes.order_id).
- Everything else that verified (unknown event, unknown order, replays)
  -> 200 {"ok": true} so the provider stops redelivering.
"""

from __future__ import annotations

import json
import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from backend.api_errors import error_response, internal_error_response
from orders.services.exceptions import InvalidPaymentTransitionError
from orders.services.payment_confirmation import try_mark_paid
from payments.serializers import PaymentAckSerializer
from payments.services.exceptions import GatewayNotConfiguredError
from payments.services.razorpay import verify_webhook_signature

logger = logging.getLogger(__name__)

PAID_EVENTS = {"payment.captured", "order.paid"}
NOTE_KEYS = ("order_id", "orderId", "order")


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


def extract_order_reference(payload: dict) -> str:
    """
    Our order id, as placed in notes when the gateway order was created.
    """
    body = payload.get("payload") or {}
    for entity_name in ("payment", "order"):
        entity = (body.get(entity_name) or {}).get("entity") or {}
        notes = entity.get("notes") or {}
        if not isinstance(notes, dict):
            continue
        for key in NOTE_KEYS:
            value = str(notes.get(key) or "").strip()
            if value:
                return value
    return ""


class RazorpayWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [WebhookThrottle]

    @extend_schema(
        request=None,
        responses={
            200: PaymentAckSerializer,
            400: OpenApiResponse(description="Missing or invalid signature"),
        },
    )
    def post(self, request, *args, **kwargs):
        # Raw bytes; must be read before anything touches request.data
        raw_body = request.body or b""
        signature = request.headers.get("X-Razorpay-Signature")

        try:
            verified = verify_webhook_signature(raw_body=raw_body, signature=signature)
        except GatewayNotConfiguredError:
            logger.warning("Razorpay webhook received but no webhook secret is configured")
            return error_response(
                code="WEBHOOK_NOT_CONFIGURED",
                message="Missing signature or secret",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        if not verified:
            logger.warning(
                "Razorpay webhook signature rejected",
                extra={"has_signature": bool(signature), "remote_addr": request.META.get("REMOTE_ADDR")},
            )
            return error_response(
                code="INVALID_SIGNATURE",
                message="Invalid signature",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            payload = json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return error_response(
                code="INVALID_PAYLOAD",
                message="Webhook body is not valid JSON",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        if not isinstance(payload, dict):
            return error_response(
                code="INVALID_PAYLOAD",
                message="Webhook body must be a JSON object",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        event = str(payload.get("event") or "").strip()
        if event not in PAID_EVENTS:
            logger.info("Razorpay webhook event ignored", extra={"event": event})
            return Response({"ok": True, "detail": "Ignored"}, status=status.HTTP_200_OK)

        order_ref = extract_order_reference(payload)
        if not order_ref:
            logger.warning("Razorpay webhook without order reference", extra={"event": event})
            return Response({"ok": True, "detail": "No order reference"}, status=status.HTTP_200_OK)

        try:
            outcome = try_mark_paid(order_ref, source="razorpay_webhook")
        except InvalidPaymentTransitionError:
            logger.warning("Razorpay webhook for a failed order", extra={"order_id": order_ref, "event": event})
            return Response({"ok": True, "detail": "Order payment already failed"}, status=status.HTTP_200_OK)
        except Exception:
            return internal_error_response(context="Razorpay webhook processing failed", order_id=order_ref)

        return Response({"ok": True, "outcome": outcome}, status=status.HTTP_200_OK)
