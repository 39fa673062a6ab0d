"""
PATH: payments/serializers.py

PAYMENT SERIALIZERS (transport layer only)
"""

from rest_framework import serializers


class GatewayVerifySerializer(serializers.Serializer):
    providerOrderId = serializers.CharField(max_length=64)
    paymentId = serializers.CharField(max_length=64)
    signature = serializers.CharField(max_length=256)
    orderId = serializers.UUIDField()


class PaymentAckSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    outcome = serializers.CharField(required=False)
    detail = serializers.CharField(required=False)
