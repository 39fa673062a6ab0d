"""
PATH: payments/urls.py

PAYMENT URLS (mounted at /api/payments/)
"""

from django.urls import path

from payments.views import GatewayVerifyView, RazorpayWebhookView

app_name = "payments"

urlpatterns = [
    path("webhook/", RazorpayWebhookView.as_view(), name="webhook"),
    path("gateway/verify/", GatewayVerifyView.as_view(), name="gateway-verify"),
]
