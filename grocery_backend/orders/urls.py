"""
PATH: orders/urls.py

ORDER URLS (mounted at /api/orders/)
"""

from django.urls import path

from orders.views import (
    ConfirmUpiPaymentView,
    OrderDetailView,
    OrderListCreateView,
    OrderPaymentStatusView,
    OrderStatusView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="list-create"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="detail"),
    path("<uuid:order_id>/status/", OrderStatusView.as_view(), name="status"),
    path("<uuid:order_id>/payment-status/", OrderPaymentStatusView.as_view(), name="payment-status"),
    path("<uuid:order_id>/confirm-upi/", ConfirmUpiPaymentView.as_view(), name="confirm-upi"),
]
