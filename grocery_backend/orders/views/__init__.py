from .order import (
    ConfirmUpiPaymentView,
    OrderDetailView,
    OrderListCreateView,
    OrderPaymentStatusView,
    OrderStatusView,
)

__all__ = [
    "OrderListCreateView",
    "OrderDetailView",
    "OrderStatusView",
    "OrderPaymentStatusView",
    "ConfirmUpiPaymentView",
]
