from .order import (
    CreateOrderInputSerializer,
    FulfillmentStatusInputSerializer,
    OrderSerializer,
    PaymentStatusInputSerializer,
    ShippingAddressSerializer,
)

__all__ = [
    "OrderSerializer",
    "CreateOrderInputSerializer",
    "ShippingAddressSerializer",
    "FulfillmentStatusInputSerializer",
    "PaymentStatusInputSerializer",
]
