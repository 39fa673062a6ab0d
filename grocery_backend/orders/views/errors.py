# orders/views/errors.py

from rest_framework import status

from backend.api_errors import error_response
from orders.services.exceptions import (
    EmptyCartError,
    InvalidPaymentTransitionError,
    InvalidStatusTransitionError,
    OrderError,
    OrderNotFoundError,
    OrderValidationError,
)

ERROR_MAP = (
    (EmptyCartError, "EMPTY_CART", status.HTTP_400_BAD_REQUEST),
    (OrderValidationError, "INVALID_ORDER", status.HTTP_400_BAD_REQUEST),
    (OrderNotFoundError, "ORDER_NOT_FOUND", status.HTTP_404_NOT_FOUND),
    (InvalidStatusTransitionError, "INVALID_STATUS_TRANSITION", status.HTTP_409_CONFLICT),
    (InvalidPaymentTransitionError, "INVALID_PAYMENT_TRANSITION", status.HTTP_409_CONFLICT),
)


def order_error_response(exc: OrderError):
    for exc_type, code, http_status in ERROR_MAP:
        if isinstance(exc, exc_type):
            return error_response(code=code, message=str(exc), http_status=http_status)

    return error_response(code="ORDER_ERROR", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)
