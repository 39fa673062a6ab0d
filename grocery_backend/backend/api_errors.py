# backend/api_errors.py

"""
API ERROR NORMALIZATION

Every domain failure leaves a view as:

    {"error": {"code": "<CODE>", "message": "<human readable>"}}

DRF serializer validation errors keep DRF's own 400 shape.
"""

import logging

from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def error_response(*, code: str, message: str, http_status: int):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def internal_error_response(*, context: str, **extra):
    """
    Log the active exception with detail and return a generic 500.

    Must be called from inside an `except` block.
    """
    logger.exception(context, extra=extra)
    return error_response(
        code="INTERNAL_ERROR",
        message="Something went wrong. Please try again.",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
