# payments/services/exceptions.py

"""
PAYMENT SERVICE ERRORS
"""


class PaymentError(Exception):
    """Base exception for all payment failures."""


class SignatureVerificationError(PaymentError):
    """Signature missing or does not match the payload."""


class GatewayNotConfiguredError(PaymentError):
    """Gateway credentials/secrets are not configured."""


class GatewayError(PaymentError):
    """Gateway API call failed (HTTP error, timeout, bad response)."""
