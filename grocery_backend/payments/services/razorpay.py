# payments/services/razorpay.py

"""
======================================================
PATH: payments/services/razorpay.py
======================================================
RAZORPAY GATEWAY CLIENT

- create_gateway_order(): POST /v1/orders (Basic auth key_id:key_secret),
  amount in paise, notes.order_id = our order id.
- verify_webhook_signature(): HMAC-SHA256(webhook_secret, raw body), hex.
- verify_checkout_signature(): HMAC-SHA256(key_secret, "<order_id>|<payment_id>").

All comparisons are constant-time. Secrets never appear in logs.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import http.client
import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from payments.services.exceptions import (
    GatewayError,
    GatewayNotConfiguredError,
    SignatureVerificationError,
)

logger = logging.getLogger(__name__)

RAZORPAY_BASE = "https://api.razorpay.com/v1"


def _payments_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    return payments if isinstance(payments, dict) else {}


def _razorpay_cfg() -> dict:
    cfg = _payments_cfg().get("RAZORPAY") or {}
    return cfg if isinstance(cfg, dict) else {}


def provider() -> str:
    return str(_payments_cfg().get("PROVIDER") or "razorpay").strip().lower()


def currency() -> str:
    return str(_payments_cfg().get("CURRENCY") or "INR").strip().upper()


def key_id() -> str:
    return str(_razorpay_cfg().get("KEY_ID") or "").strip()


def _key_secret() -> str:
    return str(_razorpay_cfg().get("KEY_SECRET") or "").strip()


def _webhook_secret() -> str:
    return str(_razorpay_cfg().get("WEBHOOK_SECRET") or "").strip()


def _timeout() -> int:
    return int(_razorpay_cfg().get("TIMEOUT_SECONDS") or 15)


def is_configured() -> bool:
    """Gateway orders can be created (provider selected and credentials set)."""
    return provider() == "razorpay" and bool(key_id()) and bool(_key_secret())


def to_paise(amount) -> int:
    try:
        rupees = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc
    return int((rupees * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------
# SIGNATURES
# ---------------------------------------------------------

def compute_signature(*, secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message or b"", hashlib.sha256).hexdigest()


def _matches(expected: str, provided) -> bool:
    return hmac.compare_digest(expected, str(provided or "").strip())


def verify_webhook_signature(*, raw_body: bytes, signature: str | None) -> bool:
    """
    False when the signature is missing or wrong.
    Raises GatewayNotConfiguredError when no webhook secret is set.
    """
    secret = _webhook_secret()
    if not secret:
        raise GatewayNotConfiguredError("RAZORPAY_WEBHOOK_SECRET is not configured")

    if not signature:
        return False

    return _matches(compute_signature(secret=secret, message=raw_body), signature)


def verify_checkout_signature(*, provider_order_id: str, payment_id: str, signature: str) -> bool:
    secret = _key_secret()
    if not secret:
        raise GatewayNotConfiguredError("RAZORPAY_KEY_SECRET is not configured")

    message = f"{provider_order_id}|{payment_id}".encode("utf-8")
    return _matches(compute_signature(secret=secret, message=message), signature)


def ensure_checkout_signature(*, provider_order_id: str, payment_id: str, signature: str) -> None:
    if not verify_checkout_signature(provider_order_id=provider_order_id, payment_id=payment_id, signature=signature):
        raise SignatureVerificationError("Checkout signature does not match")


# ---------------------------------------------------------
# HTTP
# ---------------------------------------------------------

def _request_json(method: str, url: str, *, body: dict | None = None) -> dict[str, Any]:
    if not is_configured():
        raise GatewayNotConfiguredError("Razorpay credentials are not configured")

    token = base64.b64encode(f"{key_id()}:{_key_secret()}".encode("utf-8")).decode("ascii")
    data = json.dumps(body, ensure_ascii=False).encode("utf-8") if body is not None else None

    req = Request(
        url,
        data=data,
        headers={
            "Authorization": f"Basic {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=_timeout()) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        detail = ""
        try:
            detail = e.read().decode("utf-8", errors="replace")[:500]
        except OSError:
            detail = ""
        raise GatewayError(f"Razorpay HTTPError: {e.code} {detail}".strip()) from e
    except URLError as e:
        raise GatewayError(f"Razorpay URLError: {e.reason}") from e
    except TimeoutError as e:
        raise GatewayError("Razorpay request timed out") from e
    except (OSError, http.client.HTTPException) as e:
        # dropped connections and truncated bodies surface outside URLError
        raise GatewayError(f"Razorpay connection failed: {e.__class__.__name__}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise GatewayError("Razorpay returned non-JSON") from e

    if not isinstance(parsed, dict):
        raise GatewayError("Razorpay returned an unexpected payload")

    return parsed


def create_gateway_order(*, order_id, amount) -> dict:
    """
    Create a Razorpay order for one of our orders.

    Returns the client checkout payload:
        {key_id, razorpay_order_id, amount, currency}
    """
    payload = {
        "amount": to_paise(amount),
        "currency": currency(),
        "receipt": str(order_id),
        "notes": {"order_id": str(order_id)},
    }

    body = _request_json("POST", f"{RAZORPAY_BASE}/orders", body=payload)

    provider_order_id = str(body.get("id") or "").strip()
    if not provider_order_id:
        raise GatewayError("Razorpay order response missing id")

    logger.info(
        "Razorpay order created",
        extra={"order_id": str(order_id), "razorpay_order_id": provider_order_id},
    )

    return {
        "key_id": key_id(),
        "razorpay_order_id": provider_order_id,
        "amount": body.get("amount", payload["amount"]),
        "currency": body.get("currency", payload["currency"]),
    }
