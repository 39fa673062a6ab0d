# payments/services/upi.py

"""
Plain UPI collect payload (VPA + upi:// deep link + QR image URL).
"""

from urllib.parse import quote, urlencode

from django.conf import settings

QR_BASE_URL = "https://chart.googleapis.com/chart"


def _upi_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    return payments.get("UPI") or {}


def build_upi_payload(*, order_id, amount, currency: str = "INR") -> dict:
    cfg = _upi_cfg()
    vpa = (cfg.get("MERCHANT_VPA") or "merchant@upi").strip()
    name = (cfg.get("MERCHANT_NAME") or "Merchant").strip()

    params = {
        "pa": vpa,
        "pn": name,
        "am": str(amount),
        "cu": currency,
        "tr": str(order_id),
    }
    upi_uri = "upi://pay?" + urlencode(params, quote_via=quote)
    qr_url = f"{QR_BASE_URL}?chs=300x300&cht=qr&chl={quote(upi_uri, safe='')}"

    return {"vpa": vpa, "upiUri": upi_uri, "qrUrl": qr_url}
