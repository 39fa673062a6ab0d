from .verify import GatewayVerifyView
from .webhook import RazorpayWebhookView

__all__ = ["GatewayVerifyView", "RazorpayWebhookView"]
