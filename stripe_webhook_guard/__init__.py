"""
Stripe webhook signature verification for FastAPI and Starlette.

Checks the stripe-signature header of incoming webhook requests and makes
the verified event available to handlers as ``request.state.event``.
"""

from stripe_webhook_guard.middleware import (
    StripeWebhookGuard,
    StripeWebhookMiddleware,
    get_event,
    stripe_webhook_middleware,
)
from stripe_webhook_guard.models.verification import VerificationOptions
from stripe_webhook_guard.utils.exceptions import (
    ConfigurationException,
    MissingSignatureException,
    StripeSignatureException,
    WebhookVerificationException,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigurationException",
    "MissingSignatureException",
    "StripeSignatureException",
    "StripeWebhookGuard",
    "StripeWebhookMiddleware",
    "VerificationOptions",
    "WebhookVerificationException",
    "get_event",
    "stripe_webhook_middleware",
]
