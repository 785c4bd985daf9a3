"""Services wrapping external SDKs"""

from stripe_webhook_guard.services.stripe_service import StripeService, stripe_service

__all__ = ["StripeService", "stripe_service"]
