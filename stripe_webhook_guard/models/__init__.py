"""Data models for webhook verification"""

from stripe_webhook_guard.models.verification import VerificationOptions

__all__ = ["VerificationOptions"]
