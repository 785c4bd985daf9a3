"""
Custom Exception Classes

Defines the exceptions raised while configuring and running the webhook guard.
"""

from typing import Any, Dict, Optional


class MiddlewareException(Exception):
    """Base exception for all webhook guard errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "MIDDLEWARE_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationException(MiddlewareException):
    """Configuration errors, raised while the guard is being set up"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFIG_ERROR", details=details)


class StripeException(MiddlewareException):
    """Stripe related errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "STRIPE_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, details=details)


class WebhookVerificationException(StripeException):
    """
    A webhook request could not be verified.

    Always maps to a 400 response. ``details["reason"]`` tells the
    causes apart for logs; it is never sent back to the caller.
    """

    status_code = 400

    def __init__(self, message: str, reason: str):
        super().__init__(
            message,
            error_code="WEBHOOK_VERIFICATION_FAILED",
            details={"reason": reason},
        )

    @property
    def reason(self) -> str:
        return self.details["reason"]


class MissingSignatureException(WebhookVerificationException):
    """The stripe-signature header was not sent"""

    def __init__(self, message: str = "Missing signature header"):
        super().__init__(message, reason="missing_header")


class StripeSignatureException(WebhookVerificationException):
    """Stripe webhook signature verification failed"""

    def __init__(self, message: str = "Signature verification failed"):
        super().__init__(message, reason="invalid_signature")
