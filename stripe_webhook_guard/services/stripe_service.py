"""
Stripe Service

Wraps the Stripe SDK's webhook signature check.
"""

import stripe

from stripe_webhook_guard.models.verification import VerificationOptions
from stripe_webhook_guard.utils.logging_config import get_logger

logger = get_logger(__name__)


class StripeService:
    """Stripe webhook verification"""

    async def construct_event(
        self,
        payload: bytes,
        signature: str,
        secret: str,
        options: VerificationOptions,
    ) -> stripe.Event:
        """
        Verify a webhook signature and build the event it signs.

        The signature is an HMAC-SHA256 over ``"{timestamp}.{payload}"``,
        so ``payload`` must be the exact bytes that were received.

        Args:
            payload: Raw request body
            signature: Stripe-Signature header value
            secret: Webhook endpoint signing secret
            options: Tolerance and API key for the SDK

        Returns:
            The verified stripe.Event

        Raises:
            stripe.SignatureVerificationError: Header is malformed, stale,
                or carries no matching signature
            ValueError: Payload is not valid JSON
        """
        event = stripe.Webhook.construct_event(
            payload,
            signature,
            secret,
            **options.as_kwargs(),
        )

        logger.info(
            "Webhook signature verified successfully",
            extra={
                "event_id": getattr(event, "id", None),
                "event_type": getattr(event, "type", None),
            },
        )

        return event


# Global Stripe service instance
stripe_service = StripeService()
