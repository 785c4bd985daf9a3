"""
Verification Options Model

Settings forwarded to the Stripe SDK when a webhook signature is checked.
"""

from typing import Any, Dict, Optional

import stripe
from pydantic import BaseModel, ConfigDict, Field


class VerificationOptions(BaseModel):
    """Options passed through to ``stripe.Webhook.construct_event``"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tolerance: int = Field(
        default=stripe.Webhook.DEFAULT_TOLERANCE,
        gt=0,
        description="Maximum age of the signature timestamp, in seconds",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key attached to the constructed event",
    )

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for the SDK call"""
        return self.model_dump(exclude_none=True)
