"""
Stripe Webhook Guard

Verifies the ``stripe-signature`` header of incoming requests before they
reach a webhook handler, and stores the verified event on
``request.state.event``.

The guard can be mounted three ways:

    guard = stripe_webhook_middleware(settings.stripe_webhook_secret)

    # per route, as a FastAPI dependency
    @app.post("/webhook", dependencies=[Depends(guard.dependency)])

    # app wide, as an http middleware function
    app.middleware("http")(guard)

    # app wide, limited to some paths
    app.add_middleware(StripeWebhookMiddleware, secret=..., paths=["/webhook"])
"""

import inspect
import re
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from fastapi import HTTPException
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from stripe_webhook_guard.config import Settings
from stripe_webhook_guard.models.verification import VerificationOptions
from stripe_webhook_guard.services.stripe_service import stripe_service
from stripe_webhook_guard.utils.exceptions import (
    ConfigurationException,
    MissingSignatureException,
    StripeSignatureException,
    WebhookVerificationException,
)
from stripe_webhook_guard.utils.logging_config import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "stripe-signature"
EVENT_STATE_KEY = "event"

_SECRET_PATTERN = re.compile(r"whsec_[a-zA-Z0-9]+")

Verifier = Callable[[bytes, str, str, VerificationOptions], Any]
OptionsLike = Union[VerificationOptions, Mapping[str, Any], None]


def _validate_secret(secret: Any) -> str:
    if not isinstance(secret, str) or not _SECRET_PATTERN.fullmatch(secret):
        raise ConfigurationException("Invalid webhook secret")
    return secret


def _coerce_options(options: OptionsLike) -> VerificationOptions:
    if options is None:
        return VerificationOptions()
    if isinstance(options, VerificationOptions):
        return options
    if isinstance(options, Mapping):
        try:
            return VerificationOptions(**options)
        except ValidationError as e:
            raise ConfigurationException(
                "Invalid verification options",
                details={"errors": e.errors(include_url=False)},
            ) from e
    raise ConfigurationException(
        "Invalid verification options",
        details={"type": type(options).__name__},
    )


class StripeWebhookGuard:
    """
    Request step that checks a Stripe webhook signature.

    Holds no per-request state, so one instance can serve any number of
    concurrent requests.
    """

    def __init__(
        self,
        secret: str,
        options: OptionsLike = None,
        verifier: Optional[Verifier] = None,
    ):
        self._secret = _validate_secret(secret)
        self.options = _coerce_options(options)
        self.verifier = verifier or stripe_service.construct_event

    @classmethod
    def from_settings(
        cls, settings: Settings, verifier: Optional[Verifier] = None
    ) -> "StripeWebhookGuard":
        """Build a guard from application settings"""
        settings.validate_required_secrets()
        return cls(
            settings.stripe_webhook_secret,
            settings.verification_options,
            verifier=verifier,
        )

    async def verify(self, request: Request) -> Any:
        """
        Verify the request and publish the event on ``request.state``.

        Raises:
            MissingSignatureException: No stripe-signature header
            StripeSignatureException: The verifier rejected the request
        """
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning(
                "Webhook request without signature header",
                extra={"path": request.url.path},
            )
            raise MissingSignatureException()

        payload = await request.body()

        try:
            event = self.verifier(payload, signature, self._secret, self.options)
            if inspect.isawaitable(event):
                event = await event
        except Exception as e:
            logger.warning(
                "Webhook signature verification failed",
                extra={
                    "path": request.url.path,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise StripeSignatureException() from e

        setattr(request.state, EVENT_STATE_KEY, event)
        return event

    async def __call__(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Starlette http middleware entry point"""
        try:
            await self.verify(request)
        except WebhookVerificationException as e:
            return JSONResponse(
                status_code=e.status_code,
                content={"error": e.error_code, "message": e.message},
            )

        return await call_next(request)

    async def dependency(self, request: Request) -> Any:
        """FastAPI dependency entry point; returns the verified event"""
        try:
            return await self.verify(request)
        except WebhookVerificationException as e:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e


def stripe_webhook_middleware(
    secret: str,
    options: OptionsLike = None,
    *,
    verifier: Optional[Verifier] = None,
) -> StripeWebhookGuard:
    """
    Create a guard that verifies Stripe webhook signatures.

    Args:
        secret: Webhook signing secret, ``whsec_`` followed by letters/digits
        options: VerificationOptions, or a mapping of its fields
        verifier: Replacement for the Stripe SDK check, called as
            ``verifier(payload, signature, secret, options)``; may be async

    Raises:
        ConfigurationException: The secret or options are invalid
    """
    return StripeWebhookGuard(secret, options, verifier=verifier)


class StripeWebhookMiddleware(BaseHTTPMiddleware):
    """Guard mounted with ``app.add_middleware``, optionally limited to path prefixes"""

    def __init__(
        self,
        app: ASGIApp,
        secret: str,
        options: OptionsLike = None,
        paths: Iterable[str] = (),
        verifier: Optional[Verifier] = None,
    ):
        super().__init__(app)
        self.guard = stripe_webhook_middleware(secret, options, verifier=verifier)
        self.paths = tuple(paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self.paths and not request.url.path.startswith(self.paths):
            return await call_next(request)
        return await self.guard(request, call_next)


def get_event(request: Request) -> Any:
    """
    Read the verified event stored by the guard.

    Raises:
        LookupError: The request was not verified
    """
    event = getattr(request.state, EVENT_STATE_KEY, None)
    if event is None:
        raise LookupError("No verified webhook event on this request")
    return event
