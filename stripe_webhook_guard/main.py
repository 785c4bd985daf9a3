"""
Stripe Webhook Receiver Application

Minimal FastAPI application showing the guard in front of a webhook route.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from stripe_webhook_guard.config import Settings, get_settings
from stripe_webhook_guard.middleware import StripeWebhookGuard, Verifier, get_event
from stripe_webhook_guard.utils.exceptions import MiddlewareException
from stripe_webhook_guard.utils.logging_config import (
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    verifier: Optional[Verifier] = None,
) -> FastAPI:
    """
    Build the receiver application.

    Raises:
        ConfigurationException: The webhook secret is missing or malformed
    """
    settings = settings or get_settings()
    setup_logging(log_level=settings.log_level)

    guard = StripeWebhookGuard.from_settings(settings, verifier=verifier)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.webhook_guard = guard

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        """Add correlation ID to all requests for tracing"""
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        response = await call_next(request)

        response.headers["X-Correlation-ID"] = correlation_id
        return response

    @app.exception_handler(MiddlewareException)
    async def middleware_exception_handler(request: Request, exc: MiddlewareException):
        """Render guard errors and other middleware exceptions as JSON"""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"Middleware exception: {exc.message}",
            extra={"error": exc.to_dict()},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error_code, "message": exc.message},
        )

    # guard.verify raises WebhookVerificationException, rendered by the handler above
    @app.post(settings.webhook_path, dependencies=[Depends(guard.verify)])
    async def stripe_webhook(request: Request):
        event: Any = get_event(request)
        event_id = getattr(event, "id", None)
        event_type = getattr(event, "type", None)

        logger.info(
            "Received Stripe webhook event",
            extra={"event_id": event_id, "event_type": event_type},
        )

        return {
            "received": True,
            "event_id": event_id,
            "event_type": event_type,
            "correlation_id": get_correlation_id(),
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
        }

    logger.info(
        f"{settings.app_name} v{settings.app_version} configured",
        extra={"environment": settings.environment, "webhook_path": settings.webhook_path},
    )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
