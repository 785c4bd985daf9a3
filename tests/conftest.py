"""
Pytest Configuration and Fixtures

Provides signed payloads, settings and a guard for the webhook tests.
"""

import json
from typing import Any, Dict, List

import pytest

from stripe_webhook_guard.config import Settings
from stripe_webhook_guard.middleware import StripeWebhookGuard
from tests.factories import WEBHOOK_SECRET, generate_stripe_signature


@pytest.fixture
def webhook_secret() -> str:
    """Webhook secret used to sign test payloads"""
    return WEBHOOK_SECRET


@pytest.fixture
def event_payload() -> Dict[str, Any]:
    """Minimal Stripe event"""
    return {"id": "evt_test_webhook", "object": "event"}


@pytest.fixture
def event_body(event_payload) -> str:
    """Exact JSON text that gets signed"""
    return json.dumps(event_payload, separators=(",", ":"))


@pytest.fixture
def valid_signature(event_body) -> str:
    """Header signing event_body with the test secret"""
    return generate_stripe_signature(event_body)


@pytest.fixture
def invalid_signature(event_body) -> str:
    """Well-formed header whose v1 value does not match"""
    return generate_stripe_signature(event_body, signature="bad_signature")


@pytest.fixture
def handler_calls() -> List[Any]:
    """Events seen by test route handlers"""
    return []


@pytest.fixture
def guard(webhook_secret) -> StripeWebhookGuard:
    """Guard using the Stripe SDK verifier"""
    return StripeWebhookGuard(webhook_secret)


@pytest.fixture
def settings(webhook_secret) -> Settings:
    """Settings isolated from any local .env file"""
    return Settings(
        _env_file=None,
        environment="development",
        log_level="DEBUG",
        stripe_webhook_secret=webhook_secret,
    )
