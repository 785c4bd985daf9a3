"""
Test Settings

Tests environment loading and validation of application settings.
"""

import pytest
from pydantic import ValidationError

from stripe_webhook_guard.config import Settings, get_settings
from stripe_webhook_guard.models.verification import VerificationOptions
from stripe_webhook_guard.utils.exceptions import ConfigurationException


def test_loads_from_environment(monkeypatch):
    """Test settings are read from environment variables"""
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_fromenv")
    monkeypatch.setenv("STRIPE_WEBHOOK_TOLERANCE", "90")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ENVIRONMENT", "Production")

    settings = Settings(_env_file=None)

    assert settings.stripe_webhook_secret == "whsec_fromenv"
    assert settings.stripe_webhook_tolerance == 90
    assert settings.log_level == "DEBUG"
    assert settings.is_production
    assert not settings.is_development


def test_get_settings_is_cached():
    """Test get_settings returns one shared instance"""
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


@pytest.mark.parametrize(
    "field, value",
    [
        ("log_level", "verbose"),
        ("environment", "qa"),
        ("webhook_path", "webhook"),
        ("stripe_webhook_tolerance", 0),
    ],
)
def test_rejects_invalid_values(field, value):
    """Test field validators reject bad values"""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_verification_options():
    """Test settings map onto VerificationOptions"""
    settings = Settings(
        _env_file=None,
        stripe_webhook_tolerance=45,
        stripe_api_key="sk_test_abc",
    )

    assert settings.verification_options == VerificationOptions(
        tolerance=45, api_key="sk_test_abc"
    )


def test_validate_required_secrets(settings):
    """Test a missing webhook secret is reported"""
    settings.validate_required_secrets()

    with pytest.raises(ConfigurationException) as exc_info:
        Settings(_env_file=None, stripe_webhook_secret=None).validate_required_secrets()

    assert exc_info.value.error_code == "CONFIG_ERROR"
    assert exc_info.value.details == {"missing": ["stripe_webhook_secret"]}
