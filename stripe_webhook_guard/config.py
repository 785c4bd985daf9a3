"""
Application Configuration Management

Loads webhook guard settings from environment variables or a .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stripe_webhook_guard.models.verification import VerificationOptions
from stripe_webhook_guard.utils.exceptions import ConfigurationException


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")

    # Application
    app_name: str = Field(default="Stripe Webhook Receiver")
    app_version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Stripe
    stripe_api_key: Optional[str] = Field(default=None, description="Stripe secret API key")
    stripe_webhook_secret: Optional[str] = Field(
        default=None, description="Stripe webhook signing secret (whsec_...)"
    )
    stripe_webhook_tolerance: int = Field(
        default=300, gt=0, description="Accepted signature age in seconds"
    )
    webhook_path: str = Field(default="/webhook/stripe")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment"""
        valid_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}")
        return v_lower

    @field_validator("webhook_path")
    @classmethod
    def validate_webhook_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("Webhook path must start with '/'")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def verification_options(self) -> VerificationOptions:
        """Options handed to the Stripe verifier"""
        return VerificationOptions(
            tolerance=self.stripe_webhook_tolerance,
            api_key=self.stripe_api_key,
        )

    def validate_required_secrets(self) -> None:
        """
        Validate that required secrets are present.
        Raises ConfigurationException if any are missing.
        """
        missing = []

        if not self.stripe_webhook_secret:
            missing.append("stripe_webhook_secret")

        if missing:
            raise ConfigurationException(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Ensure a .env file or environment variables are configured.",
                details={"missing": missing},
            )


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)"""
    return Settings()
