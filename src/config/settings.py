"""Application settings using Pydantic Settings.

Centralized, non-secret configuration for the review notifier.

Secrets (provider API key, sender address, reviewer list, review app URL)
are not settings: they are read per invocation through
``config.secrets.SecretAccessor``. Only the *names* of those secrets live
here so a deployment can rebind them.
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .secrets import SecretNames

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_DOCUMENT_PATTERN = "artifacts/{appId}/completedAssessments/{submissionDocId}"


class NotifierSettings(BaseSettings):
    """Review notifier settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Root log level")
    json_logs: bool = Field(default=True, description="Emit one JSON object per log line")

    # Trigger binding
    region: str = Field(default="us-central1", description="Functions region")
    document_pattern: str = Field(
        default=DEFAULT_DOCUMENT_PATTERN,
        description="Document path pattern the trigger listens on",
    )
    receipts_collection: str = Field(
        default="notificationEvents",
        description="Sub-collection holding per-event receipts",
    )

    # Email delivery
    email_provider: Literal["resend", "sendgrid", "null"] = Field(
        default="resend", description="Transactional email provider"
    )
    resend_api_url: str = Field(
        default="https://api.resend.com/emails", description="Resend send endpoint"
    )
    provider_timeout: float = Field(default=10.0, description="Provider request timeout in seconds")

    # Storage
    store_backend: Literal["firestore", "sqlite"] = Field(
        default="firestore", description="Document store backend"
    )
    sqlite_path: str = Field(
        default="data/notifier.db", description="Database file for the sqlite backend"
    )
    firestore_database: Optional[str] = Field(
        default=None, description="Named Firestore database (default database if unset)"
    )

    # Secret names
    api_key_secret: str = Field(default="RESEND_API_KEY")
    from_email_secret: str = Field(default="RESEND_FROM_EMAIL")
    reviewer_emails_secret: str = Field(default="REVIEWER_EMAILS")
    review_app_url_secret: str = Field(default="REVIEW_APP_URL")

    @field_validator("email_provider", "store_backend", mode="before")
    @classmethod
    def _normalize_choice(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def _require_real_provider_in_production(self) -> "NotifierSettings":
        # The null provider reports success, which would mark submissions as sent
        if self.is_production and self.email_provider == "null":
            raise ValueError(
                f"email_provider 'null' is not allowed in {self.environment}"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment in ("production", "prod", "staging")

    @property
    def secret_names(self) -> SecretNames:
        return SecretNames(
            api_key=self.api_key_secret,
            from_email=self.from_email_secret,
            reviewer_emails=self.reviewer_emails_secret,
            review_app_url=self.review_app_url_secret,
        )


@lru_cache
def get_settings() -> NotifierSettings:
    """
    Get cached settings instance.

    Returns:
        NotifierSettings: Cached settings loaded from environment.
    """
    return NotifierSettings()


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    get_settings.cache_clear()
