"""Configuration module for the review notifier."""

from .settings import NotifierSettings, get_settings, reset_settings
from .secrets import (
    ConfigurationError,
    EnvSecretAccessor,
    MappingSecretAccessor,
    ReviewConfig,
    SecretAccessor,
    SecretNames,
    parse_reviewer_emails,
    resolve_review_config,
)
from .logging_config import configure_logging, event_id_var

__all__ = [
    "NotifierSettings",
    "get_settings",
    "reset_settings",
    "ConfigurationError",
    "EnvSecretAccessor",
    "MappingSecretAccessor",
    "ReviewConfig",
    "SecretAccessor",
    "SecretNames",
    "parse_reviewer_emails",
    "resolve_review_config",
    "configure_logging",
    "event_id_var",
]
