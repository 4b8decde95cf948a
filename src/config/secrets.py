"""
Secret Access and Review Configuration

Resolves the four values the review notifier needs at invocation time:

- Provider API key
- Sender address
- Reviewer address list (comma-delimited)
- Reviewer application base URL

Values are read through a ``SecretAccessor`` on every call, never bound at
import time, so a secret fixed between platform retries is picked up by
the next attempt.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required notifier configuration is missing or unusable."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])


@dataclass(frozen=True)
class SecretNames:
    """Names under which the notifier's secrets are stored."""
    api_key: str = "RESEND_API_KEY"
    from_email: str = "RESEND_FROM_EMAIL"
    reviewer_emails: str = "REVIEWER_EMAILS"
    review_app_url: str = "REVIEW_APP_URL"

    def all(self) -> Tuple[str, str, str, str]:
        return (self.api_key, self.from_email, self.reviewer_emails, self.review_app_url)


@dataclass(frozen=True)
class ReviewConfig:
    """Configuration resolved for one invocation."""
    api_key: str
    from_address: str
    reviewer_addresses: Tuple[str, ...]
    review_app_base_url: str


class SecretAccessor(ABC):
    """Read access to named secret values."""

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Return the secret value, or None if it is not available."""
        pass


class EnvSecretAccessor(SecretAccessor):
    """
    Reads secrets from the process environment.

    The Functions runtime exposes bound secrets as environment variables,
    so this is also usable in production.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    def get(self, name: str) -> Optional[str]:
        return self._environ.get(name)


class MappingSecretAccessor(SecretAccessor):
    """Secrets from a plain mapping (tests, local runs)."""

    def __init__(self, values: Mapping[str, Optional[str]]):
        self._values: Dict[str, Optional[str]] = dict(values)

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)


def parse_reviewer_emails(raw: Optional[str]) -> List[str]:
    """
    Parse a comma-delimited reviewer list.

    Tokens are trimmed and empty tokens dropped; order is preserved.

    Examples:
        >>> parse_reviewer_emails(" a@x.com, ,b@x.com ")
        ['a@x.com', 'b@x.com']
        >>> parse_reviewer_emails(" , ,")
        []
    """
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


def resolve_review_config(
    accessor: SecretAccessor,
    names: Optional[SecretNames] = None,
) -> ReviewConfig:
    """
    Resolve the review configuration from secrets.

    Args:
        accessor: Secret source
        names: Secret names (defaults to the standard names)

    Returns:
        ReviewConfig for this invocation

    Raises:
        ConfigurationError: If any secret is missing/blank or the reviewer
            list is empty after parsing
    """
    names = names or SecretNames()

    values: Dict[str, str] = {}
    missing: List[str] = []
    for name in names.all():
        value = accessor.get(name)
        if value is None or not str(value).strip():
            missing.append(name)
        else:
            values[name] = str(value).strip()

    reviewers = parse_reviewer_emails(values.get(names.reviewer_emails))
    if not missing and not reviewers:
        missing.append(names.reviewer_emails)

    if missing:
        logger.error(
            f"Review notifier configuration incomplete: {', '.join(missing)}",
            extra={'extra_data': {'missing': missing}},
        )
        if missing == [names.reviewer_emails] and names.reviewer_emails in values:
            raise ConfigurationError(
                f"{names.reviewer_emails} did not contain any valid email addresses.",
                missing=missing,
            )
        raise ConfigurationError(
            f"Missing required secret(s): {', '.join(missing)}",
            missing=missing,
        )

    return ReviewConfig(
        api_key=values[names.api_key],
        from_address=values[names.from_email],
        reviewer_addresses=tuple(reviewers),
        review_app_base_url=values[names.review_app_url],
    )
