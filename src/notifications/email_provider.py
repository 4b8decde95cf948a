"""
Email Provider Abstraction

Unified interface for transactional email delivery.

Supports:
- Resend (default)
- SendGrid
- Null (local development, logs only)

Failure contract:
- A failure the provider *reports* (error response body) comes back as a
  failed ``DeliveryResult``; ``dispatch`` turns it into ``DispatchError``.
- A transport-level exception raised by the provider call propagates
  unchanged.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

UNKNOWN_PROVIDER_ERROR = "unknown error"


class DeliveryStatus(str, Enum):
    """Email delivery status."""
    SENT = "sent"
    FAILED = "failed"


class DispatchError(Exception):
    """Raised when the email provider reports it could not send a message."""

    def __init__(self, provider_message: Optional[str] = None, provider: Optional[str] = None):
        self.provider_message = provider_message or UNKNOWN_PROVIDER_ERROR
        self.provider = provider
        super().__init__(self.provider_message)


@dataclass
class EmailMessage:
    """One email addressed to the whole recipient list."""
    from_email: str
    to: List[str]
    subject: str
    body_text: Optional[str] = None
    body_html: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def validate(self) -> bool:
        """Validate message has required fields."""
        if not self.from_email:
            raise ValueError("Sender email (from_email) is required")
        if not self.to:
            raise ValueError("At least one recipient (to) is required")
        if not self.subject:
            raise ValueError("Subject is required")
        if not self.body_html and not self.body_text:
            raise ValueError("Either body_html or body_text is required")
        return True


@dataclass
class DeliveryResult:
    """Result of one provider send call."""
    success: bool
    status: DeliveryStatus
    provider: Optional[str] = None
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


class EmailProvider(ABC):
    """Abstract base class for email providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider name for logging."""
        pass

    @abstractmethod
    def send(self, message: EmailMessage) -> DeliveryResult:
        """
        Send an email message to all of its recipients in one request.

        Args:
            message: Email message to send

        Returns:
            DeliveryResult; ``success`` is False when the provider reported
            an error
        """
        pass

    def _failed(
        self,
        error_message: Optional[str],
        error_code: Optional[str] = None,
        raw_response: Optional[Dict[str, Any]] = None,
    ) -> DeliveryResult:
        return DeliveryResult(
            success=False,
            status=DeliveryStatus.FAILED,
            provider=self.provider_name,
            error_message=error_message,
            error_code=error_code,
            raw_response=raw_response,
        )


class NullEmailProvider(EmailProvider):
    """
    Null provider for testing/development.

    Logs emails but doesn't send them.
    """

    @property
    def provider_name(self) -> str:
        return "null"

    def send(self, message: EmailMessage) -> DeliveryResult:
        """Log email without sending."""
        message.validate()
        logger.info(
            f"[NULL PROVIDER] Would send email to {', '.join(message.to)}: {message.subject}"
        )
        return DeliveryResult(
            success=True,
            status=DeliveryStatus.SENT,
            message_id=f"null-{datetime.now(timezone.utc).timestamp()}",
            provider=self.provider_name,
        )


def dispatch(provider: EmailProvider, message: EmailMessage) -> DeliveryResult:
    """
    Send a message and raise if the provider reported failure.

    Args:
        provider: Email provider
        message: Message to send

    Returns:
        The successful DeliveryResult

    Raises:
        DispatchError: Provider reported an error (carries its message)
        Exception: Transport errors from the provider call, unchanged
    """
    message.validate()
    result = provider.send(message)

    if not result.success:
        logger.error(
            f"{provider.provider_name} failed to send notification: "
            f"{result.error_message or UNKNOWN_PROVIDER_ERROR}",
            extra={'extra_data': {
                'provider': provider.provider_name,
                'error_code': result.error_code,
                'recipient_count': len(message.to),
            }},
        )
        raise DispatchError(result.error_message, provider=provider.provider_name)

    logger.info(
        f"{provider.provider_name}: notification sent, message_id={result.message_id}",
        extra={'extra_data': {'recipient_count': len(message.to)}},
    )
    return result


def create_email_provider(
    name: str,
    api_key: str,
    api_url: Optional[str] = None,
    timeout: float = 10.0,
) -> EmailProvider:
    """
    Build the email provider for one invocation.

    Args:
        name: ``resend``, ``sendgrid`` or ``null``
        api_key: Provider API key resolved from secrets
        api_url: Override for the provider endpoint (Resend only)
        timeout: Request timeout in seconds (Resend only)

    Returns:
        EmailProvider instance
    """
    name = name.lower()

    if name == "resend":
        from .resend_provider import ResendProvider
        kwargs: Dict[str, Any] = {"timeout": timeout}
        if api_url:
            kwargs["api_url"] = api_url
        return ResendProvider(api_key=api_key, **kwargs)

    if name == "sendgrid":
        from .sendgrid_provider import SendGridProvider
        return SendGridProvider(api_key=api_key)

    if name == "null":
        logger.warning("Null email provider selected. Emails will be logged but not sent.")
        return NullEmailProvider()

    raise ValueError(f"Unknown email provider: {name}")
