"""
SendGrid Email Provider

SendGrid integration for review notifications.

Configuration:
    api_key: SendGrid API key (resolved per invocation from secrets)
"""

import json
import logging
from typing import Any, Dict, Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Category, Mail

from .email_provider import (
    EmailProvider,
    EmailMessage,
    DeliveryResult,
    DeliveryStatus,
)

logger = logging.getLogger(__name__)


def _error_message_from_body(body: Any) -> Optional[str]:
    """Pull ``errors[0].message`` out of a SendGrid error body."""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return body or None
    if isinstance(body, dict):
        errors = body.get("errors") or []
        if errors and isinstance(errors[0], dict):
            return errors[0].get("message")
    return None


class SendGridProvider(EmailProvider):
    """
    SendGrid email provider.

    All recipients go on a single personalization, so one API request
    covers the whole reviewer list. The client raises ``HTTPError`` for
    4xx/5xx responses; that is a provider-reported failure. Anything else
    it raises is a transport problem and propagates.
    """

    def __init__(self, api_key: str, client: Optional[SendGridAPIClient] = None):
        self.api_key = api_key
        self._client = client

    @property
    def provider_name(self) -> str:
        return "sendgrid"

    def _get_client(self) -> SendGridAPIClient:
        """Lazy-load SendGrid client."""
        if self._client is None:
            self._client = SendGridAPIClient(api_key=self.api_key)
        return self._client

    def _build_mail(self, message: EmailMessage) -> Mail:
        mail = Mail(
            from_email=message.from_email,
            to_emails=list(message.to),
            subject=message.subject,
            plain_text_content=message.body_text,
            html_content=message.body_html,
        )
        for tag in message.tags[:10]:  # SendGrid max 10 categories
            mail.add_category(Category(tag))
        return mail

    def send(self, message: EmailMessage) -> DeliveryResult:
        """
        Send email via SendGrid.

        Args:
            message: Email message to send

        Returns:
            DeliveryResult with SendGrid message ID
        """
        mail = self._build_mail(message)

        try:
            response = self._get_client().send(mail)
        except HTTPError as e:
            body = getattr(e, "body", None)
            status_code = getattr(e, "status_code", None)
            logger.warning(f"SendGrid returned status {status_code}")
            raw: Dict[str, Any] = {"status_code": status_code}
            return self._failed(
                error_message=_error_message_from_body(body),
                error_code=str(status_code) if status_code is not None else None,
                raw_response=raw,
            )

        if response.status_code in (200, 201, 202):
            message_id = response.headers.get("X-Message-Id", "")
            return DeliveryResult(
                success=True,
                status=DeliveryStatus.SENT,
                provider=self.provider_name,
                message_id=message_id,
                raw_response={"status_code": response.status_code},
            )

        return self._failed(
            error_message=_error_message_from_body(response.body),
            error_code=str(response.status_code),
            raw_response={"status_code": response.status_code},
        )
