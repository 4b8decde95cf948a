"""
Resend Email Provider

Sends through the Resend REST API with ``requests``.

Configuration:
    api_key: Resend API key (resolved per invocation from secrets)
    api_url: Send endpoint (defaults to the public API)
"""

import logging
from typing import Any, Dict, Optional

import requests

from .email_provider import (
    EmailProvider,
    EmailMessage,
    DeliveryResult,
    DeliveryStatus,
)

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendProvider(EmailProvider):
    """
    Resend email provider.

    A non-2xx response is a provider-reported error: its JSON body carries
    ``message`` (and ``name``/``statusCode``). ``requests`` exceptions
    (connection errors, timeouts) are not caught here.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = RESEND_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._session = session

    @property
    def provider_name(self) -> str:
        return "resend"

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _build_payload(self, message: EmailMessage) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": message.from_email,
            "to": list(message.to),
            "subject": message.subject,
        }
        if message.body_text:
            payload["text"] = message.body_text
        if message.body_html:
            payload["html"] = message.body_html
        if message.tags:
            payload["tags"] = [{"name": "category", "value": tag} for tag in message.tags]
        return payload

    def send(self, message: EmailMessage) -> DeliveryResult:
        """
        Send email via Resend.

        Args:
            message: Email message to send

        Returns:
            DeliveryResult with the Resend email id
        """
        response = self._get_session().post(
            self.api_url,
            json=self._build_payload(message),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        if 200 <= response.status_code < 300:
            message_id = body.get("id")
            logger.debug(f"Resend: email accepted, id={message_id}")
            return DeliveryResult(
                success=True,
                status=DeliveryStatus.SENT,
                provider=self.provider_name,
                message_id=message_id,
                raw_response={"status_code": response.status_code},
            )

        logger.warning(
            f"Resend returned status {response.status_code}",
            extra={'extra_data': {'error_name': body.get("name")}},
        )
        return self._failed(
            error_message=body.get("message"),
            error_code=body.get("name") or str(response.status_code),
            raw_response={"status_code": response.status_code, "body": body},
        )
