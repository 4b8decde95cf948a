"""Tests for the SendGrid provider (API client mocked)."""

import json
from unittest.mock import Mock

import pytest
from python_http_client.exceptions import HTTPError

from notifications.email_provider import EmailMessage
from notifications.sendgrid_provider import SendGridProvider, _error_message_from_body


@pytest.fixture
def message():
    return EmailMessage(
        from_email="ops@example.com",
        to=["lead@example.com", "analyst@example.com"],
        subject="New Ops Assessment Submission: u1",
        body_text="text body",
        body_html="<p>html body</p>",
        tags=["assessment-review"],
    )


class TestSendGridSend:
    """Tests for SendGridProvider.send()."""

    def test_single_personalization_for_all_recipients(self, message):
        """Test that all reviewers share one request."""
        client = Mock()
        client.send.return_value = Mock(status_code=202, headers={"X-Message-Id": "sg-1"}, body=b"")
        provider = SendGridProvider(api_key="SG.key", client=client)

        result = provider.send(message)

        assert result.success
        assert result.message_id == "sg-1"
        client.send.assert_called_once()
        mail = client.send.call_args.args[0].get()
        assert len(mail["personalizations"]) == 1
        recipients = [to["email"] for to in mail["personalizations"][0]["to"]]
        assert recipients == ["lead@example.com", "analyst@example.com"]
        assert mail["from"]["email"] == "ops@example.com"
        assert mail["categories"] == ["assessment-review"]

    def test_http_error_is_provider_failure(self, message):
        """Test that SendGrid's HTTP error becomes a failed result."""
        body = json.dumps({"errors": [{"message": "The from address does not match a verified Sender Identity."}]})
        error = HTTPError(403, "Forbidden", body.encode(), {})
        client = Mock()
        client.send.side_effect = error
        provider = SendGridProvider(api_key="SG.key", client=client)

        result = provider.send(message)

        assert not result.success
        assert result.error_message == "The from address does not match a verified Sender Identity."
        assert result.error_code == "403"

    def test_transport_error_propagates(self, message):
        """Test that non-HTTP errors are not caught."""
        client = Mock()
        client.send.side_effect = ConnectionError("connection refused")
        provider = SendGridProvider(api_key="SG.key", client=client)

        with pytest.raises(ConnectionError):
            provider.send(message)


class TestErrorBodyParsing:
    """Tests for extracting SendGrid error messages."""

    def test_bytes_json(self):
        assert _error_message_from_body(b'{"errors": [{"message": "bad"}]}') == "bad"

    def test_plain_text(self):
        assert _error_message_from_body("Service Unavailable") == "Service Unavailable"

    def test_empty(self):
        assert _error_message_from_body(b"") is None
        assert _error_message_from_body(None) is None
