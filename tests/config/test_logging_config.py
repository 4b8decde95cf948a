"""Tests for logging configuration."""

import json
import logging

from config.logging_config import (
    SOURCE_LOCATION_KEY,
    JsonFormatter,
    ReadableFormatter,
    configure_logging,
    event_id_var,
)


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="submissions.trigger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Tests for the JSON formatter."""

    def test_emits_severity_and_message(self):
        """Test that Cloud Logging fields are present."""
        payload = json.loads(JsonFormatter().format(_record("sent")))

        assert payload["severity"] == "INFO"
        assert payload["message"] == "sent"
        assert payload["logger"] == "submissions.trigger"
        assert payload[SOURCE_LOCATION_KEY]["line"] == 10

    def test_includes_extra_data_and_event_id(self):
        """Test that structured extras and the event id are merged in."""
        token = event_id_var.set("evt-1")
        try:
            line = JsonFormatter().format(_record("sent", extra_data={"reviewer_count": 2}))
        finally:
            event_id_var.reset(token)

        payload = json.loads(line)
        assert payload["event_id"] == "evt-1"
        assert payload["reviewer_count"] == 2


class TestReadableFormatter:
    """Tests for the development formatter."""

    def test_appends_extras(self):
        """Test that extras are appended as key=value pairs."""
        line = ReadableFormatter().format(_record("sent", extra_data={"recorded": True}))

        assert "submissions.trigger: sent" in line
        assert "recorded=True" in line


class TestConfigureLogging:
    """Tests for root logger setup."""

    def test_installs_single_handler(self):
        """Test that configure_logging replaces root handlers."""
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            configure_logging("DEBUG", json_output=True)
            configure_logging("DEBUG", json_output=True)

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestReservedFields:
    """Tests that structured extras cannot replace Cloud Logging fields."""

    def test_extra_data_does_not_override_severity_or_message(self):
        line = JsonFormatter().format(
            _record("sent", extra_data={"message": "spoofed", "severity": "DEBUG", "recorded": False})
        )

        payload = json.loads(line)
        assert payload["message"] == "sent"
        assert payload["severity"] == "INFO"
        assert payload["recorded"] is False
