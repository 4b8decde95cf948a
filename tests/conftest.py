"""
Pytest configuration and fixtures for the notifier test suite.

Provides test doubles for:
- Document store (in-memory, thread-safe)
- Email provider (records sends, scripted failures)
- Secrets
"""

import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.secrets import MappingSecretAccessor  # noqa: E402
from notifications.email_provider import (  # noqa: E402
    DeliveryResult,
    DeliveryStatus,
    EmailMessage,
    EmailProvider,
)
from submissions.document_store import (  # noqa: E402
    ClaimStoreError,
    CreateOutcome,
    DocumentStore,
    StoreWriteError,
    deep_merge,
    replace_server_timestamps,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

SUBMISSION_PATH = "artifacts/ops-app/completedAssessments/doc-123"


class InMemoryDocumentStore(DocumentStore):
    """Thread-safe in-memory DocumentStore with failure injection."""

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.create_calls: List[str] = []
        self.merge_calls: List[str] = []
        self.create_error: Optional[Exception] = None
        self.merge_error: Optional[Exception] = None
        self._lock = threading.Lock()

    def create_if_absent(self, path: str, data: Mapping[str, Any]) -> CreateOutcome:
        with self._lock:
            self.create_calls.append(path)
            if self.create_error is not None:
                raise ClaimStoreError(str(self.create_error), path=path) from self.create_error
            if path in self.documents:
                return CreateOutcome.ALREADY_EXISTS
            self.documents[path] = replace_server_timestamps(data, FIXED_NOW)
            return CreateOutcome.CREATED

    def merge(self, path: str, data: Mapping[str, Any]) -> None:
        with self._lock:
            self.merge_calls.append(path)
            if self.merge_error is not None:
                raise StoreWriteError(str(self.merge_error), path=path) from self.merge_error
            current = self.documents.get(path, {})
            self.documents[path] = deep_merge(current, replace_server_timestamps(data, FIXED_NOW))

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self.documents.get(path)
            return dict(document) if document is not None else None


class RecordingEmailProvider(EmailProvider):
    """Email provider that records messages instead of sending them."""

    def __init__(self, error_message: Optional[str] = None, fail: bool = False,
                 raise_exc: Optional[Exception] = None):
        self.sent_messages: List[EmailMessage] = []
        self.error_message = error_message
        self.fail = fail or error_message is not None
        self.raise_exc = raise_exc

    @property
    def provider_name(self) -> str:
        return "recording"

    def send(self, message: EmailMessage) -> DeliveryResult:
        self.sent_messages.append(message)
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.fail:
            return self._failed(self.error_message)
        return DeliveryResult(
            success=True,
            status=DeliveryStatus.SENT,
            provider=self.provider_name,
            message_id=f"msg-{len(self.sent_messages)}",
        )


@pytest.fixture
def memory_store():
    """Create an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def recording_provider():
    """Create a provider that records sends."""
    return RecordingEmailProvider()


@pytest.fixture
def secret_values():
    """Valid secret values for the notifier."""
    return {
        "RESEND_API_KEY": "re_test_key",
        "RESEND_FROM_EMAIL": "ops@assessments.example.com",
        "REVIEWER_EMAILS": "lead@example.com, analyst@example.com",
        "REVIEW_APP_URL": "https://review.example.com/app",
    }


@pytest.fixture
def secrets(secret_values):
    """Secret accessor over the valid secret values."""
    return MappingSecretAccessor(secret_values)


@pytest.fixture
def submission_path():
    return SUBMISSION_PATH


@pytest.fixture
def complete_submission():
    """A fully answered submission document."""
    return {
        "submissionId": "sub-001",
        "userId": "u1",
        "totals": {"answered": 10, "questions": 10, "completionPercent": 100},
        "responses": {"q1": "yes", "q2": "no"},
    }


@pytest.fixture
def make_provider():
    """Factory for recording providers with scripted behaviour."""
    def _make(**kwargs) -> RecordingEmailProvider:
        return RecordingEmailProvider(**kwargs)
    return _make


@pytest.fixture
def make_store():
    """Factory for additional in-memory stores."""
    return InMemoryDocumentStore


@pytest.fixture
def fixed_now():
    """Timestamp the in-memory store uses for SERVER_TIMESTAMP."""
    return FIXED_NOW
