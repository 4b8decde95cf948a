"""
Outcome Recorder

Merges the ``notification`` status onto a submission after a successful
send. Bookkeeping only: by the time it runs the email is already out, so
a failed write is logged and swallowed. Raising would make the platform
retry, and the retry would stop at the existing receipt anyway.
"""

import logging
from typing import Sequence

from .document_store import SERVER_TIMESTAMP, DocumentStore
from .models import NotificationRecord, NotificationState

logger = logging.getLogger(__name__)


class OutcomeRecorder:
    """Writes send status onto submission documents."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def record_success(
        self,
        submission_path: str,
        reviewer_addresses: Sequence[str],
        event_id: str,
    ) -> bool:
        """
        Merge ``notification`` onto the submission.

        Returns:
            True if written, False if the write failed (already logged)
        """
        record = NotificationRecord(
            reviewer_emails=list(reviewer_addresses),
            notified_at=SERVER_TIMESTAMP,
            last_event_id=event_id,
            status=NotificationState.SENT,
        )

        try:
            self.store.merge(submission_path, {"notification": record.to_document()})
        except Exception:
            logger.exception(
                "Notification sent but status write failed; submission not marked as sent.",
                extra={'extra_data': {
                    'event_id': event_id,
                    'submission_path': submission_path,
                }},
            )
            return False

        return True
