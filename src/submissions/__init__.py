"""
Completed Assessment Submissions

Server-side handling of completed assessments:
- Submission models
- Document store abstraction (Firestore, SQLite)
- Idempotent review notification trigger (``submissions.trigger``)
- Cloud Functions adapter (``submissions.firebase_trigger``)
"""

from .models import (
    NotificationRecord,
    NotificationState,
    SubmissionRecord,
    SubmissionTotals,
    UNKNOWN_USER,
)

from .document_store import (
    SERVER_TIMESTAMP,
    ClaimStoreError,
    CreateOutcome,
    DocumentStore,
    DocumentStoreError,
    StoreWriteError,
)

__all__ = [
    # Models
    "NotificationRecord",
    "NotificationState",
    "SubmissionRecord",
    "SubmissionTotals",
    "UNKNOWN_USER",
    # Store
    "SERVER_TIMESTAMP",
    "ClaimStoreError",
    "CreateOutcome",
    "DocumentStore",
    "DocumentStoreError",
    "StoreWriteError",
]
