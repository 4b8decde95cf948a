"""
Idempotency Guard for Trigger Invocations.

The trigger platform delivers each created submission at least once. The
guard turns that into at-most-once notification: before anything else,
each invocation tries to atomically create a receipt document keyed by
its event id under the submission::

    <submission path>/notificationEvents/<eventId>

Exactly one attempt per event id can create it. Losing the create is the
normal duplicate path, not an error. Any other store failure propagates
so the platform retries the whole invocation.

The receipt is written before the email is sent. If an invocation dies
after claiming but before sending, redeliveries of the same event id see
the receipt and stop, and that notification is not sent.
"""

import logging
from dataclasses import dataclass

from .document_store import (
    SERVER_TIMESTAMP,
    CreateOutcome,
    DocumentStore,
    child_path,
)

logger = logging.getLogger(__name__)

DEFAULT_RECEIPTS_COLLECTION = "notificationEvents"


class InvalidEventIdError(ValueError):
    """Event id cannot be used as a receipt document id."""
    pass


@dataclass(frozen=True)
class ClaimResult:
    """Outcome of one claim attempt."""
    claimed: bool
    event_id: str
    receipt_path: str


class IdempotencyGuard:
    """
    Claims trigger events through the store's create-if-absent primitive.

    No read-before-write: the store's precondition decides the winner.
    """

    def __init__(self, store: DocumentStore, receipts_collection: str = DEFAULT_RECEIPTS_COLLECTION):
        self.store = store
        self.receipts_collection = receipts_collection

    def receipt_path(self, event_id: str, submission_path: str) -> str:
        return child_path(submission_path, self.receipts_collection, event_id)

    def claim(self, event_id: str, submission_path: str) -> ClaimResult:
        """
        Attempt to claim an event.

        Args:
            event_id: Platform invocation id
            submission_path: Document path of the triggering submission

        Returns:
            ClaimResult with ``claimed`` True for the first attempt only

        Raises:
            InvalidEventIdError: Event id is empty or not a valid document id
            ClaimStoreError: The create failed for another reason
        """
        if not event_id or "/" in event_id:
            raise InvalidEventIdError(f"Invalid event id for receipt: {event_id!r}")

        path = self.receipt_path(event_id, submission_path)
        outcome = self.store.create_if_absent(path, {
            "createdAt": SERVER_TIMESTAMP,
            "eventId": event_id,
        })

        if outcome is CreateOutcome.ALREADY_EXISTS:
            logger.info(
                "Notification event already processed; skipping duplicate send.",
                extra={'extra_data': {
                    'event_id': event_id,
                    'submission_path': submission_path,
                }},
            )
            return ClaimResult(claimed=False, event_id=event_id, receipt_path=path)

        logger.debug(f"Claimed notification event {event_id} at {path}")
        return ClaimResult(claimed=True, event_id=event_id, receipt_path=path)
