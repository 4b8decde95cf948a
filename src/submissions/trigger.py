"""
Review Notification Trigger

Runs once per delivery of a "completed assessment created" event:

    Received -> Claiming -> Duplicate (end)
                         -> Claimed -> ConfigResolved -> Composed
                                    -> Dispatched -> Recorded (end)

The orchestrator is host-neutral and never raises for outcomes: it
returns a ``TriggerResult``. The hosting adapter calls
``TriggerResult.raise_for_retry()`` to turn retryable failures into the
exception its platform reads as "redeliver this event".

Retryable: configuration errors, claim store errors, provider-reported
send failures, transport errors and anything unexpected after a claim.
Clean termination: empty payload, duplicate event.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from config.logging_config import event_id_var
from config.secrets import (
    ReviewConfig,
    SecretAccessor,
    SecretNames,
    resolve_review_config,
)
from notifications.email_provider import EmailMessage, EmailProvider, dispatch
from notifications.review_email import ReviewContext, compose_review_notification

from .document_store import DocumentStore
from .idempotency import DEFAULT_RECEIPTS_COLLECTION, IdempotencyGuard, InvalidEventIdError
from .models import SubmissionRecord
from .outcome import OutcomeRecorder

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ReviewConfig], EmailProvider]

NOTIFICATION_TAG = "assessment-review"


class TriggerStatus(str, Enum):
    """Terminal state of one invocation."""
    SENT = "sent"
    DUPLICATE = "duplicate"
    EMPTY_PAYLOAD = "empty_payload"
    FAILED = "failed"


class RetryableTriggerError(Exception):
    """Raised by host adapters to ask the platform to redeliver an event."""
    pass


@dataclass(frozen=True)
class TriggerEvent:
    """One platform delivery of a created submission document."""
    event_id: str
    document_path: str
    data: Optional[Mapping[str, Any]] = None
    params: Mapping[str, str] = field(default_factory=dict)

    @property
    def app_id(self) -> str:
        return self.params.get("appId", "")

    @property
    def submission_doc_id(self) -> str:
        return self.params.get("submissionDocId") or self.document_path.rstrip("/").rsplit("/", 1)[-1]


@dataclass
class TriggerResult:
    """What happened to one invocation."""
    status: TriggerStatus
    event_id: str
    submission_path: Optional[str] = None
    error: Optional[Exception] = None
    retryable: bool = False
    recorded: bool = False
    reviewer_count: int = 0

    @property
    def ok(self) -> bool:
        return self.status is not TriggerStatus.FAILED

    def raise_for_retry(self) -> None:
        """Raise RetryableTriggerError if the platform should redeliver."""
        if self.retryable:
            raise RetryableTriggerError(
                f"Review notification for event {self.event_id} failed: {self.error}"
            ) from self.error


class SubmissionNotifier:
    """
    Emails reviewers when a completed assessment is created.

    Dependencies are passed in; secrets are resolved on every invocation.
    """

    def __init__(
        self,
        store: DocumentStore,
        secrets: SecretAccessor,
        provider_factory: ProviderFactory,
        secret_names: Optional[SecretNames] = None,
        receipts_collection: str = DEFAULT_RECEIPTS_COLLECTION,
    ):
        self.secrets = secrets
        self.provider_factory = provider_factory
        self.secret_names = secret_names or SecretNames()
        self.guard = IdempotencyGuard(store, receipts_collection)
        self.recorder = OutcomeRecorder(store)

    def handle(self, event: TriggerEvent) -> TriggerResult:
        """Process one trigger delivery."""
        token = event_id_var.set(event.event_id)
        try:
            return self._handle(event)
        finally:
            event_id_var.reset(token)

    def _handle(self, event: TriggerEvent) -> TriggerResult:
        if not event.data:
            logger.warning(
                "No snapshot data in trigger event.",
                extra={'extra_data': {'document_path': event.document_path}},
            )
            return TriggerResult(
                status=TriggerStatus.EMPTY_PAYLOAD,
                event_id=event.event_id,
                submission_path=event.document_path,
            )

        try:
            claim = self.guard.claim(event.event_id, event.document_path)
        except InvalidEventIdError as e:
            # A malformed event id fails the same way on every redelivery
            return self._failed(event, e, retryable=False)
        except Exception as e:
            return self._failed(event, e, retryable=True)

        if not claim.claimed:
            return TriggerResult(
                status=TriggerStatus.DUPLICATE,
                event_id=event.event_id,
                submission_path=event.document_path,
            )

        try:
            config = resolve_review_config(self.secrets, self.secret_names)
            email = compose_review_notification(
                SubmissionRecord.from_document(event.data),
                ReviewContext(
                    app_id=event.app_id,
                    submission_doc_id=event.submission_doc_id,
                    review_app_base_url=config.review_app_base_url,
                ),
            )
            provider = self.provider_factory(config)
            dispatch(provider, EmailMessage(
                from_email=config.from_address,
                to=list(config.reviewer_addresses),
                subject=email.subject,
                body_text=email.text,
                body_html=email.html,
                tags=[NOTIFICATION_TAG],
            ))
        except Exception as e:
            return self._failed(event, e, retryable=True)

        recorded = self.recorder.record_success(
            event.document_path,
            config.reviewer_addresses,
            event.event_id,
        )

        logger.info(
            "Submission review notification sent.",
            extra={'extra_data': {
                'submission_path': event.document_path,
                'reviewer_count': len(config.reviewer_addresses),
                'recorded': recorded,
            }},
        )
        return TriggerResult(
            status=TriggerStatus.SENT,
            event_id=event.event_id,
            submission_path=event.document_path,
            recorded=recorded,
            reviewer_count=len(config.reviewer_addresses),
        )

    def _failed(self, event: TriggerEvent, error: Exception, retryable: bool) -> TriggerResult:
        logger.error(
            f"Review notification failed ({type(error).__name__}): {error}",
            exc_info=error,
            extra={'extra_data': {
                'submission_path': event.document_path,
                'retryable': retryable,
            }},
        )
        return TriggerResult(
            status=TriggerStatus.FAILED,
            event_id=event.event_id,
            submission_path=event.document_path,
            error=error,
            retryable=retryable,
        )
