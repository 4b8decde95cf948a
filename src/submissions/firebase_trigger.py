"""
Cloud Functions (Firebase, Python) host adapter.

Binds ``SubmissionNotifier`` to Firestore document-created events on
``settings.document_pattern``. Firestore triggers take no retry option in
the decorator; "Retry on failure" is enabled on the deployed function
instead. With it on, raising from the handler makes the platform
redeliver the event with the same event id, which is what the
receipt-based dedup keys on.
"""

import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import firestore
from firebase_functions import firestore_fn
from firebase_functions.params import SecretParam

from config.logging_config import configure_logging
from config.secrets import SecretAccessor
from config.settings import get_settings

from .factory import build_notifier
from .trigger import SubmissionNotifier, TriggerEvent, TriggerResult

logger = logging.getLogger(__name__)

settings = get_settings()

SECRET_PARAMS: Dict[str, SecretParam] = {
    name: SecretParam(name) for name in settings.secret_names.all()
}


class SecretParamAccessor(SecretAccessor):
    """Reads secrets bound to the function through ``SecretParam``."""

    def __init__(self, params: Dict[str, SecretParam]):
        self._params = params

    def get(self, name: str) -> Optional[str]:
        param = self._params.get(name)
        if param is None:
            return None
        return param.value


_notifier: Optional[SubmissionNotifier] = None


def get_notifier() -> SubmissionNotifier:
    """Build the notifier on first use (cold start)."""
    global _notifier

    if _notifier is None:
        configure_logging(settings.log_level, json_output=settings.json_logs)
        try:
            firebase_admin.get_app()
        except ValueError:
            firebase_admin.initialize_app()

        client = None
        if settings.store_backend == "firestore":
            if settings.firestore_database:
                client = firestore.client(database_id=settings.firestore_database)
            else:
                client = firestore.client()

        _notifier = build_notifier(
            settings,
            SecretParamAccessor(SECRET_PARAMS),
            firestore_client=client,
        )
    return _notifier


def to_trigger_event(event: Any) -> TriggerEvent:
    """Translate a Firestore CloudEvent into a host-neutral TriggerEvent."""
    snapshot = event.data
    params = {key: str(value) for key, value in (event.params or {}).items()}

    document_path = getattr(event, "document", None) or ""
    data = None
    if snapshot is not None:
        reference = getattr(snapshot, "reference", None)
        if reference is not None and reference.path:
            document_path = reference.path
        data = snapshot.to_dict()

    return TriggerEvent(
        event_id=event.id,
        document_path=document_path,
        data=data,
        params=params,
    )


def handle_event(event: Any, notifier: Optional[SubmissionNotifier] = None) -> TriggerResult:
    """Run the notifier for one event and raise if it should be retried."""
    notifier = notifier or get_notifier()
    result = notifier.handle(to_trigger_event(event))
    result.raise_for_retry()
    return result


@firestore_fn.on_document_created(
    document=settings.document_pattern,
    region=settings.region,
    secrets=list(SECRET_PARAMS.values()),
)
def notify_submission_for_review(
    event: firestore_fn.Event[Optional[firestore_fn.DocumentSnapshot]],
) -> None:
    handle_event(event)
