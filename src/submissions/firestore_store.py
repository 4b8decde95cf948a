"""
Firestore Document Store

Production backend. ``DocumentReference.create`` carries a
must-not-exist precondition, so racing claimers are resolved by the
database: exactly one create succeeds, the rest get ``AlreadyExists``.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

from .document_store import (
    ClaimStoreError,
    CreateOutcome,
    DocumentStore,
    StoreWriteError,
    replace_server_timestamps,
)

logger = logging.getLogger(__name__)


class FirestoreDocumentStore(DocumentStore):
    """DocumentStore over a ``google.cloud.firestore.Client``."""

    def __init__(self, client: firestore.Client):
        self._client = client

    def _native(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return replace_server_timestamps(data, firestore.SERVER_TIMESTAMP)

    def create_if_absent(self, path: str, data: Mapping[str, Any]) -> CreateOutcome:
        try:
            self._client.document(path).create(self._native(data))
        except gcp_exceptions.AlreadyExists:
            return CreateOutcome.ALREADY_EXISTS
        except (gcp_exceptions.GoogleAPICallError, gcp_exceptions.RetryError) as e:
            raise ClaimStoreError(f"Firestore create failed for {path}: {e}", path=path) from e
        return CreateOutcome.CREATED

    def merge(self, path: str, data: Mapping[str, Any]) -> None:
        try:
            self._client.document(path).set(self._native(data), merge=True)
        except (gcp_exceptions.GoogleAPICallError, gcp_exceptions.RetryError) as e:
            raise StoreWriteError(f"Firestore merge failed for {path}: {e}", path=path) from e

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        snapshot = self._client.document(path).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()
