"""
Document Store Abstraction

The three primitives the notifier needs from a document database:

- ``create_if_absent``: atomic create that fails on an existing document.
  This is the only operation requiring transactional semantics.
- ``merge``: update only the given fields, leaving others untouched.
- ``SERVER_TIMESTAMP``: placeholder replaced by the backend's clock.

Paths are slash-separated document paths
(``collection/doc/collection/doc``).
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    """Sentinel for a server-assigned timestamp."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class CreateOutcome(str, Enum):
    """Result of an atomic create."""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class DocumentStoreError(Exception):
    """Base error for document store failures."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ClaimStoreError(DocumentStoreError):
    """Atomic create failed for a reason other than "already exists"."""
    pass


class StoreWriteError(DocumentStoreError):
    """Merge write failed."""
    pass


class DocumentStore(ABC):
    """Minimal document store used by the notifier."""

    @abstractmethod
    def create_if_absent(self, path: str, data: Mapping[str, Any]) -> CreateOutcome:
        """
        Create a document only if none exists at ``path``.

        Returns:
            CREATED, or ALREADY_EXISTS if the store rejected the create
            because the document exists

        Raises:
            ClaimStoreError: Any other failure
        """
        pass

    @abstractmethod
    def merge(self, path: str, data: Mapping[str, Any]) -> None:
        """
        Merge fields into the document at ``path``, creating it if needed.

        Nested maps are merged key by key; other values (lists included)
        replace what was stored.

        Raises:
            StoreWriteError: On failure
        """
        pass

    @abstractmethod
    def get(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the document data, or None if it does not exist."""
        pass


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``updates`` into a copy of ``base``, recursing into nested maps."""
    merged: Dict[str, Any] = dict(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge({}, value)
        else:
            merged[key] = value
    return merged


def replace_server_timestamps(data: Mapping[str, Any], value: Any) -> Dict[str, Any]:
    """Copy ``data`` with every SERVER_TIMESTAMP replaced by ``value``."""
    result: Dict[str, Any] = {}
    for key, item in data.items():
        if item is SERVER_TIMESTAMP:
            result[key] = value
        elif isinstance(item, Mapping):
            result[key] = replace_server_timestamps(item, value)
        else:
            result[key] = item
    return result


def child_path(parent: str, *segments: str) -> str:
    """Join document path segments."""
    return "/".join([parent.strip("/"), *segments])
