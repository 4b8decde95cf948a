"""
SQLite Document Store

Local/dev backend with the same create-if-absent guarantee as Firestore:
the document path is the table's primary key, so a second ``INSERT`` for
the same path fails with ``IntegrityError`` no matter how many
connections race for it.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from .document_store import (
    ClaimStoreError,
    CreateOutcome,
    DocumentStore,
    StoreWriteError,
    deep_merge,
    replace_server_timestamps,
)

logger = logging.getLogger(__name__)


class SQLiteDocumentStore(DocumentStore):
    """
    Database-backed document store.

    One row per document path; document data is stored as JSON.
    """

    def __init__(self, db_path: Union[str, Path], timeout: float = 5.0):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file.
            timeout: Seconds to wait on a locked database.
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._ensure_table_exists()

    @contextmanager
    def _connect(self, **kwargs: Any) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, **kwargs)
        try:
            yield conn
        finally:
            conn.close()

    def _ensure_table_exists(self) -> None:
        """Create documents table if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    path TEXT PRIMARY KEY,
                    data_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def create_if_absent(self, path: str, data: Mapping[str, Any]) -> CreateOutcome:
        now = self._now()
        payload = json.dumps(replace_server_timestamps(data, now), default=str)

        try:
            with self._connect(isolation_level=None) as conn:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    conn.execute(
                        "INSERT INTO documents (path, data_json, created_at, updated_at) "
                        "VALUES (?, ?, ?, ?)",
                        (path, payload, now, now),
                    )
                    conn.execute("COMMIT")
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
        except sqlite3.IntegrityError:
            return CreateOutcome.ALREADY_EXISTS
        except sqlite3.Error as e:
            raise ClaimStoreError(f"SQLite create failed for {path}: {e}", path=path) from e

        return CreateOutcome.CREATED

    def merge(self, path: str, data: Mapping[str, Any]) -> None:
        now = self._now()
        updates = replace_server_timestamps(data, now)

        try:
            with self._connect(isolation_level=None) as conn:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    row = conn.execute(
                        "SELECT data_json FROM documents WHERE path = ?", (path,)
                    ).fetchone()
                    current = json.loads(row[0]) if row else {}
                    merged = json.dumps(deep_merge(current, updates), default=str)
                    if row:
                        conn.execute(
                            "UPDATE documents SET data_json = ?, updated_at = ? WHERE path = ?",
                            (merged, now, path),
                        )
                    else:
                        conn.execute(
                            "INSERT INTO documents (path, data_json, created_at, updated_at) "
                            "VALUES (?, ?, ?, ?)",
                            (path, merged, now, now),
                        )
                    conn.execute("COMMIT")
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
        except sqlite3.Error as e:
            raise StoreWriteError(f"SQLite merge failed for {path}: {e}", path=path) from e

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT data_json FROM documents WHERE path = ?", (path,)
            ).fetchone()
        return json.loads(row[0]) if row else None
