"""
Tests for the idempotency guard.

Tests:
- First claim wins, later claims are duplicates
- Infrastructure failures propagate
- Concurrent claimers produce exactly one winner
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from submissions.document_store import ClaimStoreError
from submissions.idempotency import IdempotencyGuard, InvalidEventIdError
from submissions.sqlite_store import SQLiteDocumentStore


def _race(guard: IdempotencyGuard, event_id: str, submission_path: str, workers: int):
    """Run ``workers`` claims for the same event as close together as possible."""
    barrier = threading.Barrier(workers)

    def attempt(_):
        barrier.wait()
        return guard.claim(event_id, submission_path).claimed

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(attempt, range(workers)))


class TestClaim:
    """Tests for sequential claim behaviour."""

    def test_first_claim_wins(self, memory_store, submission_path):
        """Test that the first claim writes a receipt."""
        guard = IdempotencyGuard(memory_store)

        result = guard.claim("evt-1", submission_path)

        assert result.claimed
        assert result.receipt_path == f"{submission_path}/notificationEvents/evt-1"
        receipt = memory_store.get(result.receipt_path)
        assert receipt["eventId"] == "evt-1"
        assert receipt["createdAt"] is not None

    def test_second_claim_is_duplicate(self, memory_store, submission_path):
        """Test that re-delivery of the same event is not claimed."""
        guard = IdempotencyGuard(memory_store)
        guard.claim("evt-1", submission_path)

        result = guard.claim("evt-1", submission_path)

        assert not result.claimed

    def test_different_events_claim_independently(self, memory_store, submission_path):
        guard = IdempotencyGuard(memory_store)

        assert guard.claim("evt-1", submission_path).claimed
        assert guard.claim("evt-2", submission_path).claimed

    def test_custom_receipts_collection(self, memory_store, submission_path):
        guard = IdempotencyGuard(memory_store, receipts_collection="receipts")

        result = guard.claim("evt-1", submission_path)

        assert result.receipt_path.endswith("/receipts/evt-1")

    def test_store_failure_propagates(self, memory_store, submission_path):
        """Test that transient store errors are not treated as duplicates."""
        memory_store.create_error = IOError("deadline exceeded")
        guard = IdempotencyGuard(memory_store)

        with pytest.raises(ClaimStoreError):
            guard.claim("evt-1", submission_path)

    @pytest.mark.parametrize("event_id", ["", "a/b"])
    def test_invalid_event_id_rejected(self, memory_store, submission_path, event_id):
        guard = IdempotencyGuard(memory_store)

        with pytest.raises(InvalidEventIdError):
            guard.claim(event_id, submission_path)
        assert memory_store.create_calls == []


class TestConcurrentClaims:
    """Tests for racing claimers."""

    def test_single_winner_in_memory(self, memory_store, submission_path):
        """Test that exactly one of N concurrent claims wins."""
        results = _race(IdempotencyGuard(memory_store), "evt-1", submission_path, workers=16)

        assert results.count(True) == 1
        assert results.count(False) == 15

    def test_single_winner_sqlite(self, tmp_path, submission_path):
        """Test the same guarantee against a real database."""
        store = SQLiteDocumentStore(tmp_path / "claims.db", timeout=30.0)

        results = _race(IdempotencyGuard(store), "evt-1", submission_path, workers=8)

        assert results.count(True) == 1
        assert results.count(False) == 7

    def test_separate_store_instances_share_database(self, tmp_path, submission_path):
        """Test that claims are coordinated by the database, not the process."""
        db_path = tmp_path / "claims.db"
        first = IdempotencyGuard(SQLiteDocumentStore(db_path))
        second = IdempotencyGuard(SQLiteDocumentStore(db_path))

        assert first.claim("evt-1", submission_path).claimed
        assert not second.claim("evt-1", submission_path).claimed
