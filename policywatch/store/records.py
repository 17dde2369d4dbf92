"""In-memory record store: admission, dedup and processing state.

Usage::

    from policywatch.store import RecordStore

    store = RecordStore()
    result = store.admit(record)
    batch = store.drain_unprocessed()

Every public method takes the store's lock, so concurrent requests can share
one instance.  Nothing is ever evicted; the dedup index lives as long as the
process.
"""

from __future__ import annotations

import json
import threading
from typing import Iterable, List, Optional

from policywatch.store.models import AdmissionResult, ProcessingState, Record


class StoreClosedError(RuntimeError):
    """Raised when a closed store is asked to admit a record."""


def fingerprint(policy_links: Iterable[str]) -> str:
    """Return the order-independent dedup key for *policy_links*.

    The links are sorted and serialised as a JSON array, so
    ``["b", "a"]`` and ``["a", "b"]`` give the same key.
    """
    return json.dumps(sorted(policy_links))


class RecordStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seen: set[str] = set()
        self._log: List[Record] = []
        self._pending: List[Record] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def admit(self, record: Record) -> AdmissionResult:
        """Admit *record* unless its link set has been seen before.

        The fingerprint ignores ``source_url`` and ``login_detected``: the
        same links reached from a different page are the same policy.

        Raises:
            StoreClosedError: If :meth:`close` has been called.
        """
        key = fingerprint(record.policy_links)
        with self._lock:
            if self._closed:
                raise StoreClosedError("record store is closed")
            if key in self._seen:
                return AdmissionResult.DUPLICATE_REJECTED

            self._seen.add(key)
            self._log.append(record)
            if record.policy_links:
                record.state = ProcessingState.QUEUED
                self._pending.append(record)
        return AdmissionResult.ACCEPTED

    def drain_unprocessed(self) -> List[Record]:
        """Remove and return every queued, unprocessed record.

        Records come back newest first.  Processed records returned by
        :meth:`requeue` stay in the queue structure and are skipped.
        """
        with self._lock:
            claimed = [r for r in reversed(self._pending) if not r.is_processed]
            self._pending = [r for r in self._pending if r.is_processed]
        return claimed

    def requeue(self, record: Record) -> None:
        """Put a processed *record* back so it stays visible in :meth:`pending`."""
        with self._lock:
            if not any(r is record for r in self._pending):
                self._pending.append(record)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def records(self) -> List[Record]:
        """Return a snapshot of every accepted record, in admission order."""
        with self._lock:
            return list(self._log)

    def pending(self) -> List[Record]:
        """Return a snapshot of the queue structure (queued and processed)."""
        with self._lock:
            return list(self._pending)

    def get(self, record_id: str) -> Optional[Record]:
        with self._lock:
            for record in self._log:
                if record.id == record_id:
                    return record
        return None

    def has_seen(self, policy_links: Iterable[str]) -> bool:
        key = fingerprint(policy_links)
        with self._lock:
            return key in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._log)
