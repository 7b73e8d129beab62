"""
In-memory at-most-once gate keyed by transaction id.

The default retention is unbounded: a processed id is remembered for the
lifetime of the process.  ``TimeWindowRetention`` is an explicit opt-in
that forgets ids after a fixed window, which re-admits replays older than
the window.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Callable


class DedupDecision(Enum):
    PROCEED = "proceed"
    ALREADY_PROCESSED = "already_processed"


# ============================================================================
# Retention policies
# ============================================================================

class UnboundedRetention:
    """Never evict."""

    def expired(self, marked_at: float, now: float) -> bool:
        return False


class TimeWindowRetention:
    """Evict ids marked more than ``seconds`` ago."""

    def __init__(self, seconds: float):
        if seconds <= 0:
            raise ValueError("Retention window must be positive.")
        self.seconds = seconds

    def expired(self, marked_at: float, now: float) -> bool:
        return now - marked_at > self.seconds


# ============================================================================
# Deduplicator
# ============================================================================

class RequestDeduplicator:
    """Thread-safe check-then-insert set of transaction ids.

    Parameters
    ----------
    retention : UnboundedRetention | TimeWindowRetention, optional
        Eviction policy (default unbounded).
    clock : callable
        Monotonic clock in seconds, injectable for tests.
    """

    def __init__(
        self,
        retention=None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.retention = retention if retention is not None else UnboundedRetention()
        self._clock = clock
        self._seen: dict[str, float] = {}
        self._lock = threading.Lock()

    def check_and_mark(self, transaction_id: str) -> DedupDecision:
        """Mark ``transaction_id`` and return PROCEED, unless already marked."""
        with self._lock:
            now = self._clock()
            self._evict(now)
            if transaction_id in self._seen:
                return DedupDecision.ALREADY_PROCESSED
            self._seen[transaction_id] = now
            return DedupDecision.PROCEED

    def _evict(self, now: float) -> None:
        # caller holds the lock
        if isinstance(self.retention, UnboundedRetention):
            return
        stale = [tx for tx, marked_at in self._seen.items()
                 if self.retention.expired(marked_at, now)]
        for tx in stale:
            del self._seen[tx]

    def __contains__(self, transaction_id: object) -> bool:
        with self._lock:
            return transaction_id in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
