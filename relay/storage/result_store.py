"""In-memory, capacity-bounded history of processing results.

The store is created once per process (see core.lifespan) and shared by the
webhook handler, which appends, and the results handler, which snapshots.
Nothing is persisted; a restart clears the history.
"""

import logging
import threading
from collections import deque

from relay.core.config import DEFAULT_MAX_RESPONSES
from relay.models.dto import ProcessingResult

logger = logging.getLogger(__name__)


class ResultStore:
    """Thread-safe ring of the most recent `capacity` results.

    Appends and snapshots are serialized by a single lock. Records are
    immutable, so a snapshot is a shallow copy of the internal deque.

    Args:
        capacity: Maximum number of stored results (>= 1)

    Example:
        >>> store = ResultStore(capacity=2)
        >>> for text in ("a", "b", "c"):
        ...     _ = store.append(ProcessingResult(text=text))
        >>> [r.text for r in store.snapshot()]
        ['b', 'c']
    """

    def __init__(self, capacity: int = DEFAULT_MAX_RESPONSES):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._records: deque[ProcessingResult] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, record: ProcessingResult) -> ProcessingResult:
        """Insert at the tail, evicting the oldest record when full.

        Timestamps stay non-decreasing in insertion order: a record stamped
        earlier than its predecessor takes the predecessor's timestamp.

        Returns:
            The record as stored
        """
        with self._lock:
            if self._records and record.timestamp < self._records[-1].timestamp:
                record = record.model_copy(
                    update={"timestamp": self._records[-1].timestamp}
                )
            evicted = len(self._records) == self._capacity
            self._records.append(record)
            stored = len(self._records)

        if evicted:
            logger.debug(
                "History full, oldest result evicted",
                extra={"capacity": self._capacity, "stored": stored},
            )
        return record

    def snapshot(self) -> list[ProcessingResult]:
        """Return an independent copy of the history, oldest first."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
