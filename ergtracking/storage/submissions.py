"""Bounded in-memory store of recent submissions."""

import threading
from collections import deque
from itertools import islice
from typing import Optional

from ergtracking.core.logging import get_logger
from ergtracking.storage.models import Submission

logger = get_logger(__name__)

DEFAULT_CAPACITY = 200


class SubmissionStore:
    """Most-recent-first ring buffer of submissions.

    New submissions go to the head; once the store is full the oldest one
    falls off the tail. Contents are lost when the process exits.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize submission store.

        Args:
            capacity: Maximum number of submissions kept
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._rows: deque[Submission] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._rows)

    def append(self, submission: Submission) -> None:
        """Insert a submission at the head, evicting the oldest when full."""
        with self._lock:
            evicted = len(self._rows) == self._capacity
            self._rows.appendleft(submission)

        if evicted:
            logger.debug("submission_evicted", capacity=self._capacity)

    def list_recent(self, limit: Optional[int] = None) -> list[Submission]:
        """Return a snapshot of the newest submissions.

        Args:
            limit: Maximum number of rows (default: capacity)

        Returns:
            New list ordered most-recent-first

        Raises:
            ValueError: If limit is negative
        """
        if limit is None:
            limit = self._capacity
        if limit < 0:
            raise ValueError("limit must not be negative")

        with self._lock:
            return list(islice(self._rows, limit))
