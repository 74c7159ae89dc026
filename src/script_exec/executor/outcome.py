"""Process-wide pass/fail summary."""

from __future__ import annotations

import threading


class OutcomeAggregator:
    """Boolean that starts true and can only ever flip to false.

    Read it only after the worker pool has joined.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._success = True
        self._failures = 0

    def flip(self) -> None:
        with self._lock:
            self._success = False
            self._failures += 1

    def read(self) -> bool:
        with self._lock:
            return self._success

    @property
    def failures(self) -> int:
        """Number of ``flip()`` calls, i.e. failed or errored jobs."""

        with self._lock:
            return self._failures
