"""Shared pool of pending jobs drained by workers."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from script_exec.executor.models import Job


class JobQueue:
    """Mutex-guarded stack of jobs; every job is handed out exactly once.

    Jobs are stored reversed so that popping from the end hands them out in
    submission order.
    """

    def __init__(self, jobs: Iterable[Job]) -> None:
        self._jobs = list(jobs)
        self._jobs.reverse()
        self._lock = threading.Lock()

    def take(self) -> Job | None:
        """Claim the next job, or return ``None`` once the queue is drained."""

        with self._lock:
            if not self._jobs:
                return None
            return self._jobs.pop()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
