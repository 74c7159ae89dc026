"""Fixed-size pool of worker threads draining the job queue."""

from __future__ import annotations

import logging
import threading

from script_exec.executor.job_queue import JobQueue
from script_exec.executor.runner import ScriptRunner

logger = logging.getLogger(__name__)


class WorkerPool:
    """Spawns ``jobs`` workers; each claims jobs until the queue is empty."""

    def __init__(self, *, queue: JobQueue, runner: ScriptRunner, jobs: int = 3) -> None:
        if jobs < 1:
            raise ValueError(f"Worker count must be >= 1, got {jobs}")
        self._queue = queue
        self._runner = runner
        self._jobs = jobs
        self._processed = 0
        self._processed_lock = threading.Lock()

    def run(self) -> int:
        """Run all queued jobs and block until every worker has joined.

        Returns the number of jobs processed.
        """

        threads = [
            threading.Thread(
                target=self._worker_loop,
                name=f"script-exec-worker-{index}",
            )
            for index in range(self._jobs)
        ]
        for thread in threads:
            thread.start()
        logger.debug("Started %d workers", len(threads))
        for thread in threads:
            thread.join()
        logger.debug("All workers joined after %d jobs", self._processed)
        return self._processed

    def _worker_loop(self) -> None:
        while True:
            job = self._queue.take()
            if job is None:
                return
            self._runner.run(job)
            with self._processed_lock:
                self._processed += 1
