"""Execute one healthcheck script and report its lifecycle."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Callable
from datetime import timedelta

from script_exec.executor.models import (
    Completed,
    Error,
    ExecutionOutcome,
    Job,
    LifecycleEvent,
    Queued,
)
from script_exec.executor.outcome import OutcomeAggregator

logger = logging.getLogger(__name__)


class ScriptRunner:
    """Runs a job's program with no arguments and emits its lifecycle events.

    Every per-job problem (missing path, spawn failure, non-zero exit, timeout)
    is reported through ``emit`` and the aggregator; nothing is raised, so one
    broken job never interrupts its siblings.
    """

    def __init__(
        self,
        *,
        emit: Callable[[LifecycleEvent], None],
        aggregator: OutcomeAggregator,
        timeout_seconds: float | None = None,
    ) -> None:
        self._emit = emit
        self._aggregator = aggregator
        self._timeout_seconds = timeout_seconds

    def run(self, job: Job) -> ExecutionOutcome | None:
        """Run ``job``; return its outcome, or ``None`` if it never ran."""

        if not os.path.exists(job.path):
            logger.info("Script %s does not exist: %s", job.title, job.path)
            self._fail(Error(title=job.title, message=f"{job.path} does not exist"))
            return None

        self._emit(Queued(title=job.title))
        logger.debug("Starting %s: %s", job.title, job.path)

        timed_out = False
        start = time.monotonic()
        try:
            completed = subprocess.run(  # noqa: S603
                [os.path.abspath(job.path)],
                check=False,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout_seconds,
            )
            returncode = completed.returncode
            stdout, stderr = completed.stdout, completed.stderr
        except subprocess.TimeoutExpired as error:
            timed_out = True
            returncode = None
            stdout, stderr = _decode(error.stdout), _decode(error.stderr)
        except OSError as error:
            logger.warning("Script %s failed to start: %s", job.title, error)
            self._fail(Error(title=job.title, message=f"{job.path} failed to start: {error}"))
            return None
        duration = timedelta(seconds=time.monotonic() - start)

        success = returncode == 0
        output = None
        if not success:
            self._aggregator.flip()
            timeout_note = f"Timed out after {self._timeout_seconds:g}s" if timed_out else None
            output = build_failure_output(stdout, stderr, timeout_note=timeout_note)
            logger.info("Script %s failed (exit code=%s)", job.title, returncode)
        else:
            logger.debug("Script %s succeeded in %.3fs", job.title, duration.total_seconds())

        self._emit(
            Completed(title=job.title, success=success, duration=duration, output=output),
        )
        return ExecutionOutcome(success=success, duration=duration, output=output)

    def _fail(self, event: Error) -> None:
        self._aggregator.flip()
        self._emit(event)


def build_failure_output(
    stdout: str,
    stderr: str,
    *,
    timeout_note: str | None = None,
) -> str:
    """Assemble the diagnostic block attached to a failed job.

    Non-empty stdout goes under an ``Output:`` header, non-empty stderr under
    ``Error:``; each captured stream is split into lines.
    """

    lines: list[str] = []
    if stdout:
        lines.append("Output:")
        lines.extend(stdout.splitlines())
    if stderr or timeout_note:
        lines.append("Error:")
        lines.extend(stderr.splitlines())
        if timeout_note:
            lines.append(timeout_note)
    return "\n".join(lines)


def _decode(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
