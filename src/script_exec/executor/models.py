"""Domain models for script execution and lifecycle events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Job:
    """One script to execute."""

    title: str
    path: str

    @classmethod
    def from_path(cls, path: str) -> Job:
        """Build a job titled after the script's file stem."""

        title = Path(path).stem or path
        return cls(title=title, path=path)


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Result of one script invocation."""

    success: bool
    duration: timedelta
    output: str | None = None


@dataclass(frozen=True, slots=True)
class Queued:
    """Job passed the existence check and is about to run."""

    title: str


@dataclass(frozen=True, slots=True)
class Completed:
    """Job ran to completion (or was killed on timeout)."""

    title: str
    success: bool
    duration: timedelta
    output: str | None = None


@dataclass(frozen=True, slots=True)
class Error:
    """Job never ran: missing path or the OS refused to start it."""

    title: str
    message: str


@dataclass(frozen=True, slots=True)
class Terminate:
    """Last event on the channel; finalizes the printer."""


LifecycleEvent = Queued | Completed | Error | Terminate
