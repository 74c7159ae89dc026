"""Concurrent execution engine for healthcheck scripts."""

from script_exec.executor.job_queue import JobQueue
from script_exec.executor.models import (
    Completed,
    Error,
    ExecutionOutcome,
    Job,
    LifecycleEvent,
    Queued,
    Terminate,
)
from script_exec.executor.outcome import OutcomeAggregator
from script_exec.executor.pool import WorkerPool
from script_exec.executor.runner import ScriptRunner

__all__ = [
    "Completed",
    "Error",
    "ExecutionOutcome",
    "Job",
    "JobQueue",
    "LifecycleEvent",
    "OutcomeAggregator",
    "Queued",
    "ScriptRunner",
    "Terminate",
    "WorkerPool",
]
