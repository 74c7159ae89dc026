"""Controller wiring CLI input to the execution engine and printers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from rich.console import Console

from script_exec.config import Settings
from script_exec.executor import Job, JobQueue, OutcomeAggregator, ScriptRunner, WorkerPool
from script_exec.output import OutputManager, build_printer

logger = logging.getLogger(__name__)

_LABEL_NAME = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_RESERVED_LABELS = frozenset({"name"})


@dataclass(slots=True)
class ExecCommand:
    """CLI input for one batch run."""

    jobs: list[Job]
    style: str | None = None
    parallel_jobs: int | None = None
    labels: dict[str, str] = field(default_factory=dict)
    timeout_seconds: float | None = None
    time: bool = False


@dataclass(slots=True)
class ExecResult:
    """Batch summary used to pick the process exit code."""

    success: bool
    processed: int
    failures: int


class ScriptExecCliController:
    """Runs a batch: worker pool in front, output manager behind."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console

    def settings_for(self, command: ExecCommand) -> Settings:
        """Environment settings overridden by explicit CLI values, validated."""

        settings = Settings.from_env(
            jobs=command.parallel_jobs,
            style=command.style,
            timeout_seconds=command.timeout_seconds,
        )
        settings.validate()
        return settings

    def run(self, command: ExecCommand, settings: Settings | None = None) -> ExecResult:
        if not command.jobs:
            raise ValueError("No paths provided")
        settings = settings or self.settings_for(command)
        if command.time:
            logger.warning("--time is deprecated and has no effect")

        console = self._console or Console()
        printer = build_printer(settings.printer_style, console=console, labels=command.labels)
        aggregator = OutcomeAggregator()

        with OutputManager(printer) as output:
            runner = ScriptRunner(
                emit=output.send,
                aggregator=aggregator,
                timeout_seconds=settings.timeout_seconds,
            )
            pool = WorkerPool(queue=JobQueue(command.jobs), runner=runner, jobs=settings.jobs)
            processed = pool.run()

        success = aggregator.read()
        logger.info(
            "Batch finished: processed=%d failures=%d success=%s",
            processed,
            aggregator.failures,
            success,
        )
        return ExecResult(success=success, processed=processed, failures=aggregator.failures)


def parse_job(value: str) -> Job:
    """Parse ``title=path``; a bare path is titled after its file stem."""

    if "=" not in value:
        if not value.strip():
            raise ValueError("Script path must not be empty")
        return Job.from_path(value)
    parts = value.split("=")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError("Each pair must be in the format 'title=path'")
    return Job(title=parts[0], path=parts[1])


def parse_label(value: str) -> tuple[str, str]:
    """Parse ``key:value`` into a metric label pair."""

    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError("Key-value pair must be in the format 'key:value'")
    key, label_value = parts
    if not _LABEL_NAME.match(key):
        raise ValueError(f"Invalid label name: {key!r}")
    if key in _RESERVED_LABELS:
        raise ValueError(f"Label name {key!r} is reserved for the script title")
    return key, label_value


def build_label_map(pairs: tuple[tuple[str, str], ...] | list[tuple[str, str]]) -> dict[str, str]:
    """Insertion-ordered label map; a repeated key keeps its first position, last value."""

    labels: dict[str, str] = {}
    for key, value in pairs:
        labels[key] = value
    return labels
