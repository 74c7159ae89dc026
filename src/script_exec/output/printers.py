"""Renderers turning lifecycle events into terminal or metric output."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import Protocol

from rich.console import Console, Group
from rich.live import Live
from rich.text import Text


class PrinterStyle(StrEnum):
    """Output style selected once at startup."""

    EMOJI = "emoji"
    PLAIN = "plain"
    PROMETHEUS = "prometheus"


class Printer(Protocol):
    """Rendering capability shared by all output styles."""

    def on_queued(self, title: str) -> None: ...

    def on_completed(
        self,
        title: str,
        success: bool,
        duration: timedelta,
        output: str | None,
    ) -> None: ...

    def on_error(self, title: str, message: str) -> None: ...

    def on_terminate(self) -> None: ...


class TaskState(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ERROR = "error"


_GLYPHS = {
    TaskState.PENDING: "⏳",
    TaskState.SUCCEEDED: "✅",
    TaskState.FAILED: "❌",
    TaskState.ERROR: "💥",
}


@dataclass(slots=True)
class TaskRow:
    """Render state of one job."""

    title: str
    state: TaskState = TaskState.PENDING
    duration: timedelta | None = None
    detail: str | None = None


class _TaskBoard:
    """Ordered task rows plus pass/fail counters, shared by the text printers.

    Events carry only the job title, so rows are matched by title. Duplicate
    titles are allowed: a result resolves the oldest pending row with that
    title, which keeps the counts exact but may attach it to a sibling's row.
    """

    def __init__(self) -> None:
        self.rows: list[TaskRow] = []

    def add(self, title: str) -> TaskRow:
        row = TaskRow(title=title)
        self.rows.append(row)
        return row

    def resolve(self, title: str) -> TaskRow:
        for row in self.rows:
            if row.title == title and row.state is TaskState.PENDING:
                return row
        return self.add(title)

    def count(self, state: TaskState) -> int:
        return sum(1 for row in self.rows if row.state is state)

    def summary(self) -> str:
        return (
            f"{self.count(TaskState.SUCCEEDED)} passed, "
            f"{self.count(TaskState.FAILED)} failed, "
            f"{self.count(TaskState.ERROR)} errors"
        )


class EmojiPrinter:
    """Live multi-line progress view, one line per task."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._board = _TaskBoard()
        self._live: Live | None = None

    def on_queued(self, title: str) -> None:
        self._board.add(title)
        self._refresh()

    def on_completed(
        self,
        title: str,
        success: bool,
        duration: timedelta,
        output: str | None,
    ) -> None:
        row = self._board.resolve(title)
        row.state = TaskState.SUCCEEDED if success else TaskState.FAILED
        row.duration = duration
        row.detail = output
        self._refresh()

    def on_error(self, title: str, message: str) -> None:
        row = self._board.resolve(title)
        row.state = TaskState.ERROR
        row.detail = message
        self._refresh()

    def on_terminate(self) -> None:
        if self._live is not None:
            self._live.update(self._render(), refresh=True)
            self._live.stop()
            self._live = None
        elif self._board.rows:
            self._console.print(self._render())
        self._console.print(Text(self._board.summary()))

    def _refresh(self) -> None:
        # No redraws without a terminal; the board prints once on terminate.
        if not self._console.is_terminal:
            return
        if self._live is None:
            self._live = Live(
                self._render(),
                console=self._console,
                auto_refresh=False,
                transient=False,
            )
            self._live.start(refresh=True)
            return
        self._live.update(self._render(), refresh=True)

    def _render(self) -> Group:
        lines: list[Text] = []
        for row in self._board.rows:
            line = Text(f"{_GLYPHS[row.state]} {row.title}")
            if row.duration is not None:
                line.append(f" ({format_duration(row.duration)})", style="dim")
            if row.state is TaskState.ERROR and row.detail:
                line.append(f" {row.detail}", style="red")
            lines.append(line)
            if row.state is TaskState.FAILED and row.detail:
                lines.extend(
                    Text(f"    {detail}", style="dim") for detail in row.detail.splitlines()
                )
        return Group(*lines)


class PlainPrinter:
    """Append-only log lines without cursor control."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._board = _TaskBoard()

    def on_queued(self, title: str) -> None:
        self._board.add(title)
        _write(self._console, f"[queued] {title}")

    def on_completed(
        self,
        title: str,
        success: bool,
        duration: timedelta,
        output: str | None,
    ) -> None:
        row = self._board.resolve(title)
        row.state = TaskState.SUCCEEDED if success else TaskState.FAILED
        row.duration = duration
        status = "ok" if success else "failed"
        _write(self._console, f"[{status}] {title} ({format_duration(duration)})")
        if output:
            for line in output.splitlines():
                _write(self._console, f"    {line}")

    def on_error(self, title: str, message: str) -> None:
        self._board.resolve(title).state = TaskState.ERROR
        _write(self._console, f"[error] {title}: {message}")

    def on_terminate(self) -> None:
        _write(self._console, self._board.summary())


@dataclass(slots=True)
class _MetricSample:
    title: str
    success: bool
    duration: timedelta | None


class PrometheusPrinter:
    """Buffers results and emits labeled gauges in text exposition format."""

    SUCCESS_METRIC = "script_exec_success"
    DURATION_METRIC = "script_exec_duration_seconds"

    def __init__(self, console: Console, labels: Mapping[str, str] | None = None) -> None:
        self._console = console
        self._labels = dict(labels or {})
        self._samples: list[_MetricSample] = []

    def on_queued(self, title: str) -> None:
        return

    def on_completed(
        self,
        title: str,
        success: bool,
        duration: timedelta,
        output: str | None,
    ) -> None:
        self._samples.append(_MetricSample(title=title, success=success, duration=duration))

    def on_error(self, title: str, message: str) -> None:
        self._samples.append(_MetricSample(title=title, success=False, duration=None))

    def on_terminate(self) -> None:
        for line in self.render_lines():
            _write(self._console, line)

    def render_lines(self) -> list[str]:
        lines = [
            f"# HELP {self.SUCCESS_METRIC} Whether the healthcheck script succeeded (1) or not (0).",
            f"# TYPE {self.SUCCESS_METRIC} gauge",
        ]
        lines.extend(
            f"{self.SUCCESS_METRIC}{self._label_block(sample.title)} {int(sample.success)}"
            for sample in self._samples
        )
        timed = [sample for sample in self._samples if sample.duration is not None]
        if timed:
            lines.append(
                f"# HELP {self.DURATION_METRIC} Wall-clock run time of the healthcheck script.",
            )
            lines.append(f"# TYPE {self.DURATION_METRIC} gauge")
            lines.extend(
                f"{self.DURATION_METRIC}{self._label_block(sample.title)} "
                f"{sample.duration.total_seconds():.6f}"
                for sample in timed
                if sample.duration is not None
            )
        return lines

    def _label_block(self, title: str) -> str:
        pairs = [("name", title), *self._labels.items()]
        rendered = ",".join(f'{key}="{escape_label_value(value)}"' for key, value in pairs)
        return "{" + rendered + "}"


def build_printer(
    style: PrinterStyle,
    *,
    console: Console,
    labels: Mapping[str, str] | None = None,
) -> Printer:
    """Create the printer for ``style``; labels only affect prometheus output."""

    style = PrinterStyle(style)

    if style is PrinterStyle.EMOJI:
        return EmojiPrinter(console)
    if style is PrinterStyle.PLAIN:
        return PlainPrinter(console)
    if style is PrinterStyle.PROMETHEUS:
        return PrometheusPrinter(console, labels)
    raise ValueError(f"Unsupported output style: {style!r}")


def format_duration(duration: timedelta) -> str:
    return f"{duration.total_seconds():.2f}s"


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _write(console: Console, line: str) -> None:
    console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)
