"""Runtime configuration for the script runner."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from script_exec.output.printers import PrinterStyle

DEFAULT_JOBS = 3
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class Settings:
    """Execution and output settings; CLI options override environment values."""

    jobs: int = DEFAULT_JOBS
    style: str = PrinterStyle.EMOJI.value
    timeout_seconds: float | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(
        cls,
        *,
        jobs: int | None = None,
        style: str | None = None,
        timeout_seconds: float | None = None,
    ) -> Settings:
        """Load settings from ``SCRIPT_EXEC_*`` environment variables.

        Explicit values win, and the matching variable is then not read at all.
        """

        if jobs is None:
            jobs = _env_int("SCRIPT_EXEC_JOBS", DEFAULT_JOBS)
        if style is None:
            style = os.getenv("SCRIPT_EXEC_STYLE", PrinterStyle.EMOJI.value)
        if timeout_seconds is None:
            timeout_seconds = _env_optional_float("SCRIPT_EXEC_TIMEOUT_SECONDS")
        return cls(
            jobs=jobs,
            style=style.strip().lower(),
            timeout_seconds=timeout_seconds,
            log_level=os.getenv("SCRIPT_EXEC_LOG_LEVEL", "WARNING").strip().upper(),
        )

    def validate(self) -> None:
        """Raise configuration error if any setting is out of range."""

        if self.jobs < 1:
            raise ValueError(f"Number of parallel jobs must be >= 1, got {self.jobs}.")
        if self.style not in {style.value for style in PrinterStyle}:
            raise ValueError(
                f"Unsupported output style: {self.style!r}. "
                f"Expected one of: {', '.join(style.value for style in PrinterStyle)}.",
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("SCRIPT_EXEC_TIMEOUT_SECONDS must be > 0.")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid SCRIPT_EXEC_LOG_LEVEL: {self.log_level!r}")

    @property
    def printer_style(self) -> PrinterStyle:
        return PrinterStyle(self.style)

    def configure_logging(self) -> None:
        """Send log records to stderr so they never mix with the report on stdout."""

        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {raw!r}") from error


def _env_optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as error:
        raise ValueError(f"Invalid number for {name}: {raw!r}") from error
