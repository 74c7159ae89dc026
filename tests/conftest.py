"""Shared test fixtures."""

from __future__ import annotations

import stat
from collections.abc import Callable
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console


@pytest.fixture()
def make_script(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable shell script into ``tmp_path`` and return its path."""

    def _make(name: str, body: str = "exit 0", *, executable: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n", "utf-8")
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return path

    return _make


@pytest.fixture()
def console() -> Console:
    """Non-terminal console recording into a string buffer."""

    return Console(file=StringIO(), width=200, force_terminal=False, color_system=None)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in (
        "SCRIPT_EXEC_JOBS",
        "SCRIPT_EXEC_STYLE",
        "SCRIPT_EXEC_TIMEOUT_SECONDS",
        "SCRIPT_EXEC_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
