from __future__ import annotations

import os
from pathlib import Path

import allure
import pytest
from click.testing import CliRunner

from script_exec import __version__
from script_exec.main import script_exec

pytestmark = [
    allure.epic("CLI"),
    allure.feature("script-exec command"),
    pytest.mark.skipif(os.name == "nt", reason="POSIX shell scripts"),
]


def test_version():
    assert __version__


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(script_exec, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_empty_job_list_exits_with_error() -> None:
    result = CliRunner().invoke(script_exec, [])

    assert result.exit_code == 1
    assert "No paths provided" in result.output


def test_all_scripts_passing_exits_zero(make_script) -> None:
    first = make_script("first.sh")
    second = make_script("second.sh", "echo fine")

    result = CliRunner().invoke(
        script_exec,
        ["--style", "plain", f"first={first}", f"second={second}"],
    )

    assert result.exit_code == 0
    assert "[ok] first" in result.output
    assert "[ok] second" in result.output
    assert "2 passed, 0 failed, 0 errors" in result.output


@pytest.mark.parametrize("order", ["ok-first", "bad-first"])
def test_one_failing_script_exits_one(make_script, order: str) -> None:
    ok = f"ok={make_script('ok.sh')}"
    bad = f"bad={make_script('bad.sh', 'echo broken >&2; exit 1')}"
    pairs = [ok, bad] if order == "ok-first" else [bad, ok]

    result = CliRunner().invoke(script_exec, ["--style", "plain", "-j", "2", *pairs])

    assert result.exit_code == 1
    assert "[failed] bad" in result.output
    assert "    Error:" in result.output
    assert "    broken" in result.output


def test_missing_script_exits_one(tmp_path: Path) -> None:
    missing = tmp_path / "missing.sh"

    result = CliRunner().invoke(script_exec, ["--style", "plain", f"gone={missing}"])

    assert result.exit_code == 1
    assert f"[error] gone: {missing} does not exist" in result.output


def test_bare_path_uses_file_stem_as_title(make_script) -> None:
    script = make_script("disk-space.sh")

    result = CliRunner().invoke(script_exec, ["--style", "plain", str(script)])

    assert result.exit_code == 0
    assert "[ok] disk-space" in result.output


def test_malformed_pair_is_usage_error() -> None:
    result = CliRunner().invoke(script_exec, ["a=b=c"])

    assert result.exit_code == 2
    assert "title=path" in result.output


def test_malformed_label_is_usage_error(make_script) -> None:
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, ["--label", "oops", f"ok={script}"])

    assert result.exit_code == 2
    assert "key:value" in result.output


def test_zero_jobs_is_usage_error(make_script) -> None:
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, ["-j", "0", f"ok={script}"])

    assert result.exit_code == 2


def test_prometheus_style_applies_labels(make_script) -> None:
    ok = make_script("ok.sh")
    bad = make_script("bad.sh", "exit 1")

    result = CliRunner().invoke(
        script_exec,
        [
            "--style",
            "prometheus",
            "--label",
            "host:web1",
            "--label",
            "env:prod",
            "-j",
            "1",
            f"ok={ok}",
            f"bad={bad}",
        ],
    )

    assert result.exit_code == 1
    assert 'script_exec_success{name="ok",host="web1",env="prod"} 1' in result.output
    assert 'script_exec_success{name="bad",host="web1",env="prod"} 0' in result.output
    assert 'script_exec_duration_seconds{name="ok",host="web1",env="prod"}' in result.output


def test_emoji_style_is_default(make_script) -> None:
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, [f"ok={script}"])

    assert result.exit_code == 0
    assert "✅ ok" in result.output
    assert result.output.splitlines()[-1] == "1 passed, 0 failed, 0 errors"


def test_style_from_environment(make_script, monkeypatch) -> None:
    monkeypatch.setenv("SCRIPT_EXEC_STYLE", "plain")
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, [f"ok={script}"])

    assert result.exit_code == 0
    assert "[ok] ok" in result.output


def test_invalid_environment_setting_is_reported(make_script, monkeypatch) -> None:
    monkeypatch.setenv("SCRIPT_EXEC_JOBS", "0")
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, [f"ok={script}"])

    assert result.exit_code == 1
    assert "parallel jobs must be >= 1" in result.output


def test_deprecated_time_flag_is_accepted(make_script) -> None:
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, ["--time", "--style", "plain", f"ok={script}"])

    assert result.exit_code == 0
    assert "[ok] ok" in result.output


def test_timeout_option_fails_slow_script(make_script) -> None:
    script = make_script("slow.sh", "exec sleep 10")

    result = CliRunner().invoke(
        script_exec,
        ["--style", "plain", "--timeout", "1", f"slow={script}"],
    )

    assert result.exit_code == 1
    assert "Timed out after 1s" in result.output
    assert "1.0s" not in result.output


def test_emoji_summary_is_on_its_own_line_without_terminal(make_script, tmp_path: Path) -> None:
    script = make_script("ok.sh")
    missing = tmp_path / "missing.sh"

    result = CliRunner().invoke(script_exec, ["-j", "1", f"x={missing}", f"x={script}"])

    lines = result.output.splitlines()
    assert result.exit_code == 1
    assert lines[-1] == "1 passed, 0 failed, 1 errors"
    assert any(line.startswith("✅ x (") and line.endswith("s)") for line in lines)


def test_cli_value_wins_over_malformed_environment(make_script, monkeypatch) -> None:
    monkeypatch.setenv("SCRIPT_EXEC_JOBS", "abc")
    monkeypatch.setenv("SCRIPT_EXEC_TIMEOUT_SECONDS", "soon")
    script = make_script("ok.sh")

    result = CliRunner().invoke(
        script_exec,
        ["-j", "2", "--timeout", "5", "--style", "plain", f"ok={script}"],
    )

    assert result.exit_code == 0
    assert "[ok] ok" in result.output


def test_malformed_environment_without_cli_value_is_reported(make_script, monkeypatch) -> None:
    monkeypatch.setenv("SCRIPT_EXEC_JOBS", "abc")
    script = make_script("ok.sh")

    result = CliRunner().invoke(script_exec, ["--style", "plain", f"ok={script}"])

    assert result.exit_code == 1
    assert "Invalid integer value for SCRIPT_EXEC_JOBS" in result.output
