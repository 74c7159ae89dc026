"""CLI entrypoint for script-exec."""

import rich_click as click

from script_exec import __version__
from script_exec.controllers import (
    ExecCommand,
    ScriptExecCliController,
    build_label_map,
    parse_job,
    parse_label,
)
from script_exec.executor import Job
from script_exec.output import PrinterStyle

click.rich_click.USE_MARKDOWN = True
CONTROLLER = ScriptExecCliController()


def _parse_jobs(
    _ctx: click.Context,
    _param: click.Parameter,
    values: tuple[str, ...],
) -> list[Job]:
    try:
        return [parse_job(value) for value in values]
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _parse_labels(
    _ctx: click.Context,
    _param: click.Parameter,
    values: tuple[str, ...],
) -> dict[str, str]:
    try:
        return build_label_map([parse_label(value) for value in values])
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


@click.command()
@click.version_option(version=__version__, prog_name="script-exec")
@click.option(
    "--style",
    type=click.Choice([style.value for style in PrinterStyle], case_sensitive=False),
    default=None,
    show_default="emoji",
    help="Output style. Defaults to SCRIPT_EXEC_STYLE or emoji.",
)
@click.option(
    "--time",
    "time_flag",
    is_flag=True,
    default=False,
    help="Deprecated, has no effect.",
)
@click.option(
    "-j",
    "--jobs",
    "parallel_jobs",
    type=click.IntRange(min=1),
    default=None,
    show_default="3",
    help="Number of parallel jobs. Defaults to SCRIPT_EXEC_JOBS or 3.",
)
@click.option(
    "--label",
    "labels",
    multiple=True,
    callback=_parse_labels,
    help="Label in the format key:value added to metrics if style is prometheus. "
    "Can be repeated.",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Kill a script and mark it failed after this many seconds. "
    "Defaults to SCRIPT_EXEC_TIMEOUT_SECONDS or no timeout.",
)
@click.argument("pairs", nargs=-1, callback=_parse_jobs)
def script_exec(  # noqa: PLR0913
    style: str | None,
    time_flag: bool,
    parallel_jobs: int | None,
    labels: dict[str, str],
    timeout_seconds: float | None,
    pairs: list[Job],
) -> None:
    """Run healthcheck scripts in parallel and print their results.

    Each argument is `title=path` or a bare `path` (the title is then taken
    from the file name). Exits with status 1 if any script is missing or fails.
    """

    if not pairs:
        raise click.ClickException("No paths provided")

    command = ExecCommand(
        jobs=pairs,
        style=style,
        parallel_jobs=parallel_jobs,
        labels=labels,
        timeout_seconds=timeout_seconds,
        time=time_flag,
    )
    try:
        settings = CONTROLLER.settings_for(command)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    settings.configure_logging()

    result = CONTROLLER.run(command, settings)
    if not result.success:
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    script_exec()
