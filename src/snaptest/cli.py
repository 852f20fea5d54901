"""Command-line entry point for snaptest."""

from __future__ import annotations

from enum import Enum
from types import SimpleNamespace
from typing import Callable, Optional

import typer

from . import __version__
from . import log as snaptest_log
from .commands.config import show_config as config_cmd
from .commands.plan import show_plan as plan_cmd
from .commands.run import run_checkpoint as run_cmd
from .io import die, say
from .services.errors import ServiceFailure

INTERRUPTED_EXIT_CODE = 130

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help=(
        "Snapshot the working tree, test it on a remote machine, and "
        "fast-forward HEAD when the tests pass."
    ),
)


class LogLevelName(str, Enum):
    trace = "trace"
    debug = "debug"
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


class ConfigFormat(str, Enum):
    table = "table"
    json = "json"


def _version_callback(value: bool) -> None:
    if value:
        say(f"snaptest {__version__}")
        raise typer.Exit()


def _invoke(command: Callable[[SimpleNamespace], object], args: SimpleNamespace) -> object:
    try:
        return command(args)
    except ServiceFailure as exc:
        die(str(exc), hint=exc.recovery_hint)
    except KeyboardInterrupt:
        die("interrupted", code=INTERRUPTED_EXIT_CODE)


@app.callback()
def main(
    log_level: Optional[LogLevelName] = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Minimum level of messages to print (default: info or $SNAPTEST_LOG_LEVEL).",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable coloured output."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    del version
    if log_level is not None:
        snaptest_log.set_level(log_level.value)
    if no_color:
        snaptest_log.set_no_color(True)


@app.command("run")
def run(
    host: Optional[str] = typer.Option(None, "--host", help="Remote test host (ssh destination)."),
    path: Optional[str] = typer.Option(None, "--path", help="Git checkout on the remote host."),
    min_free_space: Optional[str] = typer.Option(
        None, "--min-free-space", help="Evict the remote build cache below this size, e.g. 20G."
    ),
    shards: Optional[int] = typer.Option(
        None, "--shards", min=1, help="Parallelism passed to the remote test command."
    ),
    no_format: bool = typer.Option(
        False, "--no-format", help="Skip the formatter before taking the snapshot."
    ),
) -> None:
    """Snapshot, test remotely, and advance HEAD if the tests pass."""
    args = SimpleNamespace(
        host=host,
        path=path,
        min_free_space=min_free_space,
        shards=shards,
        no_format=no_format,
    )
    code = _invoke(run_cmd, args)
    raise typer.Exit(code if isinstance(code, int) else 0)


@app.command("plan")
def plan(
    commit: Optional[str] = typer.Option(None, "--commit", help="Commit to plan for (default HEAD)."),
    host: Optional[str] = typer.Option(None, "--host", help="Remote test host (ssh destination)."),
    path: Optional[str] = typer.Option(None, "--path", help="Git checkout on the remote host."),
    min_free_space: Optional[str] = typer.Option(
        None, "--min-free-space", help="Evict the remote build cache below this size, e.g. 20G."
    ),
    shards: Optional[int] = typer.Option(
        None, "--shards", min=1, help="Parallelism passed to the remote test command."
    ),
) -> None:
    """Print the remote command a run would execute."""
    args = SimpleNamespace(
        commit=commit,
        host=host,
        path=path,
        min_free_space=min_free_space,
        shards=shards,
    )
    _invoke(plan_cmd, args)


@app.command("config")
def config(
    format: ConfigFormat = typer.Option(ConfigFormat.table, "--format", help="Output format."),
) -> None:
    """Show the resolved configuration."""
    _invoke(config_cmd, SimpleNamespace(format=format.value))
