"""The ``specview`` command line.

The root Typer app carries the browse commands from
:mod:`specview.commands.browse` and the ``config`` group from
:mod:`specview.commands.config`.  Before any of them runs,
:func:`main_callback` picks the output format, resolves the configuration
and puts it on ``ctx.obj`` next to an empty
:class:`~specview.context.SpecContext`.  Commands load the configured
document into that context themselves, so ``specview config ...`` works
without a document.

:func:`main` is the console script.  A :class:`~specview.exceptions.SpecviewError`
that escapes a command becomes an error message and its exit code; any
other exception leaves a traceback under the data directory.

See Also:
    :mod:`specview.config`: Where the document and depth come from.
    :mod:`specview.output`: The formats selected by ``--json``/``--plain``.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from specview import __version__
from specview.commands.browse import (
    operation_command,
    operations_command,
    overview_command,
    schema_command,
    security_command,
    tree_command,
)
from specview.commands.config import config_app
from specview.exceptions import SpecviewError
from specview.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specview",
    help="Browse OpenAPI 3.x documents: operations, schemas, and security schemes.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("tree")(tree_command)
app.command("overview")(overview_command)
app.command("operations")(operations_command)
app.command("operation")(operation_command)
app.command("schema")(schema_command)
app.command("security")(security_command)
app.add_typer(config_app, name="config", help="Show or change the user configuration.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specview {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Document to browse (file path or URL)."
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Nested schema levels to render.", min=1
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print each result as one JSON document."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print TSV tables and indented outlines."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Hide status messages."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug messages on stderr."
    ),
) -> None:
    """Set up output and configuration for the sub-command.

    ``--json`` and ``--plain`` win over ``output.format`` from the user
    config, which in turn wins over terminal detection.
    """
    from specview.config import resolve_config
    from specview.context import SpecContext
    from specview.exceptions import ConfigError
    from specview.output import OutputFormat, OutputManager, debug, error, set_output

    flag_format: Optional[OutputFormat] = None
    if json_output:
        flag_format = OutputFormat.JSON
    elif plain_output:
        flag_format = OutputFormat.PLAIN

    def install(fmt: OutputFormat) -> None:
        set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    # Installed before resolving so a config error can be reported.
    install(flag_format or OutputFormat.AUTO)

    try:
        config = resolve_config(
            cli_spec=spec,
            cli_max_depth=max_depth,
            cli_format=flag_format.value if flag_format else None,
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if flag_format is None and config.output.format != OutputFormat.AUTO.value:
        install(OutputFormat(config.output.format))

    debug(f"Effective config: {config.model_dump(mode='json')}")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["context"] = SpecContext()


def _exit_on_interrupt() -> None:
    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback of *exc* under ``<data dir>/logs`` and return the file."""
    from specview.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return log_path


def main() -> None:
    """Console-script entry point; always ends in :class:`SystemExit`."""
    from specview.output import error

    _exit_on_interrupt()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except SpecviewError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
