"""Terminal output for specview: document views on stdout, diagnostics on stderr.

Everything a command produces as its result -- the navigation tree, the
operation table, schema outlines, synthesized examples -- is written to
stdout so it can be piped.  Progress and failure messages go to stderr.

Four formats are supported:

* ``json`` -- one JSON document per command, for scripting.
* ``plain`` -- tab-separated rows and indented outlines, no markup.
* ``rich`` -- Rich tables, trees, and syntax-highlighted JSON.
* ``auto`` -- ``rich`` on an interactive terminal, ``plain`` otherwise.

Colour is disabled by ``NO_COLOR``, ``TERM=dumb``, or ``--no-color``
(see `clig.dev <https://clig.dev/>`_), which also turns ``auto`` into
``plain``.

Commands do not pass an :class:`OutputManager` around.  The root callback
in :mod:`specview.app` installs one with :func:`set_output` and the rest of
the package calls the module-level functions (:func:`format_response`,
:func:`error`, :func:`debug`, ...).  The loader reports progress through
:func:`debug`, so ``--verbose`` shows where a document came from.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console, RenderableType
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How command results are written to stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Style(NamedTuple):
    """Prefix and markup for one diagnostic level."""

    prefix: str
    markup: str
    always: bool  # shown under --quiet


_INFO = _Style("", "", always=False)
_SUCCESS = _Style("", "green", always=False)
_ERROR = _Style("Error: ", "bold red", always=True)
_DEBUG = _Style("[debug] ", "dim", always=True)


class OutputManager:
    """Writes command results and diagnostics in the selected format.

    Args:
        format: Requested format.  ``AUTO`` is resolved once, here.
        no_color: Disable colour even on a terminal.
        quiet: Hide info and success messages.  Errors are always shown.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format, never ``AUTO``."""
        return self._format

    # ------------------------------------------------------------------ #
    # Results (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write *text* and a newline to stdout unformatted."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write a dict, list, or scalar result.

        JSON mode dumps it as indented JSON.  Plain mode writes a dict as
        ``key<TAB>value`` lines and a list one item per line, with nested
        values on one line as compact JSON.  Rich mode highlights the JSON.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, (dict, list)):
            self.print_json_text(_dumps(data))
        else:
            self._stdout.print(str(data), markup=False)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as a Rich table, TSV with a header line, or JSON records.

        The *title* is only shown in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps([dict(zip(headers, row)) for row in rows]))
            return

        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(
            title=Text(title) if title else None,
            show_header=True,
            header_style="bold cyan",
        )
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        self._stdout.print(table)

    def print_renderable(self, renderable: RenderableType, plain: str) -> None:
        """Write *renderable* in Rich mode and the *plain* text otherwise.

        For views with no JSON shape of their own, such as the tree outline.
        """
        if self._format == OutputFormat.RICH:
            self._stdout.print(renderable)
        else:
            self.print_data(plain)

    def print_json_text(self, text: str) -> None:
        """Write already-serialized JSON, highlighted in Rich mode."""
        self.print_renderable(Syntax(text, "json", theme="monokai", word_wrap=True), text)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Status message, hidden by ``--quiet``."""
        self._diagnostic(_INFO, message)

    def success(self, message: str) -> None:
        """Confirmation of a change, hidden by ``--quiet``."""
        self._diagnostic(_SUCCESS, message)

    def error(self, message: str) -> None:
        """Failure message, always shown."""
        self._diagnostic(_ERROR, message)

    def debug(self, message: str) -> None:
        """Trace message, shown only with ``--verbose``."""
        if self._verbose:
            self._diagnostic(_DEBUG, message)

    def _diagnostic(self, style: _Style, message: str) -> None:
        if self._quiet and not style.always:
            return
        if self._no_color or not style.markup:
            print(f"{style.prefix}{message}", file=sys.stderr, flush=True)
            return
        self._stderr.print(Text(f"{style.prefix}{message}", style=style.markup), soft_wrap=True)


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    if _is_tty() and not no_color:
        return OutputFormat.RICH
    return OutputFormat.PLAIN


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{_plain_value(value)}" for key, value in data.items()]
    if isinstance(data, list):
        return [_plain_value(item) for item in data]
    return [_plain_value(data)]


def _plain_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """The installed :class:`OutputManager`, or a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager so the next call creates a fresh one.

    Tests call this because a manager keeps the streams that were current
    when it was created.
    """
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
