"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode suppression rules
- Verbose mode debug output
- format_response in JSON, plain, and Rich modes
- print_table and print_renderable in all modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest
from rich.tree import Tree

from specview import output as output_module
from specview.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("specview.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("specview.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        assert mgr.format == OutputFormat.JSON

    def test_explicit_rich_stays_rich(self, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH)
        assert mgr.format == OutputFormat.RICH


# ------------------------------------------------------------------ #
# NO_COLOR / TERM=dumb detection
# ------------------------------------------------------------------ #


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_disables_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False

    def test_no_color_flag_overrides(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Test that data goes to stdout and diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    def test_info_goes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.info("some info")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "some info" in captured.err

    def test_error_goes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.error("something broke")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Error: something broke" in captured.err

    def test_success_goes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.success("done")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "done" in captured.err

    def test_debug_goes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("debug info")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "[debug] debug info" in captured.err


# ------------------------------------------------------------------ #
# Quiet / verbose
# ------------------------------------------------------------------ #


class TestQuietAndVerbose:
    def test_quiet_suppresses_info(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.error("shown")
        assert "shown" in capfd.readouterr().err

    def test_debug_hidden_without_verbose(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.debug("hidden")
        assert capfd.readouterr().err == ""


# ------------------------------------------------------------------ #
# Diagnostics are printed verbatim
# ------------------------------------------------------------------ #


@pytest.fixture()
def color_env(monkeypatch):
    """Environment in which colour stays enabled."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


class TestVerbatimDiagnostics:
    def test_bracketed_error_is_not_markup(self, capfd, non_tty, color_env):
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.error("No schema named '[/x]'")
        assert "Error: No schema named '[/x]'" in capfd.readouterr().err

    def test_bracketed_debug_is_not_markup(self, capfd, non_tty, color_env):
        mgr = OutputManager(format=OutputFormat.PLAIN, verbose=True)
        mgr.debug("paths: [/b]: [bold]")
        assert "[debug] paths: [/b]: [bold]" in capfd.readouterr().err

    def test_long_error_is_not_wrapped(self, capfd, non_tty, color_env):
        message = "Failed to parse OpenAPI spec: " + " ".join(["word"] * 60)
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.error(message)
        assert capfd.readouterr().err.strip() == f"Error: {message}"

    def test_long_success_is_not_wrapped(self, capfd, non_tty, color_env):
        message = "Set default_spec = " + "/very/long/path" * 10 + " and more"
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.success(message)
        assert capfd.readouterr().err.strip() == message


# ------------------------------------------------------------------ #
# Data rendering
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json_dict(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        mgr.format_response({"key": "value", "n": [1, 2]})
        assert json.loads(capfd.readouterr().out) == {"key": "value", "n": [1, 2]}

    def test_plain_dict_is_tab_separated(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"title": "Petstore", "servers": ["a", "b"]})
        lines = capfd.readouterr().out.splitlines()
        assert lines == ["title\tPetstore", 'servers\t["a", "b"]']

    def test_plain_list(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response(["x", {"a": 1}])
        assert capfd.readouterr().out.splitlines() == ["x", '{"a": 1}']

    def test_plain_scalar(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response(42)
        assert capfd.readouterr().out.strip() == "42"

    def test_rich_dict(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.format_response({"key": "value"})
        out = capfd.readouterr().out
        assert "key" in out
        assert "value" in out


class TestPrintTable:
    def test_json_records(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        mgr.print_table(["A", "B"], [["1", "2"], ["3", "4"]])
        assert json.loads(capfd.readouterr().out) == [{"A": "1", "B": "2"}, {"A": "3", "B": "4"}]

    def test_plain_tsv(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["A", "B"], [["1", "2"]])
        assert capfd.readouterr().out.splitlines() == ["A\tB", "1\t2"]

    def test_rich_table(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["Name"], [["petstore"]], title="Things")
        out = capfd.readouterr().out
        assert "Things" in out
        assert "petstore" in out

    def test_rich_table_cells_are_literal(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["Name"], [["[/x]"]], title="[bold]Api[/y]")
        out = capfd.readouterr().out
        assert "[/x]" in out
        assert "[bold]Api[/y]" in out


class TestPrintRenderable:
    def test_plain_mode_prints_fallback(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_renderable(Tree("rich label"), "plain label")
        out = capfd.readouterr().out
        assert "plain label" in out
        assert "rich label" not in out

    def test_rich_mode_prints_renderable(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        tree = Tree("root")
        tree.add("child")
        mgr.print_renderable(tree, "plain label")
        out = capfd.readouterr().out
        assert "root" in out
        assert "child" in out
        assert "plain label" not in out

    def test_json_text_plain(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_json_text('{\n  "a": 1\n}')
        assert capfd.readouterr().out == '{\n  "a": 1\n}\n'

    def test_json_text_rich(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_json_text('{"a": 1}')
        assert '"a"' in capfd.readouterr().out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_replaces_instance(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_reset_output(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True))
        output_module.print_data("data line")
        output_module.info("info line")
        output_module.debug("debug line")
        output_module.error("error line")
        captured = capfd.readouterr()
        assert "data line" in captured.out
        assert "info line" in captured.err
        assert "debug line" in captured.err
        assert "error line" in captured.err
