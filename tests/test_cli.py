"""CLI behaviour coverage for the click command group."""

from __future__ import annotations

import io
import sys
from typing import Callable

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from rich.console import Console

from lib_log_ingest import __init__conf__
from lib_log_ingest import cli as cli_mod
from lib_log_ingest.__init__conf__ import summary_info


def run_cli(args: list[str] | None = None) -> tuple[int, str, BaseException | None]:
    """Invoke the click group with ``CliRunner`` and capture output."""

    runner = CliRunner()
    original_argv = sys.argv
    sys.argv = [__init__conf__.shell_command]
    try:
        result = runner.invoke(cli_mod.cli, args or [], prog_name=__init__conf__.shell_command)
    finally:
        sys.argv = original_argv
    return result.exit_code, result.output, result.exception


def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout, _ = run_cli()

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_info_command_matches_summary() -> None:
    exit_code, stdout, _ = run_cli(["info"])

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_version_option() -> None:
    exit_code, stdout, _ = run_cli(["--version"])

    assert exit_code == 0
    assert stdout.strip() == __init__conf__.version


def test_cli_no_traceback_option(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--no-traceback` should disable verbose tracebacks for subsequent commands."""

    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    exit_code, _stdout, _exception = run_cli(["--no-traceback", "info"])

    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_cli_demo_dry_run_reports_forwarded_records(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(cli_mod.ASYNC_ENV_VAR, raising=False)

    exit_code, stdout, exception = run_cli(["demo", "--dry-run", "--wait", "0", "--level", "info"])

    assert exception is None
    assert exit_code == 0
    assert "forwarded 2 of 2 records (async=True)" in stdout


def test_cli_demo_blocking_with_default_level() -> None:
    exit_code, stdout, _ = run_cli(["demo", "--dry-run", "--blocking"])

    assert exit_code == 0
    assert "forwarded 1 of 2 records (async=False)" in stdout


def test_cli_demo_async_env_toggle(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(cli_mod.ASYNC_ENV_VAR, "0")

    exit_code, stdout, _ = run_cli(["demo", "--dry-run"])

    assert exit_code == 0
    assert "(async=False)" in stdout


def test_cli_demo_batching_forces_sync() -> None:
    exit_code, stdout, _ = run_cli(["demo", "--dry-run", "--async", "--batching-interval", "5"])

    assert exit_code == 0
    assert "(async=False)" in stdout


def test_cli_demo_rejects_malformed_tags() -> None:
    exit_code, stdout, _ = run_cli(["demo", "--dry-run", "--tag", "no-separator"])

    assert exit_code == 2
    assert "KEY=VALUE" in stdout


def test_run_demo_logs_to_console() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=200)

    result = cli_mod._run_demo(
        resource_tags={"system.displayname": "edge-1"},
        metadata={"env": "test"},
        level="error",
        batching_interval=None,
        async_enabled=False,
        dry_run=True,
        wait=0,
        console=console,
    )

    assert result == {"emitted": 2, "forwarded": 0, "async": False}
    rendered = buffer.getvalue()
    assert "Test log message for main logger" in rendered
    assert "Warning message with fields" in rendered


def test_main_restores_traceback_preferences(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)

    recorded: dict[str, bool] = {}

    def fake_run_cli(command: Callable[..., int], argv: list[str] | None = None, *, prog_name: str | None = None, **_: object) -> int:
        runner = CliRunner()
        result = runner.invoke(command, ["info"] if argv is None else argv)
        if result.exception is not None:
            raise result.exception
        recorded["traceback"] = lib_cli_exit_tools.config.traceback
        recorded["traceback_force_color"] = lib_cli_exit_tools.config.traceback_force_color
        return result.exit_code

    monkeypatch.setattr(lib_cli_exit_tools, "run_cli", fake_run_cli)

    exit_code = cli_mod.main(["--traceback", "info"])

    assert exit_code == 0
    assert recorded == {"traceback": True, "traceback_force_color": True}
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "info"], raising=False)

    exit_code = cli_mod.main()
    captured = capsys.readouterr()

    assert exit_code == 0
    assert f"Info for {__init__conf__.name}:" in captured.out
