"""Click command group for the ``lib_log_ingest`` console script.

Purpose
-------
Offer a metadata banner and a runnable demo that wires a Rich console handler
and an :class:`IngestHandler` side by side, the way host applications are
expected to.

Contents
--------
* :func:`cli` – root group handling traceback and ``.env`` preferences.
* :func:`info` / :func:`demo` – subcommands.
* :func:`main` – entry point delegating to :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import logging
import os
import time
from datetime import timedelta
from typing import Any, Sequence

import click
import lib_cli_exit_tools
from rich.console import Console
from rich.logging import RichHandler

from . import __init__conf__
from .__init__conf__ import summary_info
from . import config as config_module
from .adapters import IngestHandler
from .domain import LogLevel
from .runtime import (
    Option,
    Params,
    new_ingest_core,
    with_async,
    with_blocking,
    with_client_batching_enabled,
    with_log_level,
    with_metadata,
    with_nop_ingester_client,
)

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
ASYNC_ENV_VAR = "LOG_INGEST_ASYNC"


def _parse_pairs(values: Sequence[str], option_name: str) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a dictionary.

    Examples
    --------
    >>> _parse_pairs(["system.displayname=edge-1"], "--tag")
    {'system.displayname': 'edge-1'}
    """
    pairs: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint=option_name)
        pairs[key.strip()] = value.strip()
    return pairs


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load a nearby .env before running (default: ${config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool | None) -> None:
    """Forward structured log records to a log-ingest endpoint."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    if config_module.should_use_dotenv(explicit=use_dotenv, env_value=_env_toggle()):
        config_module.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


def _env_toggle() -> str | None:
    return os.getenv(config_module.DOTENV_ENV_VAR)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--tag", "tags", multiple=True, default=("system.displayname=test-device",), show_default=True, help="Resource tag KEY=VALUE (repeatable).")
@click.option("--meta", "metadata", multiple=True, help="Metadata tag KEY=VALUE (repeatable).")
@click.option(
    "--level",
    type=click.Choice([level.name.lower() for level in LogLevel], case_sensitive=False),
    default="warning",
    show_default=True,
    help="Minimum level forwarded to the ingest endpoint.",
)
@click.option("--batching-interval", type=float, default=None, help="Enable client batching with this interval in seconds.")
@click.option(
    "--async/--blocking",
    "async_enabled",
    default=None,
    help=f"Fire-and-forget sends (default: ${ASYNC_ENV_VAR}, else async).",
)
@click.option("--dry-run", is_flag=True, help="Use the no-op client instead of the HTTP endpoint.")
@click.option("--wait", type=float, default=3.0, show_default=True, help="Seconds to wait for fire-and-forget sends before exiting.")
def demo(
    tags: Sequence[str],
    metadata: Sequence[str],
    level: str,
    batching_interval: float | None,
    async_enabled: bool | None,
    dry_run: bool,
    wait: float,
) -> None:
    """Log to the console and forward warnings to the ingest endpoint."""

    result = _run_demo(
        resource_tags=_parse_pairs(tags, "--tag"),
        metadata=_parse_pairs(metadata, "--meta"),
        level=level,
        batching_interval=batching_interval,
        async_enabled=async_enabled,
        dry_run=dry_run,
        wait=wait,
    )
    click.echo(f"forwarded {result['forwarded']} of {result['emitted']} records (async={result['async']})")


def _run_demo(
    *,
    resource_tags: dict[str, str],
    metadata: dict[str, str],
    level: str,
    batching_interval: float | None,
    async_enabled: bool | None,
    dry_run: bool,
    wait: float,
    console: Console | None = None,
) -> dict[str, Any]:
    if async_enabled is None:
        async_enabled = config_module.env_flag(ASYNC_ENV_VAR, default=True)
    options: list[Option] = [with_log_level(level), with_metadata(metadata)]
    options.append(with_async() if async_enabled else with_blocking())
    if batching_interval is not None:
        options.append(with_client_batching_enabled(timedelta(seconds=batching_interval)))
    if dry_run:
        options.append(with_nop_ingester_client())

    sink = new_ingest_core(Params(resource_mapper_tags=resource_tags), *options)
    logger = logging.getLogger("demo")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    console_handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    ingest_handler = IngestHandler(sink)
    logger.addHandler(console_handler)
    logger.addHandler(ingest_handler)

    emitted = [
        (logging.INFO, "Test log message for main logger"),
        (logging.WARNING, "Warning message with fields"),
    ]
    try:
        for levelno, message in emitted:
            logger.log(levelno, message, extra={"fields": {"foo": "bar"}})
        if sink.notifier.policy.dispatch_async and wait > 0:
            time.sleep(wait)
    finally:
        logger.removeHandler(console_handler)
        logger.removeHandler(ingest_handler)
        ingest_handler.close()

    forwarded = sum(1 for levelno, _ in emitted if sink.enabled(levelno))
    return {"emitted": len(emitted), "forwarded": forwarded, "async": sink.notifier.policy.dispatch_async}


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run :func:`cli` with shared exit-code handling.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so embedding hosts keep their own settings.
    """

    previous = (lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color = previous


__all__ = ["cli", "main"]
