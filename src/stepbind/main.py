"""CLI entry point for stepbind.

This module defines the Click-based command-line interface for stepbind.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from stepbind.logging import configure_logging

# Load STEPBIND_* variables from a .env file in the current directory before
# any configuration is read.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from stepbind import __version__  # noqa: E402
from stepbind.cli.commands.call import call  # noqa: E402
from stepbind.cli.commands.describe import describe  # noqa: E402
from stepbind.cli.commands.report import report  # noqa: E402
from stepbind.cli.context import CLIContext, ExitCode  # noqa: E402
from stepbind.cli.output import format_error  # noqa: E402
from stepbind.config import load_config  # noqa: E402
from stepbind.exceptions import ConfigError  # noqa: E402

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _log_level(quiet: bool, verbose: int, configured: str) -> int:
    # -q beats -v, and either beats the configured verbosity
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO if verbose == 1 else logging.DEBUG
    return _VERBOSITY_LEVELS.get(configured, logging.WARNING)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="stepbind")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config file (overrides project/user config).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    verbose: int,
    quiet: bool,
) -> None:
    """stepbind - step argument conversion and invocation."""
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(
        config=config,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
    )

    configure_logging(level=_log_level(quiet, verbose, config.verbosity))

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(describe)
cli.add_command(call)
cli.add_command(report)

if __name__ == "__main__":
    cli()
