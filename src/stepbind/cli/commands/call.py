"""``stepbind call`` command."""

from __future__ import annotations

from typing import Any

import click

from stepbind.cli.console import console
from stepbind.cli.context import CLIContext, ExitCode
from stepbind.cli.helpers import import_handler
from stepbind.cli.output import format_error, format_success
from stepbind.exceptions import StepbindError
from stepbind.logging import get_logger
from stepbind.steps import (
    DocString,
    DocStringValue,
    StepInvoker,
    Table,
    TableValue,
    TextValue,
    describe_handler,
)


@click.command()
@click.argument("reference")
@click.argument("arguments", nargs=-1)
@click.option(
    "--doc-string",
    "doc_string",
    default=None,
    help="Attach a doc string as the last argument.",
)
@click.option(
    "--content-type",
    default="",
    help="Content type of the attached doc string.",
)
@click.option(
    "--row",
    "rows",
    multiple=True,
    help="Attach a data table row as the last argument (cells separated by '|').",
)
@click.pass_context
def call(
    ctx: click.Context,
    reference: str,
    arguments: tuple[str, ...],
    doc_string: str | None,
    content_type: str,
    rows: tuple[str, ...],
) -> None:
    """Attempt a step handler with text arguments.

    REFERENCE is the handler as 'package.module:function'. ARGUMENTS are the
    text values captured from the step line.

    Examples:
        stepbind call features.steps:i_have_apples 5
        stepbind call features.steps:these_users --row "name|age" --row "ann|7"
    """
    logger = get_logger(__name__)
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    if doc_string is not None and rows:
        click.echo(
            format_error("A step carries either a doc string or a table, not both"),
            err=True,
        )
        raise SystemExit(ExitCode.FAILURE)

    raw: list[Any] = [TextValue(text) for text in arguments]
    if doc_string is not None:
        raw.append(DocStringValue(DocString(doc_string, content_type)))
    elif rows:
        cells = [[cell.strip() for cell in row.split("|")] for row in rows]
        raw.append(TableValue(Table.from_cells(cells)))

    try:
        descriptor = describe_handler(import_handler(reference))
    except StepbindError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    outcome = StepInvoker(cli_ctx.config.invocation).attempt(descriptor, raw)
    logger.debug("cli_step_attempted", handler=descriptor.name, **outcome.to_dict())

    if outcome.passed:
        console.print(format_success(f"{descriptor.name} passed"))
        return

    kind = outcome.failure_kind.value if outcome.failure_kind else "failure"
    click.echo(
        format_error(
            f"{descriptor.name} failed ({kind})",
            details=[outcome.message or ""],
        ),
        err=True,
    )
    raise SystemExit(ExitCode.FAILURE)
