"""``stepbind describe`` command."""

from __future__ import annotations

import click
from rich.table import Table

from stepbind.cli.console import console
from stepbind.cli.context import ExitCode
from stepbind.cli.helpers import import_handler
from stepbind.cli.output import format_error
from stepbind.exceptions import StepbindError
from stepbind.steps import ParameterKind, describe_handler


@click.command()
@click.argument("reference")
def describe(reference: str) -> None:
    """Show the parameter kinds of a step handler.

    REFERENCE is the handler as 'package.module:function'.

    Examples:
        stepbind describe features.steps:i_have_apples
    """
    try:
        descriptor = describe_handler(import_handler(reference))
    except StepbindError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    table = Table(title=descriptor.name)
    table.add_column("#", justify="right")
    table.add_column("Parameter", style="bold")
    table.add_column("Declared")
    table.add_column("Kind")

    for position, kind in enumerate(descriptor.kinds):
        style = "red" if kind is ParameterKind.UNSUPPORTED else "green"
        table.add_row(
            str(position),
            descriptor.parameter_names[position],
            descriptor.declared_shape(position),
            f"[{style}]{kind.value}[/{style}]",
        )

    console.print(table)
    if descriptor.location:
        console.print(f"Location: {descriptor.location}")
