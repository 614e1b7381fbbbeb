"""``stepbind report`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError

from stepbind.cli.context import CLIContext, ExitCode
from stepbind.cli.output import format_error
from stepbind.logging import get_logger
from stepbind.report import CucumberFormatter, load_features


def _read_results(path: Path) -> Any:
    # JSON is a subset of YAML, so one loader covers both formats
    with open(path) as f:
        return yaml.safe_load(f)


@click.command()
@click.argument(
    "results_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to a file instead of stdout.",
)
@click.pass_context
def report(ctx: click.Context, results_file: Path, output: Path | None) -> None:
    """Render a YAML/JSON results file as cucumber JSON.

    Examples:
        stepbind report results.yaml
        stepbind report results.json -o cucumber.json
    """
    logger = get_logger(__name__)
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    try:
        features = load_features(_read_results(results_file))
    except yaml.YAMLError as e:
        click.echo(format_error(f"Invalid YAML in {results_file}: {e}"), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ValidationError as e:
        details = [
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        click.echo(
            format_error(f"Invalid results file {results_file}", details=details),
            err=True,
        )
        raise SystemExit(ExitCode.FAILURE) from e

    formatter = CucumberFormatter(cli_ctx.config.report)
    if output is None:
        click.echo(formatter.render(features), nl=False)
    else:
        with open(output, "w", encoding="utf-8") as f:
            formatter.write(features, f)
        logger.info("report_written", path=str(output), features=len(features))
