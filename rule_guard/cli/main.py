"""
Main CLI entry point using Typer.

This module defines the command-line interface for RuleGuard using Typer.
It provides two commands: validate and triage.
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from rule_guard.utils import setup_logging

from .commands import validate_command, triage_command
from .display import print_error


# Create Typer app
app = typer.Typer(
    name="rule-guard",
    help="RuleGuard - Validate business rule JSON with actionable errors",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.command("validate")
def validate(
    rule: Annotated[
        Path,
        typer.Option("--rule", "-r", help="Path to rule JSON file", exists=True, file_okay=True, dir_okay=False)
    ],
    schema: Annotated[
        Optional[Path],
        typer.Option("--schema", "-s", help="Path to rule schema (defaults to the bundled schema)", exists=True, file_okay=True, dir_okay=False)
    ] = None,
    lines: Annotated[
        bool,
        typer.Option("--lines/--no-lines", help="Annotate errors with source line numbers")
    ] = True,
    no_filter: Annotated[
        bool,
        typer.Option("--no-filter", help="Show every raw diagnostic (skip cascade filtering)")
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON")
    ] = False,
) -> None:
    """
    Validate a rule file against the rule schema.

    Example:
        rule-guard validate \\
            --rule rules/discount.json \\
            --lines
    """
    try:
        validate_command(
            rule_path=rule,
            schema_path=schema,
            want_lines=lines,
            disable_filter=no_filter,
            as_json=as_json
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("triage")
def triage(
    errors: Annotated[
        Path,
        typer.Option("--errors", "-e", help="Path to JSON file with raw error records", exists=True, file_okay=True, dir_okay=False)
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the filter result as JSON")
    ] = False,
) -> None:
    """
    Run the cascade filter over saved raw errors.

    Example:
        rule-guard triage --errors raw-errors.json --json
    """
    try:
        triage_command(errors_path=errors, as_json=as_json)
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-V", help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """
    RuleGuard - Validate business rule JSON.

    Collapses cascading schema errors into the few that explain the problem.
    """
    if version:
        from rule_guard import __version__
        typer.echo(f"RuleGuard version {__version__}")
        raise typer.Exit()

    if verbose:
        setup_logging(level="DEBUG")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def cli() -> None:
    """CLI entry point for the console script."""
    app()


if __name__ == "__main__":
    cli()
