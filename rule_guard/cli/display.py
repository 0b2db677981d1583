"""
Rich terminal display utilities for CLI.

Provides formatted output using the Rich library for:
- Error tables with fix hints
- Success/failure indicators
"""

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from rule_guard.validation.error_formatter import suggest_fix
from rule_guard.validation.models import ValidationError, ValidationResult


console = Console()


def print_header(title: str) -> None:
    """Print a formatted header."""
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))
    console.print()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_error_table(errors: List[ValidationError], title: str = "Validation Errors") -> None:
    """
    Print validation errors in a table with a fix hint per error.

    Args:
        errors: Errors to display
        title: Table title
    """
    if not errors:
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Path", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Line", justify="right")
    table.add_column("Message", style="white")
    table.add_column("Hint", style="green")

    for i, error in enumerate(errors, 1):
        table.add_row(
            str(i),
            escape(error.path or "$"),
            error.type,
            str(error.line_number) if error.line_number is not None else "-",
            escape(error.message or ""),
            escape(suggest_fix(error)),
        )

    console.print()
    console.print(table)
    console.print()


def print_result_summary(result: ValidationResult) -> None:
    """Print schema identity and outcome of a validation run."""
    table = Table(title="Validation Summary", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan", width=20)
    table.add_column("Value", style="white", width=30)

    status = Text("✓ Valid", style="green bold") if result.valid else Text("✗ Invalid", style="red bold")
    table.add_row("Status", status)
    table.add_row("Schema", result.schema_filename)
    table.add_row("Schema Version", result.schema_version)
    table.add_row("Errors", str(result.error_count))

    console.print()
    console.print(table)
    console.print()


def print_separator() -> None:
    """Print a visual separator line."""
    console.print("[dim]" + "─" * 70 + "[/dim]")
