"""
CLI command implementations.

This module contains the business logic for each CLI command:
- validate: Validate a rule file against the rule schema
- triage: Run the cascade filter over a saved list of raw errors
"""

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

from rule_guard.service import RuleValidationService
from rule_guard.validation.cascade_filter import filter_cascading_errors
from rule_guard.validation.models import ValidationError

from .display import (
    print_header,
    print_success,
    print_error,
    print_info,
    print_warning,
    print_error_table,
    print_result_summary,
    print_separator,
)


def read_text_file(path: Path, what: str) -> str:
    """
    Read a UTF-8 text file.

    Raises:
        ValueError: If the file doesn't exist or can't be read
    """
    if not path.exists():
        raise ValueError(f"{what} file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValueError(f"Cannot read {what.lower()} file {path}: {e}")


def load_error_records(errors_path: Path) -> List[ValidationError]:
    """
    Load raw error records from a JSON file.

    Accepts either a list of error objects or an object with an "errors"
    list (a saved ValidationResult).

    Raises:
        ValueError: If the file is missing, not JSON, or has no error list
    """
    text = read_text_file(errors_path, "Errors")
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in errors file: {e}")

    if isinstance(data, dict):
        data = data.get("errors")
    if not isinstance(data, list):
        raise ValueError("Errors file must contain a list of error objects")

    return [ValidationError.from_dict(item) for item in data if isinstance(item, dict)]


def validate_command(
    rule_path: Path,
    schema_path: Optional[Path],
    want_lines: bool,
    disable_filter: bool,
    as_json: bool
) -> None:
    """
    Execute the validate command.

    Args:
        rule_path: Path to the rule JSON file
        schema_path: Path to a rule schema (None for the bundled one)
        want_lines: Annotate errors with source line numbers
        disable_filter: Report every raw diagnostic
        as_json: Print the result as JSON instead of tables
    """
    raw_text = read_text_file(rule_path, "Rule")
    service = RuleValidationService(schema_path=schema_path)
    result = service.validate_text(raw_text, want_lines=want_lines, disable_filter=disable_filter)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        if not result.valid:
            raise SystemExit(1)
        return

    print_header("RuleGuard - Validate Rule")
    print_success(f"Loaded rule from: {rule_path}")
    print_info(f"Schema: {result.schema_filename} (version {result.schema_version})")
    if disable_filter:
        print_warning("Cascade filter disabled: showing every raw diagnostic")

    print_separator()
    print_result_summary(result)

    if result.valid:
        print_success("Validation passed!")
    else:
        print_error("Validation failed")
        print_error_table(result.errors)
        raise SystemExit(1)


def triage_command(errors_path: Path, as_json: bool) -> None:
    """
    Execute the triage command.

    Args:
        errors_path: JSON file holding raw error records
        as_json: Print the filter result as JSON instead of tables
    """
    errors = load_error_records(errors_path)
    result = filter_cascading_errors(errors)

    if as_json:
        typer.echo(json.dumps({
            "originalCount": len(errors),
            "suppressedCount": result.suppressed_count,
            "hasHiddenErrors": result.has_hidden_errors,
            "filteredErrors": [error.to_dict() for error in result.filtered_errors],
        }, indent=2))
        return

    print_header("RuleGuard - Triage Errors")
    print_info(f"Loaded {len(errors)} raw error(s) from: {errors_path}")
    print_error_table(result.filtered_errors, title="Kept Errors")
    print_success(
        f"Kept {len(result.filtered_errors)} error(s), suppressed {result.suppressed_count}"
    )
