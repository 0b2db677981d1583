"""
Command-line interface module.

This module provides a rich terminal interface for RuleGuard using Typer and Rich.

Commands:
    - validate: Validate a rule file and show actionable errors
    - triage: Run the cascade filter over saved raw errors

Features:
    - Error table with path, type, line and a fix hint
    - JSON output for editors and scripts
    - Raw (unfiltered) mode to audit suppression decisions

Example Usage:
    ```bash
    # Validate with line numbers
    rule-guard validate --rule rule.json

    # Every raw diagnostic, as JSON
    rule-guard validate --rule rule.json --no-filter --json

    # Re-run triage on a saved error dump
    rule-guard triage --errors raw-errors.json
    ```
"""

from .main import app

__all__ = ["app"]
