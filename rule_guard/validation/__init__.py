"""
Validation layer module.

This module turns raw diagnostics about a rule document into a small,
actionable error list.

Components:
    - models: ValidationError / ValidationResult / FilterResult records
    - validator: JSON Schema adapter built on jsonschema
    - cascade_filter: Collapse union-branch (oneOf) cascades
    - line_locator: Map error paths back to source lines
    - error_formatter: Convert errors to human-readable messages

Validation Flow:
    1. Validate the document against the rule schema with jsonschema
    2. Flatten union-branch failures into one record per diagnostic
    3. Append semantic (x-ui) diagnostics in the same shape
    4. Optionally annotate each record with its source line
    5. Filter cascading errors down to the root causes

Example:
    ```python
    from rule_guard.validation import SchemaValidator, filter_cascading_errors, load_schema

    validator = SchemaValidator(load_schema("rule-schema.json"))
    raw = validator.validate(document)

    result = filter_cascading_errors(raw)
    for error in result.filtered_errors:
        print(f"  - {error.path}: {error.message}")
    print(f"{result.suppressed_count} cascading errors suppressed")
    ```
"""

from rule_guard.validation.models import (
    ErrorType,
    ValidationError,
    ValidationResult,
    FilterResult,
)
from rule_guard.validation.validator import (
    SchemaValidator,
    load_schema,
    format_validation_errors,
)
from rule_guard.validation.cascade_filter import filter_cascading_errors
from rule_guard.validation.line_locator import find_line
from rule_guard.validation.error_formatter import format_error_with_context, suggest_fix

__all__ = [
    "ErrorType",
    "ValidationError",
    "ValidationResult",
    "FilterResult",
    "SchemaValidator",
    "load_schema",
    "format_validation_errors",
    "filter_cascading_errors",
    "find_line",
    "format_error_with_context",
    "suggest_fix",
]
