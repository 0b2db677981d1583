"""
RuleGuard: Actionable Validation Errors for Business Rule JSON

RuleGuard validates business rules (boolean/arithmetic JSON trees) against a
JSON Schema contract plus semantic x-ui rules, then collapses the cascade of
redundant diagnostics that union-type (oneOf) checking produces into the few
errors that tell the author what to change.

Key Features:
    - Structural validation with jsonschema, union branches flattened
    - Semantic checks: operator/type compatibility, function arity, cardinality
    - Five-pass cascade filter that keeps root causes and drops side effects
    - Source line numbers for editor-style error display

Quick Start:
    ```python
    from rule_guard import RuleValidationService

    service = RuleValidationService()
    result = service.validate_text(open("rule.json").read(), want_lines=True)

    if not result.valid:
        for error in result.errors:
            print(f"line {error.line_number}: {error.message}")
    ```

Architecture:
    1. Schema Adapter: jsonschema errors -> ValidationError records
    2. Semantic Validator: x-ui tables -> ValidationError records
    3. Line Locator: error path -> source line
    4. Cascade Filter: raw diagnostics -> actionable errors
    5. Service: wires the above into one ValidationResult
"""

__version__ = "0.1.0"

# Main API exports - these are the primary user-facing classes
from rule_guard.api import (  # noqa: F401
    RuleValidationService,
    ValidationError,
    ValidationResult,
    FilterResult,
    filter_cascading_errors,
    find_line,
)

__all__ = [
    "RuleValidationService",
    "ValidationError",
    "ValidationResult",
    "FilterResult",
    "filter_cascading_errors",
    "find_line",
]
