"""
Semantic validation module.

Checks the business rules a rule schema declares in its x-ui-* extensions
(operator/type compatibility, function signatures, operator cardinality,
value sources) and reports them as ValidationError records.

Example:
    ```python
    from rule_guard.semantic import SemanticValidator

    validator = SemanticValidator.from_schema(schema)
    for error in validator.validate(document):
        print(f"{error.path}: {error.message}")
    ```
"""

from rule_guard.semantic.metadata import FunctionSpec, OperatorSpec, SemanticMetadata
from rule_guard.semantic.validator import SemanticValidator

__all__ = [
    "FunctionSpec",
    "OperatorSpec",
    "SemanticMetadata",
    "SemanticValidator",
]
