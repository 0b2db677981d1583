"""
Diagnostic records shared by every stage of rule validation.

Both producers (the JSON Schema adapter and the semantic validator) emit
ValidationError records of the same shape, so the cascade filter and the line
locator never need to know where a diagnostic came from.

Records are immutable: stages that enrich a record (line numbers) build a copy
with dataclasses.replace().
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ErrorType(str, Enum):
    """
    Diagnostic taxonomy tags.

    The JSON Schema tags mirror the keyword that failed. ONE_OF marks the
    summary record of a failed union ("matched none of N schemas"), which is
    what the cascade filter keys on. Semantic checks use SEMANTIC; JSON
    syntax errors use JSON.
    """

    REQUIRED = "required"
    TYPE = "type"
    ENUM = "enum"
    CONST = "const"
    PATTERN = "pattern"
    ADDITIONAL_PROPERTIES = "additionalProperties"
    ONE_OF = "oneOf"
    SEMANTIC = "x-ui-validation"
    JSON = "json"


# Types that directly explain why a value is wrong
ROOT_CAUSE_TYPES = frozenset({
    ErrorType.ENUM.value,
    ErrorType.CONST.value,
    ErrorType.PATTERN.value,
    ErrorType.ADDITIONAL_PROPERTIES.value,
})

ONE_OF_MARKER = "should be valid to one and only one schema"


@dataclass(frozen=True)
class ValidationError:
    """
    A single diagnostic about a rule document.

    Attributes:
        type: Taxonomy tag (see ErrorType); drives triage priority
        code: Stable opaque identifier of the violated rule
        path: Pointer into the document, "$" for the root
            (e.g. "$.definition.expressions[0].name")
        schema_path: Pointer into the schema naming the constraint that fired
            (e.g. "#/definitions/Condition/required")
        message: Human-readable text
        arguments: Ordered auxiliary values (allowed enum values, property name, ...)
        line_number: 1-based source line, only set when requested
    """

    type: str
    code: Optional[str] = None
    path: Optional[str] = None
    schema_path: Optional[str] = None
    message: Optional[str] = None
    arguments: Tuple[Any, ...] = ()
    line_number: Optional[int] = None

    @property
    def is_root_cause(self) -> bool:
        return self.type in ROOT_CAUSE_TYPES

    @property
    def is_one_of_marker(self) -> bool:
        return self.type == ErrorType.ONE_OF.value

    def with_line_number(self, line_number: Optional[int]) -> "ValidationError":
        return replace(self, line_number=line_number)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used on the wire."""
        data: Dict[str, Any] = {
            "type": self.type,
            "code": self.code,
            "path": self.path,
            "schemaPath": self.schema_path,
            "message": self.message,
            "arguments": list(self.arguments),
        }
        if self.line_number is not None:
            data["lineNumber"] = self.line_number
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationError":
        """
        Build a record from its wire form.

        Accepts both camelCase and snake_case keys so raw dumps from either
        side can be fed back into the filter.
        """
        arguments = data.get("arguments") or ()
        if isinstance(arguments, dict):
            arguments = tuple(arguments.values())
        return cls(
            type=data.get("type") or "",
            code=data.get("code"),
            path=data.get("path"),
            schema_path=data.get("schemaPath", data.get("schema_path")),
            message=data.get("message"),
            arguments=tuple(arguments),
            line_number=data.get("lineNumber", data.get("line_number")),
        )


@dataclass(frozen=True)
class FilterResult:
    """
    Output of the cascade filter.

    Attributes:
        filtered_errors: Errors left after triage
        suppressed_count: original count - len(filtered_errors)
        has_hidden_errors: Reserved flag for callers that want to warn that
            some diagnostics were suppressed; the filter leaves it False
    """

    filtered_errors: List[ValidationError] = field(default_factory=list)
    suppressed_count: int = 0
    has_hidden_errors: bool = False

    def __str__(self) -> str:
        return (
            f"FilterResult[filtered={len(self.filtered_errors)}, "
            f"suppressed={self.suppressed_count}, "
            f"hasHiddenErrors={self.has_hidden_errors}]"
        )


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validating one rule document.

    Attributes:
        schema_filename: File name of the schema used
        schema_version: Version declared by the schema
        error_count: Number of errors reported (after filtering, if enabled)
        errors: Reported errors; treat as a set, order is not significant
    """

    schema_filename: str
    schema_version: str
    error_count: int
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.error_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaFilename": self.schema_filename,
            "schemaVersion": self.schema_version,
            "errorCount": self.error_count,
            "valid": self.valid,
            "errors": [error.to_dict() for error in self.errors],
        }
