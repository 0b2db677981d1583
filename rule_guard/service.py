"""
Rule validation orchestrator.

This is the class that ties all components together:
    1. Structural validation against the rule schema (jsonschema)
    2. Semantic validation against the schema's x-ui tables
    3. Optional line-number annotation from the raw text
    4. Cascade filtering down to actionable errors

Usage:
    ```python
    from rule_guard import RuleValidationService

    service = RuleValidationService()
    result = service.validate_text(raw_text, want_lines=True)

    for error in result.errors:
        print(f"line {error.line_number}: {error.message}")
    ```
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rule_guard.semantic import SemanticValidator
from rule_guard.validation.cascade_filter import filter_cascading_errors
from rule_guard.validation.line_locator import find_line
from rule_guard.validation.models import ErrorType, ValidationError, ValidationResult
from rule_guard.validation.validator import SchemaValidator, load_schema

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schemas" / "rule-schema.json"

INLINE_SCHEMA_FILENAME = "inline"
UNKNOWN_SCHEMA_VERSION = "unknown"


class RuleValidationService:
    """
    Validate rule documents and return triaged errors.

    The service is stateless between calls; one instance can be shared.

    Attributes:
        schema: Rule schema in use
        schema_filename: File name of the schema ("inline" for a dict)
        schema_version: The schema's "version" field
    """

    def __init__(
        self,
        schema: Optional[Dict[str, Any]] = None,
        schema_path: Optional[Path] = None
    ):
        """
        Initialize the validation service.

        Args:
            schema: Rule schema dictionary; takes precedence over schema_path
            schema_path: Path to a rule schema file (defaults to the bundled schema)

        Raises:
            ValueError: If the schema file is missing or not valid JSON
            jsonschema.exceptions.SchemaError: If the schema is not a valid JSON Schema
        """
        if schema is None:
            schema_path = Path(schema_path) if schema_path is not None else DEFAULT_SCHEMA_PATH
            schema = load_schema(schema_path)
            self.schema_filename = schema_path.name
        else:
            self.schema_filename = Path(schema_path).name if schema_path else INLINE_SCHEMA_FILENAME

        self.schema = schema
        self.schema_version = str(schema.get("version", UNKNOWN_SCHEMA_VERSION))

        self._structural = SchemaValidator(schema)
        self._semantic = SemanticValidator.from_schema(schema)

        logger.info(
            f"Loaded rule schema {self.schema_filename} (version {self.schema_version})"
        )

    def validate(
        self,
        document: Any,
        raw_text: Optional[str] = None,
        want_lines: bool = False,
        disable_filter: bool = False
    ) -> ValidationResult:
        """
        Validate a parsed rule document.

        Args:
            document: Parsed rule JSON
            raw_text: Original text, needed for line numbers
            want_lines: Annotate errors with their source line
            disable_filter: Return every raw diagnostic (audit mode)

        Returns:
            ValidationResult: Errors and schema identity
        """
        errors: List[ValidationError] = self._structural.validate(document)
        errors.extend(self._semantic.validate(document))
        raw_count = len(errors)

        if want_lines and raw_text is not None:
            errors = [
                error.with_line_number(
                    find_line(error.path, error.message, error.type, raw_text)
                )
                for error in errors
            ]

        if not disable_filter:
            errors = filter_cascading_errors(errors).filtered_errors

        logger.debug(f"Validation produced {raw_count} raw error(s), reporting {len(errors)}")

        return self._result(errors)

    def validate_text(
        self,
        raw_text: str,
        want_lines: bool = False,
        disable_filter: bool = False
    ) -> ValidationResult:
        """
        Parse and validate rule text.

        A JSON syntax error is reported as a single "json" error at "$"
        rather than raised.
        """
        try:
            document = json.loads(raw_text)
        except json.JSONDecodeError as e:
            logger.debug(f"Rule text is not valid JSON: {e}")
            error = ValidationError(
                type=ErrorType.JSON.value,
                code="JSON_PARSE_ERROR",
                path="$",
                message=f"$: Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
                arguments=(e.msg, e.lineno, e.colno),
                line_number=e.lineno if want_lines else None,
            )
            return self._result([error])

        return self.validate(
            document,
            raw_text=raw_text,
            want_lines=want_lines,
            disable_filter=disable_filter
        )

    def is_valid(self, document: Any) -> bool:
        return self.validate(document).valid

    def _result(self, errors: List[ValidationError]) -> ValidationResult:
        return ValidationResult(
            schema_filename=self.schema_filename,
            schema_version=self.schema_version,
            error_count=len(errors),
            errors=errors,
        )
