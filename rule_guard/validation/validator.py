"""
JSON Schema adapter - turn jsonschema output into ValidationError records.

jsonschema reports a failed oneOf/anyOf as one error whose `context` holds the
failures of every alternative. This adapter flattens that tree so each branch
failure becomes its own record next to the union's summary record, rebuilds a
"#/definitions/..." schema pointer for every record (following local $refs)
so the cascade filter can tell which union branch a failure came from, and
splits multi-property required/additionalProperties errors into one record
per property.

Usage:
    ```python
    from rule_guard.validation import SchemaValidator, load_schema

    validator = SchemaValidator(load_schema(path))
    for error in validator.iter_errors(document):
        print(f"{error.path} [{error.type}] {error.message}")
    ```
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import jsonschema
from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as JsonSchemaError

from rule_guard.validation.models import ErrorType, ONE_OF_MARKER, ValidationError

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def load_schema(schema_path: Path) -> Dict[str, Any]:
    """
    Load and parse a JSON schema file.

    Args:
        schema_path: Path to schema JSON file

    Returns:
        Parsed schema dictionary

    Raises:
        ValueError: If file doesn't exist or isn't valid JSON
    """
    schema_path = Path(schema_path)
    if not schema_path.exists():
        raise ValueError(f"Schema file not found: {schema_path}")

    try:
        with open(schema_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in schema file {schema_path}: {e}")


class SchemaValidator:
    """
    Structural validator for rule documents.

    Attributes:
        schema: The JSON Schema in use
    """

    def __init__(self, schema: Dict[str, Any]):
        """
        Args:
            schema: JSON Schema dictionary

        Raises:
            jsonschema.exceptions.SchemaError: If the schema itself is invalid
        """
        self.schema = schema
        validator_cls = jsonschema.validators.validator_for(schema, default=Draft7Validator)
        validator_cls.check_schema(schema)
        self._validator = validator_cls(schema)
        logger.debug(f"SchemaValidator initialized with {validator_cls.__name__}")

    def iter_errors(self, document: Any) -> Iterator[ValidationError]:
        """Yield every diagnostic for a document, union branches included."""
        expanded: Set[Tuple[str, str]] = set()
        for error in self._validator.iter_errors(document):
            for leaf in _flatten(error):
                yield from self._convert(leaf, expanded)

    def validate(self, document: Any) -> List[ValidationError]:
        return list(self.iter_errors(document))

    def _convert(
        self,
        error: JsonSchemaError,
        expanded: Set[Tuple[str, str]]
    ) -> Iterator[ValidationError]:
        path = format_path(error.absolute_path)
        schema_path = schema_pointer(self.schema, error.absolute_schema_path)
        keyword = str(error.validator)
        code = error_code(keyword)

        if keyword == ErrorType.REQUIRED.value:
            # jsonschema yields one error per missing property; expand once per object
            key = (path, schema_path)
            if key in expanded:
                return
            expanded.add(key)
            instance = error.instance if isinstance(error.instance, dict) else {}
            for prop in error.validator_value:
                if prop not in instance:
                    yield ValidationError(
                        type=keyword,
                        code=code,
                        path=path,
                        schema_path=schema_path,
                        message=f"{_child(path, prop)}: is missing but it is required",
                        arguments=(prop,),
                    )
            return

        if keyword == ErrorType.ADDITIONAL_PROPERTIES.value:
            for prop in _unexpected_properties(error):
                yield ValidationError(
                    type=keyword,
                    code=code,
                    path=path,
                    schema_path=schema_path,
                    message=(
                        f"{_child(path, prop)}: is not defined in the schema and "
                        f"the schema does not allow additional properties"
                    ),
                    arguments=(prop,),
                )
            return

        if keyword == ErrorType.ONE_OF.value:
            valid_count = _count_valid_branches(error)
            yield ValidationError(
                type=keyword,
                code=code,
                path=path,
                schema_path=schema_path,
                message=f"{path}: {ONE_OF_MARKER}, but {valid_count} are valid",
                arguments=(valid_count,),
            )
            return

        yield ValidationError(
            type=keyword,
            code=code,
            path=path,
            schema_path=schema_path,
            message=f"{path}: {error.message}",
            arguments=_arguments(keyword, error.validator_value),
        )


def format_path(parts: Iterable[Any]) -> str:
    """
    Render a jsonschema path deque as "$.a.b[0].c".

    Args:
        parts: Property names and array indices from the document root

    Returns:
        str: Dotted path, "$" for the root
    """
    path = "$"
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def schema_pointer(schema: Dict[str, Any], parts: Iterable[Any]) -> str:
    """
    Rebuild a "#/..." pointer for a schema path, following local $refs.

    jsonschema drops "$ref" from the schema paths it reports. When the next
    key is not present in the current node but the node is a local $ref, the
    reference is resolved and the pointer restarts from it, so an error inside
    a referenced definition reads "#/definitions/<Name>/...".
    """
    node: Any = schema
    pointer = "#"
    for part in parts:
        while isinstance(node, dict) and "$ref" in node and part not in node:
            ref = node["$ref"]
            target = _resolve_local_ref(schema, ref)
            if target is None:
                break
            node, pointer = target, ref
        try:
            node = node[part]
        except (KeyError, IndexError, TypeError):
            node = None
        pointer = f"{pointer}/{part}"
    return pointer


def error_code(keyword: str) -> str:
    """"additionalProperties" -> "SCHEMA_ADDITIONAL_PROPERTIES"."""
    return "SCHEMA_" + _CAMEL_RE.sub("_", keyword).upper()


def format_validation_errors(errors: List[ValidationError]) -> str:
    """
    Format validation errors as human-readable string.

    Args:
        errors: List of validation errors

    Returns:
        str: Formatted error message

    Example:
        ```python
        print(format_validation_errors(result.errors))
        # Validation failed with 1 error(s):
        #
        #   1. At $.returnType (line 3): $.returnType: 'INVALID' is not one of [...]
        #      Type: enum
        ```
    """
    if not errors:
        return "No validation errors"

    lines = [f"Validation failed with {len(errors)} error(s):"]

    for i, error in enumerate(errors, 1):
        location = error.path or "$"
        if error.line_number is not None:
            location += f" (line {error.line_number})"
        lines.append(f"\n  {i}. At {location}: {error.message}")
        lines.append(f"     Type: {error.type}")

    return "\n".join(lines)


def _flatten(error: JsonSchemaError) -> Iterator[JsonSchemaError]:
    yield error
    for child in error.context or ():
        yield from _flatten(child)


def _child(path: str, prop: str) -> str:
    return f"{path}.{prop}"


def _unexpected_properties(error: JsonSchemaError) -> List[str]:
    instance = error.instance
    if not isinstance(instance, dict):
        return []
    schema = error.schema if isinstance(error.schema, dict) else {}
    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return [
        prop for prop in instance
        if prop not in properties
        and not any(re.search(pattern, prop) for pattern in patterns)
    ]


def _count_valid_branches(error: JsonSchemaError) -> int:
    branches = error.validator_value if isinstance(error.validator_value, list) else []
    failed = {
        child.relative_schema_path[0]
        for child in error.context or ()
        if child.relative_schema_path
    }
    return max(len(branches) - len(failed), 0)


def _arguments(keyword: str, validator_value: Any) -> Tuple[Any, ...]:
    if keyword == ErrorType.ENUM.value and isinstance(validator_value, list):
        return tuple(validator_value)
    return (validator_value,)


def _resolve_local_ref(schema: Dict[str, Any], ref: Any) -> Optional[Any]:
    if not isinstance(ref, str) or not ref.startswith("#"):
        return None
    node: Any = schema
    for token in ref[1:].split("/"):
        if not token:
            continue
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, list) and token.isdigit():
            index = int(token)
            node = node[index] if index < len(node) else None
        elif isinstance(node, dict):
            node = node.get(token)
        else:
            return None
        if node is None:
            return None
    return node
