"""
Semantic validator - business rules checked against the schema's x-ui tables.

JSON Schema can say that an operator is one of a known set, but not that
"between" needs two right operands, or that "contains" makes no sense on a
number. These checks walk the rule tree and report such problems as
ValidationError records of type "x-ui-validation", in the same shape as the
structural errors, so both streams can be merged and filtered together.

The walk is lenient: anything missing or of the wrong shape is skipped and
left to the structural validator.
"""

import logging
from typing import Any, Dict, List, Optional

from rule_guard.semantic.metadata import (
    FUNCTIONS_KEY,
    OPERATORS_KEY,
    SETTINGS_KEY,
    TYPES_KEY,
    SemanticMetadata,
)
from rule_guard.validation.models import ErrorType, ValidationError

logger = logging.getLogger(__name__)


class SemanticValidator:
    """
    Checks operator/type compatibility, function signatures, operator
    cardinality and value sources.

    Attributes:
        metadata: Lookup tables read from the rule schema
    """

    def __init__(self, metadata: SemanticMetadata):
        self.metadata = metadata

    @classmethod
    def from_schema(cls, schema: Dict[str, Any]) -> "SemanticValidator":
        return cls(SemanticMetadata.from_schema(schema))

    def validate(self, document: Any) -> List[ValidationError]:
        """
        Validate a rule document.

        Args:
            document: Parsed rule JSON

        Returns:
            List[ValidationError]: Semantic errors, empty if none
        """
        errors: List[ValidationError] = []
        if not isinstance(document, dict):
            return errors

        structure = document.get("structure")
        definition = document.get("definition")
        if not isinstance(definition, dict):
            return errors

        path = "$.definition"
        if structure == "expression":
            self._check_expression(definition, path, errors)
        elif structure == "condition":
            self._check_condition_node(definition, path, errors)
        elif structure == "case":
            self._check_case(definition, path, errors)

        if errors:
            logger.debug(f"Semantic validation found {len(errors)} error(s)")
        return errors

    # Tree walk

    def _check_case(self, case: Dict[str, Any], path: str, errors: List[ValidationError]) -> None:
        clauses = case.get("whenClauses")
        if isinstance(clauses, list):
            for i, clause in enumerate(clauses):
                if not isinstance(clause, dict):
                    continue
                clause_path = f"{path}.whenClauses[{i}]"
                if "when" in clause:
                    self._check_condition_node(clause["when"], f"{clause_path}.when", errors)
                if "then" in clause:
                    self._check_expression(clause["then"], f"{clause_path}.then", errors)
        if "elseClause" in case:
            self._check_expression(case["elseClause"], f"{path}.elseClause", errors)

    def _check_condition_node(self, node: Any, path: str, errors: List[ValidationError]) -> None:
        if not isinstance(node, dict):
            return
        if "conditions" in node:
            conditions = node["conditions"]
            if isinstance(conditions, list):
                for i, child in enumerate(conditions):
                    self._check_condition_node(child, f"{path}.conditions[{i}]", errors)
            return
        if "operator" in node:
            self._check_condition(node, path, errors)

    def _check_condition(self, condition: Dict[str, Any], path: str, errors: List[ValidationError]) -> None:
        operator = condition.get("operator")
        right = condition.get("right")

        if isinstance(operator, str):
            self._check_cardinality(operator, right, path, errors)
            self._check_condition_operator(operator, condition.get("left"), path, errors)

        if "left" in condition:
            self._check_expression(condition["left"], f"{path}.left", errors)
        if isinstance(right, list):
            for j, operand in enumerate(right):
                self._check_expression(operand, f"{path}.right[{j}]", errors)
        elif isinstance(right, dict):
            self._check_expression(right, f"{path}.right", errors)

    def _check_expression(self, expr: Any, path: str, errors: List[ValidationError]) -> None:
        if not isinstance(expr, dict):
            return
        expr_type = expr.get("type")
        if expr_type == "value":
            self._check_value_source(expr, path, errors)
        elif expr_type == "function":
            self._check_function(expr, path, errors)
        elif expr_type == "expressionGroup":
            self._check_expression_group(expr, path, errors)

    # Checks

    def _check_expression_group(self, group: Dict[str, Any], path: str, errors: List[ValidationError]) -> None:
        return_type = group.get("returnType")
        operators = group.get("operators")

        if isinstance(return_type, str) and isinstance(operators, list) and operators:
            allowed = self.metadata.expression_operators.get(return_type)
            if allowed is None:
                errors.append(_error(
                    "SEMANTIC_UNKNOWN_RETURN_TYPE",
                    f"{path}.returnType",
                    f"#/{TYPES_KEY}",
                    f"Unknown return type '{return_type}' for expression validation",
                    return_type,
                ))
            elif not allowed:
                errors.append(_error(
                    "SEMANTIC_UNSUPPORTED_EXPRESSION_OPERATORS",
                    f"{path}.operators",
                    f"#/{TYPES_KEY}/{return_type}/validExpressionOperators",
                    f"Return type '{return_type}' does not support expression operators",
                    return_type,
                ))
            else:
                for i, operator in enumerate(operators):
                    if not isinstance(operator, str):
                        continue
                    if not self.metadata.allows_expression_operator(return_type, operator):
                        errors.append(_error(
                            "SEMANTIC_INVALID_EXPRESSION_OPERATOR",
                            f"{path}.operators[{i}]",
                            f"#/{TYPES_KEY}/{return_type}/validExpressionOperators",
                            f"Operator '{operator}' is not valid for return type '{return_type}'",
                            operator, return_type, sorted(allowed),
                        ))

        expressions = group.get("expressions")
        if isinstance(expressions, list):
            for i, child in enumerate(expressions):
                self._check_expression(child, f"{path}.expressions[{i}]", errors)

    def _check_function(self, expr: Dict[str, Any], path: str, errors: List[ValidationError]) -> None:
        function = expr.get("function")
        if not isinstance(function, dict) or not isinstance(function.get("name"), str):
            return

        name = function["name"]
        spec = self.metadata.functions.get(name)
        schema_path = f"#/{FUNCTIONS_KEY}/{name}"

        if spec is None:
            errors.append(_error(
                "SEMANTIC_UNKNOWN_FUNCTION",
                f"{path}.function.name",
                f"#/{FUNCTIONS_KEY}",
                f"Unknown function '{name}'",
                name,
            ))
            return

        declared = expr.get("returnType")
        if isinstance(declared, str) and spec.return_type and declared != spec.return_type:
            errors.append(_error(
                "SEMANTIC_FUNCTION_RETURN_TYPE",
                f"{path}.returnType",
                f"{schema_path}/returnType",
                f"Function '{name}' returns '{spec.return_type}' but expression declares '{declared}'",
                name, declared, spec.return_type,
            ))

        args = function.get("args")
        args_path = f"{path}.function.args"

        if spec.dynamic_args:
            count = len(args) if isinstance(args, list) else None
            upper = spec.max_args
            if count is None or count < spec.min_args or (upper is not None and count > upper):
                bounds = f"{spec.min_args} to {upper}" if upper is not None else f"at least {spec.min_args}"
                got = f" but got {count}" if count is not None else ""
                errors.append(_error(
                    "SEMANTIC_ARGUMENT_COUNT",
                    args_path,
                    f"{schema_path}/argSpec",
                    f"Function '{name}' requires {bounds} arguments{got}",
                    name, spec.min_args, upper, count,
                ))
        elif spec.arg_names is not None:
            expected = len(spec.arg_names)
            if not isinstance(args, list) or len(args) != expected:
                got = f" but got {len(args)}" if isinstance(args, list) else ""
                errors.append(_error(
                    "SEMANTIC_ARGUMENT_COUNT",
                    args_path,
                    f"{schema_path}/args",
                    f"Function '{name}' requires {expected} arguments{got}",
                    name, expected, len(args) if isinstance(args, list) else None,
                ))
            else:
                for i, (expected_name, arg) in enumerate(zip(spec.arg_names, args)):
                    actual_name = arg.get("name") if isinstance(arg, dict) else None
                    if expected_name and actual_name and expected_name != actual_name:
                        errors.append(_error(
                            "SEMANTIC_ARGUMENT_NAME",
                            f"{args_path}[{i}].name",
                            f"{schema_path}/args/{i}",
                            f"Argument at position {i} should be named '{expected_name}' but got '{actual_name}'",
                            name, i, expected_name, actual_name,
                        ))

        if isinstance(args, list):
            for i, arg in enumerate(args):
                if isinstance(arg, dict) and "value" in arg:
                    self._check_expression(arg["value"], f"{args_path}[{i}].value", errors)

    def _check_value_source(self, expr: Dict[str, Any], path: str, errors: List[ValidationError]) -> None:
        allowed = self.metadata.value_sources
        source = expr.get("valueSource")
        if not isinstance(source, str) or not allowed or source in allowed:
            return
        errors.append(_error(
            "SEMANTIC_INVALID_VALUE_SOURCE",
            f"{path}.valueSource",
            f"#/{SETTINGS_KEY}/defaultValueSources",
            f"Invalid value source '{source}'. Must be one of: {', '.join(sorted(allowed))}",
            source, sorted(allowed),
        ))

    def _check_cardinality(self, operator: str, right: Any, path: str, errors: List[ValidationError]) -> None:
        spec = self.metadata.operators.get(operator)
        if spec is None:
            return

        right_path = f"{path}.right"
        schema_path = f"#/{OPERATORS_KEY}/{operator}"
        message = None

        if spec.cardinality == 0:
            if right is not None:
                message = f"Operator '{operator}' should have null as right operand (no value expected)"
        elif spec.cardinality == 1:
            if right is None:
                message = f"Operator '{operator}' requires a right operand"
            elif isinstance(right, list):
                message = f"Operator '{operator}' requires a single value, not an array"
        elif spec.cardinality is not None:
            if not isinstance(right, list):
                message = f"Operator '{operator}' requires an array of {spec.cardinality} values"
            elif len(right) != spec.cardinality:
                message = (
                    f"Operator '{operator}' requires exactly {spec.cardinality} values "
                    f"but got {len(right)}"
                )

        if message is not None:
            errors.append(_error(
                "SEMANTIC_OPERATOR_CARDINALITY", right_path, schema_path, message,
                operator, spec.cardinality,
            ))
            return

        if spec.has_range:
            low = spec.min_cardinality or 0
            high = spec.max_cardinality
            bounds = f"{low} to {high}" if high is not None else f"at least {low}"
            if not isinstance(right, list):
                message = f"Operator '{operator}' requires an array of {bounds} values"
            elif len(right) < low or (high is not None and len(right) > high):
                message = f"Operator '{operator}' requires {bounds} values but got {len(right)}"
            if message is not None:
                errors.append(_error(
                    "SEMANTIC_OPERATOR_CARDINALITY", right_path, schema_path, message,
                    operator, low, high,
                ))

    def _check_condition_operator(self, operator: str, left: Any, path: str, errors: List[ValidationError]) -> None:
        return_type = self._expression_return_type(left)
        if return_type is None:
            return
        allowed = self.metadata.condition_operators.get(return_type)
        if allowed is None or operator in allowed:
            return
        errors.append(_error(
            "SEMANTIC_INVALID_CONDITION_OPERATOR",
            f"{path}.operator",
            f"#/{TYPES_KEY}/{return_type}/validConditionOperators",
            f"Operator '{operator}' is not valid for return type '{return_type}'",
            operator, return_type, sorted(allowed),
        ))

    def _expression_return_type(self, expr: Any) -> Optional[str]:
        if not isinstance(expr, dict):
            return None
        if isinstance(expr.get("returnType"), str):
            return expr["returnType"]
        function = expr.get("function")
        if expr.get("type") == "function" and isinstance(function, dict) and isinstance(function.get("name"), str):
            spec = self.metadata.functions.get(function["name"])
            if spec is not None:
                return spec.return_type
        return None


def _error(code: str, path: str, schema_path: str, message: str, *arguments: Any) -> ValidationError:
    return ValidationError(
        type=ErrorType.SEMANTIC.value,
        code=code,
        path=path,
        schema_path=schema_path,
        message=f"{path}: {message}",
        arguments=tuple(arguments),
    )
