"""
x-ui metadata - the business rules the rule schema declares but cannot enforce.

The rule schema carries four extension blocks next to its JSON Schema
keywords. They are read once into a SemanticMetadata instance:

    x-ui-types          per return type: validExpressionOperators,
                        validConditionOperators
    x-ui-functions      per function: returnType, and either ordered "args"
                        or dynamicArgs with argSpec.minArgs/maxArgs
    x-ui-operators      per condition operator: cardinality (0/1/2) or
                        minCardinality/maxCardinality
    x-ui-settings       defaultValueSources

Missing blocks load as empty; the validator then skips the matching checks.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

TYPES_KEY = "x-ui-types"
FUNCTIONS_KEY = "x-ui-functions"
OPERATORS_KEY = "x-ui-operators"
SETTINGS_KEY = "x-ui-settings"

# Expression operators may be declared by symbol or by name
OPERATOR_SYMBOL_NAMES = {
    "+": "add",
    "-": "subtract",
    "*": "multiply",
    "/": "divide",
    "&": "concat",
}


@dataclass(frozen=True)
class FunctionSpec:
    """
    Declared signature of a rule function.

    Attributes:
        name: Function name (e.g., "MATH.ADD")
        return_type: Return type the function produces
        arg_names: Ordered argument names for fixed-argument functions
        dynamic_args: Whether the function takes a variable argument count
        min_args: Lower bound for dynamic functions
        max_args: Upper bound for dynamic functions, None if unbounded
    """

    name: str
    return_type: Optional[str] = None
    arg_names: Optional[Tuple[Optional[str], ...]] = None
    dynamic_args: bool = False
    min_args: int = 0
    max_args: Optional[int] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "FunctionSpec":
        arg_spec = data.get("argSpec") or {}
        args = data.get("args")
        arg_names = None
        if isinstance(args, list):
            arg_names = tuple(
                arg.get("name") if isinstance(arg, dict) else None for arg in args
            )
        return cls(
            name=name,
            return_type=data.get("returnType"),
            arg_names=arg_names,
            dynamic_args=bool(data.get("dynamicArgs", False)),
            min_args=int(arg_spec.get("minArgs", 0)),
            max_args=arg_spec.get("maxArgs"),
        )


@dataclass(frozen=True)
class OperatorSpec:
    """How many right-hand operands a condition operator takes."""

    name: str
    cardinality: Optional[int] = None
    min_cardinality: Optional[int] = None
    max_cardinality: Optional[int] = None

    @property
    def has_range(self) -> bool:
        return self.min_cardinality is not None or self.max_cardinality is not None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "OperatorSpec":
        return cls(
            name=name,
            cardinality=data.get("cardinality"),
            min_cardinality=data.get("minCardinality"),
            max_cardinality=data.get("maxCardinality"),
        )


@dataclass(frozen=True)
class SemanticMetadata:
    """
    Semantic rule tables loaded from a rule schema.

    Attributes:
        expression_operators: Return type -> allowed expression operators
        condition_operators: Return type -> allowed condition operators
        functions: Function name -> FunctionSpec
        operators: Condition operator -> OperatorSpec
        value_sources: Allowed valueSource values (empty means unrestricted)
    """

    expression_operators: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    condition_operators: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    functions: Dict[str, FunctionSpec] = field(default_factory=dict)
    operators: Dict[str, OperatorSpec] = field(default_factory=dict)
    value_sources: FrozenSet[str] = frozenset()

    @classmethod
    def from_schema(cls, schema: Dict[str, Any]) -> "SemanticMetadata":
        """
        Read the x-ui extension blocks of a rule schema.

        Args:
            schema: Parsed rule schema

        Returns:
            SemanticMetadata: Lookup tables for the semantic validator
        """
        types = schema.get(TYPES_KEY) or {}
        functions = schema.get(FUNCTIONS_KEY) or {}
        operators = schema.get(OPERATORS_KEY) or {}
        settings = schema.get(SETTINGS_KEY) or {}

        expression_operators = {}
        condition_operators = {}
        for return_type, config in types.items():
            if "validExpressionOperators" in config:
                expression_operators[return_type] = frozenset(config["validExpressionOperators"])
            if "validConditionOperators" in config:
                condition_operators[return_type] = frozenset(config["validConditionOperators"])

        return cls(
            expression_operators=expression_operators,
            condition_operators=condition_operators,
            functions={
                name: FunctionSpec.from_dict(name, data) for name, data in functions.items()
            },
            operators={
                name: OperatorSpec.from_dict(name, data) for name, data in operators.items()
            },
            value_sources=frozenset(settings.get("defaultValueSources") or ()),
        )

    def allows_expression_operator(self, return_type: str, operator: str) -> bool:
        if not isinstance(operator, str):
            return False
        allowed = self.expression_operators.get(return_type, frozenset())
        return operator in allowed or OPERATOR_SYMBOL_NAMES.get(operator) in allowed
