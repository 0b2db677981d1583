"""
Error formatter - convert validation errors to user-friendly messages.

This module provides utilities for formatting validation errors in a way
that helps rule authors understand what went wrong and how to fix it.
"""

from typing import Optional

from rule_guard.validation.models import ErrorType, ValidationError


def format_error_with_context(error: ValidationError, raw_text: Optional[str] = None, context_lines: int = 2) -> str:
    """
    Format error with surrounding source context.

    Args:
        error: Validation error
        raw_text: Original rule text; context is shown only when the error
            carries a line number
        context_lines: Number of lines of context to show on each side

    Returns:
        str: Formatted error with context
    """
    location = error.path or "$"
    if error.line_number is not None:
        location += f" (line {error.line_number})"

    lines = [
        f"❌ Validation Error at {location}",
        f"   Problem: {error.message}",
        f"   Type: {error.type}",
    ]

    if error.code:
        lines.append(f"   Code: {error.code}")

    lines.append(f"   Hint: {suggest_fix(error)}")

    if raw_text is not None and error.line_number is not None:
        source = raw_text.splitlines()
        start = max(error.line_number - 1 - context_lines, 0)
        end = min(error.line_number + context_lines, len(source))
        lines.append("")
        for number in range(start, end):
            marker = ">" if number + 1 == error.line_number else " "
            lines.append(f"   {marker} {number + 1:4d} | {source[number]}")

    return "\n".join(lines)


def suggest_fix(error: ValidationError) -> str:
    """
    Suggest how to fix a validation error.

    Args:
        error: Validation error

    Returns:
        str: Suggested fix
    """
    first = error.arguments[0] if error.arguments else None

    if error.type == ErrorType.REQUIRED.value:
        return f"Add the required field '{first}' to {error.path}"

    elif error.type == ErrorType.ADDITIONAL_PROPERTIES.value:
        return f"Remove or rename the unknown field '{first}' in {error.path}"

    elif error.type == ErrorType.ENUM.value:
        allowed = ", ".join(repr(value) for value in error.arguments)
        return f"Use one of: {allowed}"

    elif error.type == ErrorType.CONST.value:
        return f"Set {error.path} to {first!r}"

    elif error.type == ErrorType.PATTERN.value:
        return f"Make {error.path} match the pattern {first}"

    elif error.type == ErrorType.TYPE.value:
        return f"Change {error.path} to type {first}"

    elif error.type == ErrorType.ONE_OF.value:
        return f"Make {error.path} match exactly one of the allowed shapes"

    elif error.type == ErrorType.SEMANTIC.value:
        return "Check the operator, function and value settings for this rule"

    elif error.type == ErrorType.JSON.value:
        return "Fix the JSON syntax"

    else:
        return "Check the schema requirements"
