"""
Unit tests for error formatting.
"""

import pytest

from rule_guard.validation import ValidationError, format_error_with_context, suggest_fix


class TestSuggestFix:
    """Test fix hints per error type."""

    @pytest.mark.parametrize("error,expected", [
        (ValidationError(type="required", path="$.metadata", arguments=("id",)), "Add the required field 'id'"),
        (ValidationError(type="additionalProperties", path="$", arguments=("rul3eType",)), "unknown field 'rul3eType'"),
        (ValidationError(type="enum", path="$.op", arguments=("AND", "OR")), "'AND', 'OR'"),
        (ValidationError(type="const", path="$.type", arguments=("value",)), "'value'"),
        (ValidationError(type="pattern", path="$.field", arguments=("^[A-Z]+$",)), "^[A-Z]+$"),
        (ValidationError(type="type", path="$.version", arguments=("integer",)), "type integer"),
        (ValidationError(type="oneOf", path="$.definition"), "exactly one"),
        (ValidationError(type="x-ui-validation", path="$.definition.right"), "operator"),
        (ValidationError(type="json", path="$"), "JSON syntax"),
        (ValidationError(type="minItems", path="$.a"), "schema requirements"),
    ])
    def test_suggest_fix(self, error, expected):
        """Test each type has a hint."""
        assert expected in suggest_fix(error)


class TestFormatErrorWithContext:
    """Test detailed error rendering."""

    def test_without_source(self):
        """Test the basic fields."""
        error = ValidationError(type="enum", code="SCHEMA_ENUM", path="$.op", message="$.op: bad", arguments=("AND",))

        text = format_error_with_context(error)

        assert "Validation Error at $.op" in text
        assert "Problem: $.op: bad" in text
        assert "Code: SCHEMA_ENUM" in text
        assert "Hint:" in text

    def test_with_source_context(self):
        """Test surrounding lines are shown with a marker."""
        raw_text = "{\n  \"a\": 1,\n  \"op\": \"XOR\",\n  \"b\": 2\n}"
        error = ValidationError(type="enum", path="$.op", message="$.op: bad", line_number=3)

        text = format_error_with_context(error, raw_text=raw_text, context_lines=1)

        assert "(line 3)" in text
        assert ">    3 |   \"op\": \"XOR\"," in text
        assert "     2 |   \"a\": 1," in text
        assert "5 |" not in text
