"""
Unit tests for the cascade filter.
"""

import pytest

from rule_guard.validation.cascade_filter import (
    MAX_REQUIRED_PER_PATH,
    deduplicate_branches,
    deduplicate_by_message,
    filter_cascading_errors,
    filter_one_of_cascade,
    most_actionable,
    schema_definition,
    select_actionable,
    suppress_redundant_one_of,
    suppress_redundant_parents,
)
from rule_guard.validation.models import ONE_OF_MARKER, ValidationError


def make_error(error_type, path, schema_path=None, message=None, **kwargs):
    """Build an error with a unique default message."""
    if message is None:
        message = f"{path}: {error_type} from {schema_path} {kwargs.pop('tag', '')}".strip()
    return ValidationError(
        type=error_type,
        path=path,
        schema_path=schema_path,
        message=message,
        **kwargs
    )


def one_of(path, schema_path="#/properties/x/oneOf"):
    return make_error("oneOf", path, schema_path, message=f"{path}: {ONE_OF_MARKER}, but 0 are valid")


class TestDeduplicateByMessage:
    """Pass 1: message identity."""

    def test_identical_messages_collapse_to_first(self):
        """Test that the first error of a message is kept."""
        first = make_error("required", "$.a", message="same text")
        second = make_error("enum", "$.b", message="same text")

        assert deduplicate_by_message([first, second]) == [first]

    def test_none_messages_are_never_duplicates(self):
        """Test that message-less errors are all kept."""
        errors = [
            ValidationError(type="required", path="$.a"),
            ValidationError(type="required", path="$.a"),
        ]

        assert len(deduplicate_by_message(errors)) == 2

    def test_order_preserved(self):
        """Test first-seen order is kept."""
        a = make_error("type", "$.a")
        b = make_error("type", "$.b")
        c = make_error("type", "$.c")

        assert deduplicate_by_message([a, b, a, c]) == [a, b, c]


class TestSchemaDefinition:
    """Test schema definition extraction."""

    @pytest.mark.parametrize("schema_path,expected", [
        ("#/definitions/Condition/required", "#/definitions/Condition"),
        ("#/definitions/ConditionGroup/properties/conjunction/enum", "#/definitions/ConditionGroup"),
        ("#/definitions/Condition", "#/definitions/Condition"),
        ("#/$defs/Expression/oneOf", "#/$defs/Expression"),
        ("#/properties/returnType/enum", ""),
        ("#/required", ""),
        ("", ""),
        (None, ""),
    ])
    def test_schema_definition(self, schema_path, expected):
        """Test truncation after the definition name."""
        assert schema_definition(schema_path) == expected


class TestDeduplicateBranches:
    """Pass 2: one path reported by several definitions."""

    def test_single_definition_kept_unchanged(self):
        """Test that an unambiguous path keeps all its errors."""
        errors = [
            make_error("required", "$.x", "#/definitions/A/required", tag="1"),
            make_error("type", "$.x", "#/definitions/A/properties/b/type"),
            make_error("required", "$.x", "#/definitions/A/required", tag="2"),
        ]

        assert deduplicate_branches(errors) == errors

    def test_root_causes_win_across_definitions(self):
        """Test that root-cause errors are kept, uncapped."""
        const_a = make_error("const", "$.x", "#/definitions/A/properties/type/const")
        const_b = make_error("const", "$.x", "#/definitions/B/properties/type/const")
        errors = [
            make_error("required", "$.x", "#/definitions/A/required"),
            const_a,
            make_error("required", "$.x", "#/definitions/B/required"),
            const_b,
        ]

        assert deduplicate_branches(errors) == [const_a, const_b]

    def test_required_capped_across_definitions(self):
        """Test that at most three required errors survive."""
        errors = [
            make_error("required", "$.x", f"#/definitions/{name}/required", tag=str(i))
            for i, name in enumerate(["A", "B", "A", "B", "A"])
        ]

        result = deduplicate_branches(errors)

        assert result == errors[:MAX_REQUIRED_PER_PATH]

    def test_first_definition_otherwise(self):
        """Test fallback to the first definition's errors."""
        a1 = make_error("type", "$.x", "#/definitions/A/type")
        b1 = make_error("type", "$.x", "#/definitions/B/type")
        a2 = make_error("minItems", "$.x", "#/definitions/A/minItems")

        assert deduplicate_branches([a1, b1, a2]) == [a1, a2]

    def test_paths_handled_independently(self):
        """Test that grouping is per exact path."""
        x = make_error("required", "$.x", "#/definitions/A/required")
        y = make_error("required", "$.y", "#/definitions/B/required")

        assert deduplicate_branches([x, y]) == [x, y]


class TestSelectActionable:
    """Pass 3: per-path selection."""

    def test_single_error_kept(self):
        """Test a lone error passes through."""
        error = make_error("required", "$.a")

        assert select_actionable([error]) == [error]

    def test_priority_enum_over_required(self):
        """Test enum beats required without a oneOf marker."""
        required = make_error("required", "$.a")
        enum = make_error("enum", "$.a")

        assert select_actionable([required, enum]) == [enum]

    def test_priority_pattern_over_type(self):
        """Test pattern beats type."""
        type_error = make_error("type", "$.a")
        pattern = make_error("pattern", "$.a")

        assert select_actionable([type_error, pattern]) == [pattern]

    def test_unknown_types_keep_first(self):
        """Test fallback to the first error."""
        first = make_error("minItems", "$.a")
        second = make_error("maxLength", "$.a")

        assert select_actionable([first, second]) == [first]

    def test_one_of_group_keeps_root_causes(self):
        """Test a oneOf group with root causes keeps only those."""
        enum = make_error("enum", "$.a")
        pattern = make_error("pattern", "$.a")
        errors = [one_of("$.a"), make_error("required", "$.a"), enum, pattern]

        assert select_actionable(errors) == [enum, pattern]

    def test_one_of_group_defers_to_child_root_cause(self):
        """Test only the marker is kept when a descendant has a root cause."""
        marker = one_of("$.a")
        child = make_error("enum", "$.a.b")
        errors = [marker, make_error("required", "$.a"), child]

        assert select_actionable(errors) == [marker, child]

    def test_one_of_group_keeps_three_required(self):
        """Test legitimate required errors are capped."""
        required = [make_error("required", "$.a", tag=str(i)) for i in range(5)]
        errors = [one_of("$.a")] + required

        assert select_actionable(errors) == required[:3]

    def test_one_of_group_keeps_marker_last(self):
        """Test the marker is kept when nothing better exists."""
        marker = one_of("$.a")

        assert select_actionable([marker, make_error("type", "$.a")]) == [marker]

    def test_null_path_grouped_as_empty(self):
        """Test errors without a path share one group."""
        required = ValidationError(type="required", message="m1")
        enum = ValidationError(type="enum", message="m2")

        assert select_actionable([required, enum]) == [enum]


class TestFilterOneOfCascade:
    """Test the oneOf-cascade rule directly."""

    def test_child_root_cause_without_marker_keeps_nothing(self):
        """Test required errors are dropped when a child explains the defect."""
        errors = [make_error("required", "$.a"), make_error("type", "$.a")]

        assert filter_one_of_cascade(errors, child_has_root_cause=True) == []

    def test_fallback_to_most_actionable(self):
        """Test the last fallback without marker or required errors."""
        type_error = make_error("type", "$.a")
        errors = [make_error("minimum", "$.a"), type_error]

        assert filter_one_of_cascade(errors, child_has_root_cause=False) == [type_error]


class TestMostActionable:
    """Test priority order."""

    def test_full_order(self):
        """Test enum > const > pattern > additionalProperties > type > required."""
        ordered = ["enum", "const", "pattern", "additionalProperties", "type", "required"]
        errors = [make_error(t, "$.a") for t in reversed(ordered)]

        for expected in ordered:
            best = most_actionable(errors)
            assert best.type == expected
            errors = [e for e in errors if e is not best]


class TestSuppressRedundantOneOf:
    """Pass 4: global oneOf/property suppression."""

    def test_additional_properties_narrows_set(self):
        """Test only property-level evidence survives an unknown property."""
        additional = make_error("additionalProperties", "$.y")
        required = make_error("required", "$.w")
        errors = [
            additional,
            make_error("enum", "$.z"),
            make_error("const", "$.z"),
            required,
            one_of("$.v"),
        ]

        assert suppress_redundant_one_of(errors) == [additional, required]

    def test_one_of_dropped_when_specific_error_exists(self):
        """Test generic summaries go once a cause is known."""
        type_error = make_error("type", "$.b")

        assert suppress_redundant_one_of([one_of("$.a"), type_error]) == [type_error]

    def test_only_one_of_errors_kept(self):
        """Test the set is never emptied."""
        errors = [one_of("$.a"), one_of("$.b")]

        assert suppress_redundant_one_of(errors) == errors


class TestSuppressRedundantParents:
    """Pass 5: parent/child specificity."""

    def test_child_root_cause_beats_parent(self):
        """Test a parent const is dropped for a child enum."""
        child = make_error("enum", "$.a.b")

        assert suppress_redundant_parents([make_error("const", "$.a"), child]) == [child]

    def test_array_child(self):
        """Test "[" counts as a descendant separator."""
        child = make_error("pattern", "$.a[0]")

        assert suppress_redundant_parents([make_error("enum", "$.a"), child]) == [child]

    def test_parent_required_always_kept(self):
        """Test required errors describe the parent itself."""
        errors = [make_error("required", "$.a"), make_error("enum", "$.a.b")]

        assert suppress_redundant_parents(errors) == errors

    def test_parent_kept_without_root_cause_child(self):
        """Test a parent root cause is kept when the child is not a root cause."""
        errors = [make_error("const", "$.a"), make_error("type", "$.a.b")]

        assert suppress_redundant_parents(errors) == errors

    def test_sibling_prefix_is_not_descendant(self):
        """Test "$.ab" is not a child of "$.a"."""
        errors = [make_error("const", "$.a"), make_error("enum", "$.ab")]

        assert suppress_redundant_parents(errors) == errors


class TestFilterCascadingErrors:
    """Test the composed filter."""

    @pytest.mark.parametrize("errors", [None, []])
    def test_empty_input(self, errors):
        """Test empty input gives an empty result."""
        result = filter_cascading_errors(errors)

        assert result.filtered_errors == []
        assert result.suppressed_count == 0
        assert result.has_hidden_errors is False

    def test_root_cause_wins_over_cascade(self):
        """Test a oneOf marker and an enum at one path keep only the enum."""
        enum = make_error("enum", "$.x", "#/definitions/X/enum")

        result = filter_cascading_errors([one_of("$.x"), enum])

        assert result.filtered_errors == [enum]
        assert result.suppressed_count == 1

    def test_child_beats_parent(self):
        """Test a const at $.a is dropped for an enum at $.a.b."""
        child = make_error("enum", "$.a.b")

        result = filter_cascading_errors([make_error("const", "$.a"), child])

        assert result.filtered_errors == [child]

    def test_additional_properties_dominance(self):
        """Test an unknown property outranks enum and oneOf errors."""
        additional = make_error("additionalProperties", "$.y", "#/additionalProperties")
        errors = [additional, make_error("enum", "$.y.z"), one_of("$.y")]

        result = filter_cascading_errors(errors)

        assert result.filtered_errors == [additional]
        assert result.suppressed_count == 2

    def test_priority_law(self):
        """Test enum is kept over required at one path."""
        enum = make_error("enum", "$.p")

        result = filter_cascading_errors([make_error("required", "$.p"), enum])

        assert result.filtered_errors == [enum]

    def test_typo_in_discriminator(self):
        """Test 15 branch errors collapse to the branches' const errors."""
        errors = [one_of("$.c", "#/definitions/ConditionGroup/properties/conditions/items/oneOf")]
        errors.append(make_error("const", "$.c", "#/definitions/Condition/properties/type/const"))
        errors.append(make_error("const", "$.c", "#/definitions/ConditionGroup/properties/type/const"))
        for name in ["Condition", "ConditionGroup"]:
            for i in range(6):
                errors.append(make_error("required", "$.c", f"#/definitions/{name}/required", tag=str(i)))
        assert len(errors) == 15

        result = filter_cascading_errors(errors)

        assert 1 <= len(result.filtered_errors) <= 2
        assert all(e.type == "const" for e in result.filtered_errors)
        assert result.suppressed_count >= 13

    def test_missing_field_without_ambiguity(self):
        """Test 11 errors reduce to the legitimate required error."""
        legitimate = make_error("required", "$.d", "#/definitions/ValueExpression/required", tag="value")
        errors = [one_of("$.d", "#/definitions/Expression/oneOf"), legitimate]
        for i in range(9):
            errors.append(make_error("required", "$.d", "#/definitions/FieldExpression/required", tag=str(i)))
        assert len(errors) == 11

        result = filter_cascading_errors(errors)

        assert result.filtered_errors == [legitimate]
        assert result.suppressed_count == 10

    def test_conservation(self):
        """Test suppressed + kept == original."""
        errors = [
            one_of("$.a"),
            make_error("required", "$.a"),
            make_error("required", "$.a", message="$.a: duplicate"),
            make_error("required", "$.a", message="$.a: duplicate"),
            make_error("enum", "$.a.b"),
            make_error("type", "$.c"),
            ValidationError(type="required"),
        ]

        result = filter_cascading_errors(errors)

        assert result.suppressed_count + len(result.filtered_errors) == len(errors)

    def test_non_empty_when_input_non_empty(self):
        """Test no error set is fully erased."""
        result = filter_cascading_errors([one_of("$.a"), one_of("$.a.b")])

        assert len(result.filtered_errors) > 0

    @pytest.mark.parametrize("errors", [
        [one_of("$.x"), make_error("enum", "$.x", "#/definitions/X/enum")],
        [make_error("const", "$.a"), make_error("enum", "$.a.b")],
        [make_error("additionalProperties", "$.y"), make_error("enum", "$.y.z"), one_of("$.y")],
        [make_error("required", "$.a"), make_error("enum", "$.a.b"), make_error("type", "$.c")],
    ])
    def test_idempotence(self, errors):
        """Test filtering a filtered set suppresses nothing more."""
        once = filter_cascading_errors(errors)
        twice = filter_cascading_errors(once.filtered_errors)

        assert twice.suppressed_count == 0
        assert twice.filtered_errors == once.filtered_errors

    def test_marker_group_keeps_every_root_cause_once(self):
        """Test a oneOf group keeps all its root causes, then a plain group keeps one.

        The first run drops the summary and keeps both root causes. With the
        summary gone, a second run sees an ordinary multi-error path and keeps
        only the highest-priority error, so this input is not a fixed point.
        """
        errors = [one_of("$.x"), make_error("const", "$.x"), make_error("enum", "$.x")]

        once = filter_cascading_errors(errors)
        twice = filter_cascading_errors(once.filtered_errors)

        assert [e.type for e in once.filtered_errors] == ["const", "enum"]
        assert [e.type for e in twice.filtered_errors] == ["enum"]
        assert twice.suppressed_count == 1

    def test_filter_result_str(self):
        """Test the summary string."""
        result = filter_cascading_errors([one_of("$.x"), make_error("enum", "$.x")])

        assert "suppressed=1" in str(result)
