"""
Cascade filter - collapse redundant schema diagnostics into actionable ones.

When a value violates a oneOf (union) constraint, the validator re-reports the
same author mistake once per failed alternative, plus one generic
"should be valid to one and only one schema" summary per enclosing path. A
single typo in a discriminator easily turns into 10-16 diagnostics.

The filter runs five pure passes, each taking the previous pass's output:

    1. deduplicate_by_message      identical message text = same diagnostic
    2. deduplicate_branches        one path reported by several union branches
    3. select_actionable           keep the most actionable error(s) per path
    4. suppress_redundant_one_of   drop generic oneOf summaries / wrong-branch noise
    5. suppress_redundant_parents  a specific child error beats its parent

Usage:
    ```python
    from rule_guard.validation import filter_cascading_errors

    result = filter_cascading_errors(errors)
    print(f"kept {len(result.filtered_errors)}, suppressed {result.suppressed_count}")
    ```
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

from rule_guard.validation.models import (
    ErrorType,
    FilterResult,
    ROOT_CAUSE_TYPES,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most actionable first; anything else falls back to the first error of the group
PRIORITY_ORDER = (
    ErrorType.ENUM.value,
    ErrorType.CONST.value,
    ErrorType.PATTERN.value,
    ErrorType.ADDITIONAL_PROPERTIES.value,
    ErrorType.TYPE.value,
    ErrorType.REQUIRED.value,
)

# Types that survive when an additionalProperties error is present anywhere
PROPERTY_EVIDENCE_TYPES = frozenset({
    ErrorType.ADDITIONAL_PROPERTIES.value,
    ErrorType.REQUIRED.value,
    ErrorType.PATTERN.value,
    ErrorType.TYPE.value,
})

MAX_REQUIRED_PER_PATH = 3

_DEFINITION_MARKERS = ("/definitions/", "/$defs/")


def filter_cascading_errors(errors: Optional[Sequence[ValidationError]]) -> FilterResult:
    """
    Reduce a merged diagnostic list to the errors that explain each distinct problem.

    Args:
        errors: Structural and semantic diagnostics for one validation run

    Returns:
        FilterResult: Kept errors and how many were suppressed

    Example:
        ```python
        errors = [
            ValidationError(type="oneOf", path="$.x", message="$.x: should be valid to one and only one schema, but 0 are valid"),
            ValidationError(type="enum", path="$.x", message="$.x: 'AN' is not one of ['AND', 'OR']"),
        ]
        result = filter_cascading_errors(errors)
        assert [e.type for e in result.filtered_errors] == ["enum"]
        assert result.suppressed_count == 1
        ```
    """
    if not errors:
        return FilterResult(filtered_errors=[], suppressed_count=0)

    original_count = len(errors)

    deduplicated = deduplicate_by_message(errors)
    across_branches = deduplicate_branches(deduplicated)
    actionable = select_actionable(across_branches)
    without_one_of = suppress_redundant_one_of(actionable)
    filtered = suppress_redundant_parents(without_one_of)

    logger.debug(
        f"Cascade filter passes: {original_count} -> {len(deduplicated)} -> "
        f"{len(across_branches)} -> {len(actionable)} -> {len(without_one_of)} -> {len(filtered)}"
    )

    suppressed = original_count - len(filtered)
    if suppressed:
        logger.info(f"Suppressed {suppressed} of {original_count} cascading errors")

    return FilterResult(filtered_errors=filtered, suppressed_count=suppressed)


def deduplicate_by_message(errors: Sequence[ValidationError]) -> List[ValidationError]:
    """
    Pass 1: keep the first error for each message text.

    Errors without a message are never considered duplicates of each other.
    """
    seen: Set[str] = set()
    result = []
    for error in errors:
        if error.message is None:
            result.append(error)
            continue
        if error.message in seen:
            continue
        seen.add(error.message)
        result.append(error)
    return result


def deduplicate_branches(errors: Sequence[ValidationError]) -> List[ValidationError]:
    """
    Pass 2: resolve paths that were reported by more than one schema definition.

    A path whose errors all come from one definition is unambiguous and kept
    as is. Errors from several definitions at one path mean a union branch
    mismatch; keep root-cause errors if any, else up to three required errors,
    else the first definition's errors.
    """
    result = []
    for path_errors in _group_by_path(errors).values():
        by_definition: Dict[str, List[ValidationError]] = {}
        for error in path_errors:
            by_definition.setdefault(schema_definition(error.schema_path), []).append(error)

        if len(by_definition) == 1:
            result.extend(path_errors)
            continue

        root_causes = [e for e in path_errors if e.is_root_cause]
        if root_causes:
            result.extend(root_causes)
            continue

        required = [e for e in path_errors if e.type == ErrorType.REQUIRED.value]
        if required:
            result.extend(required[:MAX_REQUIRED_PER_PATH])
            continue

        result.extend(next(iter(by_definition.values())))
    return result


def select_actionable(errors: Sequence[ValidationError]) -> List[ValidationError]:
    """
    Pass 3: per path, keep what tells the author what to change.

    Paths carrying a oneOf summary go through the oneOf-cascade rule; any
    other multi-error path keeps its single most actionable error.
    """
    by_path = _group_by_path(errors)
    paths_with_root_cause = {
        path for path, path_errors in by_path.items()
        if any(e.is_root_cause for e in path_errors)
    }

    result = []
    for path, path_errors in by_path.items():
        if len(path_errors) == 1:
            result.append(path_errors[0])
        elif any(e.is_one_of_marker for e in path_errors):
            child_has_root_cause = any(
                _is_descendant(other, path) for other in paths_with_root_cause
            )
            result.extend(filter_one_of_cascade(path_errors, child_has_root_cause))
        else:
            result.append(most_actionable(path_errors))
    return result


def filter_one_of_cascade(
    path_errors: Sequence[ValidationError],
    child_has_root_cause: bool
) -> List[ValidationError]:
    """
    Choose what to keep from one path that carries a oneOf summary.

    Args:
        path_errors: All errors reported at the path
        child_has_root_cause: Whether a strictly deeper path has a root-cause error

    Returns:
        List[ValidationError]: Errors to keep, never empty unless the child
            explains the defect and no summary exists
    """
    root_causes = [e for e in path_errors if e.is_root_cause]
    if root_causes:
        return root_causes

    one_of = next((e for e in path_errors if e.is_one_of_marker), None)

    if child_has_root_cause:
        # required errors here come from the wrong branch; the child explains it
        return [one_of] if one_of is not None else []

    required = [e for e in path_errors if e.type == ErrorType.REQUIRED.value]
    if required:
        return required[:MAX_REQUIRED_PER_PATH]

    if one_of is not None:
        return [one_of]
    return [most_actionable(path_errors)]


def most_actionable(errors: Sequence[ValidationError]) -> ValidationError:
    """Return the first error of the highest-priority type, or the first error."""
    for error_type in PRIORITY_ORDER:
        for error in errors:
            if error.type == error_type:
                return error
    return errors[0]


def suppress_redundant_one_of(errors: Sequence[ValidationError]) -> List[ValidationError]:
    """
    Pass 4: drop diagnostics made redundant by more specific ones.

    An unknown property is definitive evidence of the real mistake, so when
    one is present only property-level evidence survives (enum/const errors
    elsewhere come from testing the wrong branch). Otherwise oneOf summaries
    are dropped as soon as any specific error remains.
    """
    if any(e.type == ErrorType.ADDITIONAL_PROPERTIES.value for e in errors):
        return [e for e in errors if e.type in PROPERTY_EVIDENCE_TYPES]

    specific = [e for e in errors if not e.is_one_of_marker]
    if specific:
        return specific
    return list(errors)


def suppress_redundant_parents(errors: Sequence[ValidationError]) -> List[ValidationError]:
    """
    Pass 5: drop a parent's root-cause error when a descendant has one too.

    required/type errors on a parent are always kept: they describe the
    parent itself, not a wrong-branch guess about it.
    """
    paths = {_path_key(e) for e in errors}
    parents = {
        path for path in paths
        if any(other != path and _is_descendant(other, path) for other in paths)
    }
    if not parents:
        return list(errors)

    root_cause_paths = {_path_key(e) for e in errors if e.is_root_cause}

    result = []
    for error in errors:
        path = _path_key(error)
        if path in parents and error.is_root_cause:
            if any(_is_descendant(other, path) for other in root_cause_paths):
                continue
        result.append(error)
    return result


def schema_definition(schema_path: Optional[str]) -> str:
    """
    Extract the named definition a schema path was raised against.

    "#/definitions/Condition/required" -> "#/definitions/Condition".
    Paths that do not go through a named definition map to "".
    """
    if not schema_path:
        return ""
    for marker in _DEFINITION_MARKERS:
        start = schema_path.find(marker)
        if start == -1:
            continue
        end = schema_path.find("/", start + len(marker))
        return schema_path if end == -1 else schema_path[:end]
    return ""


def _group_by_path(errors: Sequence[ValidationError]) -> Dict[str, List[ValidationError]]:
    groups: Dict[str, List[ValidationError]] = {}
    for error in errors:
        groups.setdefault(_path_key(error), []).append(error)
    return groups


def _path_key(error: ValidationError) -> str:
    return error.path if error.path is not None else ""


def _is_descendant(path: str, ancestor: str) -> bool:
    return path.startswith(ancestor + ".") or path.startswith(ancestor + "[")
