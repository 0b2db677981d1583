"""
High-level Python API for RuleGuard.

This module provides the main user-facing API for rule validation.
"""

from rule_guard.service import RuleValidationService
from rule_guard.validation.cascade_filter import filter_cascading_errors
from rule_guard.validation.line_locator import find_line
from rule_guard.validation.models import FilterResult, ValidationError, ValidationResult

# Re-export for convenience
__all__ = [
    "RuleValidationService",
    "ValidationError",
    "ValidationResult",
    "FilterResult",
    "filter_cascading_errors",
    "find_line",
]
