"""
Utility functions and helpers.

This module contains shared utilities used across RuleGuard components.

Components:
    - logging: Logging configuration with a rich console handler

Example:
    ```python
    from rule_guard.utils import setup_logging

    setup_logging(level="INFO", log_file="rule_guard.log")
    ```
"""

from rule_guard.utils.logging import setup_logging

__all__ = ["setup_logging"]
