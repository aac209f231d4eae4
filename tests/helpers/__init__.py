"""Test helpers and utilities.

This module provides shared utilities for testing:
- assertions: Custom assertions for handler responses and dispatcher results
- builders: Test data builders for common objects
"""

from tests.helpers.assertions import (
    assert_error_response,
    assert_error_result,
    assert_success_response,
)
from tests.helpers.builders import (
    build_article_html,
    build_test_settings,
    build_todo,
    set_mtime,
)

__all__ = [
    "assert_success_response",
    "assert_error_response",
    "assert_error_result",
    "build_article_html",
    "build_test_settings",
    "build_todo",
    "set_mtime",
]
