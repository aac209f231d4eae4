"""Shared response helper functions for tool handlers.

Handlers return one of two dict shapes instead of raising, and the dispatcher
folds either shape into the uniform ``ToolResult`` envelope.
"""

from typing import Any


def create_success_response(result: Any, message: str = "") -> dict:
    """Create standardized success response.

    Args:
        result: Handler result text
        message: Optional short summary for logging

    Returns:
        Structured response dict with success=True

    Example:
        >>> create_success_response(result="    1→hello", message="Read 1 lines")
        {'success': True, 'result': '    1→hello', 'message': 'Read 1 lines'}
    """
    return {
        "success": True,
        "result": result,
        "message": message,
    }


def create_error_response(error: str, message: str) -> dict:
    """Create standardized error response.

    Args:
        error: Machine-readable error code (e.g., "not_found")
        message: Human-readable explanation shown to the calling agent

    Returns:
        Structured response dict with success=False

    Example:
        >>> create_error_response(error="not_found", message="File not found: /tmp/x")
        {'success': False, 'error': 'not_found', 'message': 'File not found: /tmp/x'}
    """
    return {
        "success": False,
        "error": error,
        "message": message,
    }


def is_success_response(response: Any) -> bool:
    """Return True if response is a well-formed success dict."""
    return isinstance(response, dict) and response.get("success") is True
