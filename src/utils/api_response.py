"""
Standardized API error bodies.

Successful endpoints return their records directly; failures are rendered
through ``error_response`` so every error has the same shape.
"""

from typing import Any, Dict, Optional


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        message: Error message
        code: Optional error code
        details: Optional additional error details

    Returns:
        Dict with standardized error response format
    """
    error = {"message": message}

    if code:
        error["code"] = code

    if details:
        error["details"] = details

    return {
        "success": False,
        "error": error
    }
