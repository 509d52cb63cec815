"""
Utility functions for the application.
"""
from typing import Any, Dict

SUCCESS_CODE = 0
FAILURE_CODE = -1


def format_response(message: str = "Success", **extra: Any) -> Dict[str, Any]:
    """Format API response."""
    response = {
        "code": SUCCESS_CODE,
        "message": message,
    }
    response.update(extra)
    return response


def format_error(message: str) -> Dict[str, Any]:
    """Format error response."""
    return {
        "code": FAILURE_CODE,
        "message": message,
    }
