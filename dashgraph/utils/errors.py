"""
Centralized Error Handling Utilities

Provides user-friendly error messages and a consistent error payload format
for failures raised at the chart engine's public entry points.
"""

from typing import Optional, Dict, Any
from enum import Enum
import structlog

logger = structlog.get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for consistent error payloads"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_INPUT = "INVALID_INPUT"


# User-friendly error messages (do not expose internal details)
USER_FRIENDLY_MESSAGES = {
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred while preparing the chart.",
    ErrorCode.INVALID_INPUT: "The chart configuration or dataset has an unexpected shape.",
}


def create_error_response(
    code: ErrorCode,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        code: Error code enum
        message: Optional custom message (defaults to user-friendly message)
        details: Optional additional details (be careful not to expose sensitive info)

    Returns:
        Standardized error response dict
    """
    return {
        "error": {
            "code": code.value,
            "message": message or USER_FRIENDLY_MESSAGES.get(code, USER_FRIENDLY_MESSAGES[ErrorCode.INTERNAL_ERROR]),
            **({"details": details} if details else {}),
        }
    }


class GraphModelError(Exception):
    """Base class for errors raised by the chart engine."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or USER_FRIENDLY_MESSAGES[self.code]
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Render as the standard error payload"""
        return create_error_response(self.code, self.message, self.details)


class InvalidGraphInputError(GraphModelError):
    """The configuration or dataset could not be reshaped into chart points."""

    code = ErrorCode.INVALID_INPUT


def raise_invalid_input(
    operation: str,
    exception: Optional[Exception] = None,
    **context: Any,
) -> None:
    """
    Log the underlying fault and raise InvalidGraphInputError chained to it.

    Args:
        operation: Operation that failed (e.g., "set_data")
        exception: The original fault, if any
        context: Extra key/value pairs for the log line and error details
    """
    log_message = f"Invalid chart input during {operation}"
    if exception:
        logger.error(log_message, error=str(exception), error_type=type(exception).__name__, exc_info=True, **context)
    else:
        logger.error(log_message, **context)

    details = {"operation": operation, **context}
    if exception:
        details["reason"] = type(exception).__name__
        raise InvalidGraphInputError(details=details) from exception
    raise InvalidGraphInputError(details=details)
