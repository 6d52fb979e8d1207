"""
API Error Hierarchy

Exceptions raised by routers and core helpers.  Each one knows its HTTP
status and serializes to the standard error body:

    {"success": false, "error": "...", "errorCode": "...", "details": ...}

The handlers that turn them into responses are registered in main.py.
"""

from typing import Any, Optional


class PlannerError(Exception):
    """Base exception for all fertility planner errors."""

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to the JSON error body."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "errorCode": self.error_code,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequestError(PlannerError):
    """The request body or query is unusable as sent."""

    status_code = 400
    default_code = "BAD_REQUEST"


class MissingFieldError(BadRequestError):
    """A required field is absent or empty."""

    default_code = "MISSING_FIELD"


class NotFoundError(PlannerError):
    """A referenced patient or record does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"


class UpstreamUnavailableError(PlannerError):
    """The hosted language model could not be reached or is not configured."""

    status_code = 503
    default_code = "AI_UNAVAILABLE"


def require(value: Any, message: str, error_code: str) -> Any:
    """Return ``value`` or raise MissingFieldError when it is empty."""
    if value is None or value == "" or value == [] or value == {}:
        raise MissingFieldError(message, error_code)
    return value
