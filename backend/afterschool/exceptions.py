"""
After School Lessons Backend — Custom Exception Hierarchy
===========================================================

What:  Application-specific exceptions for the three failure kinds the API
       distinguishes.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by command validation and repositories; caught by the handlers.
When:  During request processing, and by the CLI tools.

Exception Hierarchy:
    AfterSchoolError (base)
    ├── InvalidArgumentError     → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    └── StoreUnavailableError    → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class AfterSchoolError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info. Returned as `details` only for
                  client errors; store failures keep it server-side.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidArgumentError(AfterSchoolError):
    """
    Raised when client input is missing or malformed.

    When:    Missing order fields, non-integer or negative spaces,
             malformed lesson identifier, unparseable JSON body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "invalid_argument",
            "message": "Spaces cannot be negative",
            "details": {"field": "spaces"}
        }
    """

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(AfterSchoolError):
    """
    Raised when a referenced record does not exist.

    When:    PUT /lessons/{id} for an identifier no lesson has;
             GET /images/{file} for a missing asset.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"No {resource} found with ID: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StoreUnavailableError(AfterSchoolError):
    """
    Raised when the database is unreachable or an operation fails or times out.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        The driver error (SQL text, host names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "The lesson store is currently unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
