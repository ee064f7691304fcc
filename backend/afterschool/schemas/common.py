"""
After School Lessons Backend — Shared Response Schemas
========================================================

What:  Pydantic models shared by every router: the error envelope, the
       service metadata returned by GET /, and the health probe body.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "No lesson found with ID: 3f6c...",
            "details": {"resource": "lesson", "resource_id": "3f6c..."},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error label")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ServiceInfoResponse(BaseModel):
    """Returned by GET /: service name, version and the endpoint inventory."""
    message: str
    version: str
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


def error_fields(exc: PydanticValidationError) -> List[str]:
    """Flatten pydantic error locations into dotted field names, e.g. `lessonIds.0`."""
    fields: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        if loc and loc not in fields:
            fields.append(loc)
    return fields


def error_types(exc: PydanticValidationError) -> List[Any]:
    """pydantic error type codes (e.g. `greater_than_equal`), one per error."""
    return [err.get("type") for err in exc.errors()]
