"""
Hotel Parcel Tracking — Shared Response Schemas
=================================================

What:  Model configuration of the guest and parcel schemas, plus the error
       and health payloads shared by every router.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# camelCase JSON; snake_case field names are accepted on input as well
API_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "Room 101 is already occupied",
            "details": {"room_number": "101"},
            "path": "/api/guests/check-in",
            "timestamp": "2024-01-15T12:00:00+00:00",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    path: Optional[str] = Field(default=None, description="Request path that failed")
    timestamp: datetime = Field(description="When the error was produced (UTC)")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
