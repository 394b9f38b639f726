"""
Hotel Parcel Tracking — Custom Exception Hierarchy
====================================================

What:  Application-specific exceptions for the error scenarios of the service.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by services and repositories; caught by global handlers.

Exception Hierarchy:
    ParcelTrackingError (base)      → 500 Internal Server Error
    ├── ValidationError             → 400 Bad Request (client can fix)
    │   └── ConflictError           → 400 Bad Request (business rule violated)
    ├── NotFoundError               → 404 Not Found
    └── DatabaseError               → 500 Internal Server Error

None of these are retryable: every failure is reported before any write of
the request is committed.
"""

from typing import Any, Dict, Optional


class ParcelTrackingError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; echoed only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ParcelTrackingError):
    """
    Raised when client input is rejected.

    HTTP:    400 Bad Request

    Pydantic handles field-level schema checks (mapped to 400 in main.py);
    this class is for checks made by the application itself.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(ValidationError):
    """
    Raised when a state-transition guard rejects an operation.

    When:    Room already occupied, guest already checked out, guest not
             checked in, duplicate tracking number, parcel already collected.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "The operation conflicts with the current state",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ParcelTrackingError):
    """
    Raised when a referenced record does not exist.

    HTTP:    404 Not Found

    The repositories return None for missing records; services convert
    that None into this exception.

    Example messages:
        Guest with ID '7' was not found
        Parcel with tracking number 'TRK1' was not found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        key: str = "ID",
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with {key} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(ParcelTrackingError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. SQL, constraint
    names and driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
