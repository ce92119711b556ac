"""
Roster Backend — Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, security helpers and dependencies.

Exception Hierarchy:
    RosterError (base)              → 500 Internal Server Error
    ├── ValidationError             → 400 Bad Request
    │   └── InvalidInputError       → 400 Bad Request
    ├── AuthenticationError         → 401 Unauthorized
    ├── PermissionDeniedError       → 403 Forbidden
    ├── NotFoundError               → 404 Not Found
    ├── ConflictError               → 409 Conflict
    ├── DatabaseError               → 500 Internal Server Error
    └── RateLimitExceededError      → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class RosterError(Exception):
    """
    Base exception for all Roster application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where handlers opt in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RosterError):
    """
    Raised when client input fails a business rule.

    Schema-level problems are already answered with 422 by FastAPI; this
    covers rules like password strength or an unknown report type.
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


class InvalidInputError(ValidationError):
    """Raised by the credential helpers for an empty password or a too-short length."""


class AuthenticationError(RosterError):
    """
    Raised when credentials or a bearer token cannot be verified.

    The message never says which part was wrong (unknown user vs bad
    password, expired vs forged token).
    """

    def __init__(
        self,
        message: str = "Could not validate credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(RosterError):
    """Raised when an authenticated user lacks the required role."""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        required_role: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if required_role:
            ctx["required_role"] = required_role
        super().__init__(message=message, context=ctx)


class NotFoundError(RosterError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that
    into NotFoundError so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(RosterError):
    """Raised when a create would violate a uniqueness rule (e.g. username taken)."""

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(RosterError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; details
    (statement, constraint name) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(RosterError):
    """Raised when a client exceeds the per-IP request rate limit."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
