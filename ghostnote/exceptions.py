"""
GhostNote Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the auth dependency; caught by global handlers.

Exception Hierarchy:
    GhostNoteError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    └── DatabaseError            → 500 Internal Server Error

Nothing in this hierarchy is retried by the server. Clients retry saves
themselves; delete is idempotent and safe to retry unconditionally.
"""

from typing import Any, Dict, Optional


class GhostNoteError(Exception):
    """
    Base exception for all GhostNote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where harmless)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GhostNoteError):
    """
    Raised when client input fails validation.

    When:    Missing content, incomplete image bundle, oversized image payload,
             disallowed image MIME type, missing delete id.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "image_type 'image/bmp' is not allowed",
            "details": {"field": "image_type", "allowed_types": [...]}
        }
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


class AuthenticationError(GhostNoteError):
    """
    Raised when the Authorization header is missing or does not validate.

    HTTP:    401 Unauthorized (with a WWW-Authenticate: Bearer header)
    """

    def __init__(
        self,
        message: str = "Missing or invalid Authorization header",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(GhostNoteError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    For shared notes the caller passes a fixed message and no resource id, so a
    link that never existed and a link that was already read look the same.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(GhostNoteError):
    """
    Raised when a write collides with a uniqueness constraint.

    When:    Saving a share copy whose public_id already names an unread share.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(GhostNoteError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. Driver errors,
        SQL text and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
