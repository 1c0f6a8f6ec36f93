"""
Type Editor Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for each failure class.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       responses with the matching HTTP status code.
Who:   Raised by services and routes; caught by the global handlers.

Exception Hierarchy:
    TypeEditorError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── PayloadTooLargeError     → 413 Payload Too Large
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error

Every error is terminal for its request: nothing in the service retries.
"""

from typing import Any, Dict, Optional


class TypeEditorError(Exception):
    """
    Base exception for all Type Editor application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TypeEditorError):
    """
    Raised when client input fails validation.

    When:    Missing upload filename, unsupported extension, magic-number
             mismatch, unsafe filename on delete, bad reorder request.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "File type '.bmp' is not supported. Allowed types: .gif, .jpeg, .jpg, .png, .webp",
            "details": {"field": "file", "extension": ".bmp"}
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


class NotFoundError(TypeEditorError):
    """
    Raised when a requested resource does not exist.

    When:    GET on a missing document/node, content never saved for a node,
             post-update read finding no row, missing upload file.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts
    that None into this exception.
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


class PayloadTooLargeError(TypeEditorError):
    """
    Raised when an uploaded file exceeds the configured size cap.

    HTTP:    413 Payload Too Large
    Checked before any content inspection, so an oversized file is rejected
    whatever its bytes are.
    """

    def __init__(
        self,
        max_size: int,
        actual_size: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        max_mb = max_size / (1024 * 1024)
        message = (
            f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB."
        )
        ctx = context or {}
        ctx["max_size"] = max_size
        ctx["actual_size"] = actual_size
        super().__init__(message=message, context=ctx)
        self.max_size = max_size
        self.actual_size = actual_size


class FileStorageError(TypeEditorError):
    """
    Raised when file system operations fail.

    When:    Upload directory not creatable, disk full, permission denied.
    HTTP:    500 Internal Server Error

    The file system path goes into `context` only; the client sees a generic
    message.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TypeEditorError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost, constraint violation (e.g. a node pointing at a
             document that does not exist), pool timeout.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. SQL text and
    constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
