"""
ArtCritic Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each failure mode of an analysis request.
How:   Each exception carries a user-safe message and an optional context dict.
       Global handlers registered in main.py turn them into JSON error responses.
Who:   Raised by services and dependencies; caught by the global handlers
       (or, for persistence on the save path, by the persistence client itself).

Exception Hierarchy:
    ArtCriticError (base)
    ├── ValidationError      → 400 Bad Request (caller can fix the input)
    ├── NotFoundError        → 404 Not Found (data-service record missing)
    ├── FileStorageError     → 500 Internal Server Error
    ├── ProviderError        → 503 Service Unavailable (vision AI failed)
    └── PersistenceError     → 502 Bad Gateway on read routes;
                               recorded, never raised, on the save path
"""

from typing import Any, Dict, Optional


class ArtCriticError(Exception):
    """
    Base exception for all ArtCritic application errors.

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


class ValidationError(ArtCriticError):
    """
    Raised when the request cannot be analyzed as given.

    When:  No image and no prompt, unknown analysis category, bad language code,
           unsupported file type, file too large.
    HTTP:  400 Bad Request

    Raised before any call to the vision provider or the data service.
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


class NotFoundError(ArtCriticError):
    """
    Raised when the data service reports that a record does not exist.

    HTTP:  404 Not Found
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


class FileStorageError(ArtCriticError):
    """
    Raised when an uploaded image cannot be written, read or decoded.

    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ProviderError(ArtCriticError):
    """
    Raised when the vision AI call fails.

    When:  Authentication, quota, malformed request, network failure, or an
           image URL that could not be fetched for inlining.
    HTTP:  503 Service Unavailable

    The call is not retried and no partial analysis is returned.
    """

    def __init__(
        self,
        message: str = "The AI analysis service is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PersistenceError(ArtCriticError):
    """
    Raised when a call to the artwork/analysis data service fails.

    On the save path the persistence client converts this into a failed
    PersistenceOutcome so the caller still receives the analysis (marked
    temporary). Read routes let it propagate.
    HTTP:  502 Bad Gateway
    """

    def __init__(
        self,
        message: str = "The artwork data service could not be reached",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
