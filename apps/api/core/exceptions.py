"""
Custom exception classes and error handling.

API exceptions carry an HTTP status and are rendered as ``{"error": detail}``.
Pipeline exceptions are plain Python errors raised by the QT services; the
routers decide how they surface.
"""
from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class APIException(HTTPException):
    """Base API exception with consistent structure."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundError(APIException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found: {identifier}",
            error_code="NOT_FOUND"
        )


class ValidationError(APIException):
    """Missing or malformed request input."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )


class UnauthorizedError(APIException):
    """Missing or wrong shared secret."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
        )


# ---------------------------------------------------------------------------
# QT pipeline errors
# ---------------------------------------------------------------------------

class QTPipelineError(Exception):
    """Base class for failures inside the daily QT pipeline."""


class ResponseParseError(QTPipelineError, ValueError):
    """Model output did not contain a parseable JSON object."""


class GenerationError(QTPipelineError):
    """The text-generation service could not produce a response."""


class PublishError(QTPipelineError):
    """The daily QT upsert failed."""
