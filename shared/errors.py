"""
Shared error handling for the Product Catalog services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import get_request_id


GENERIC_ERROR_MESSAGE = "Internal server error"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class CatalogException(Exception):
    """Base exception for catalog services."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response.

        Server-side failures never leak their cause to the caller; it is
        logged where the exception is handled.
        """
        if self.status_code >= 500:
            return ErrorResponse(
                request_id=get_request_id(),
                code=self.code,
                message=GENERIC_ERROR_MESSAGE
            )

        return ErrorResponse(
            request_id=get_request_id(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(CatalogException):
    """Malformed or missing request payload."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFoundError(CatalogException):
    """Requested entity does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: str, details: Optional[Dict[str, Any]] = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__("NOT_FOUND", f"{resource} {identifier} not found", details)


class ServiceError(CatalogException):
    """Service-related errors."""

    def __init__(self, message: str = "Service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERVICE_ERROR", message, details)


class ExternalServiceError(CatalogException):
    """External service errors (store, cache, queue)."""

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)
