"""
Domain-level exception hierarchy.

All business logic errors are represented as DomainError subclasses.
These are caught by endpoint error handlers and converted to HTTP responses.

Pattern:
- Services raise DomainError subclasses (never HTTP exceptions)
- Endpoints catch DomainError and convert to appropriate HTTP status code
- HTTP layer (FastAPI) is completely decoupled from business logic
"""

from enum import Enum
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for all domain errors."""

    # Validation errors
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"

    # Security-relevant mismatches
    INVALID_SIGNATURE = "INVALID_SIGNATURE"

    # External service errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    EXTERNAL_SERVICE_TIMEOUT = "EXTERNAL_SERVICE_TIMEOUT"
    EXTERNAL_SERVICE_UNAVAILABLE = "EXTERNAL_SERVICE_UNAVAILABLE"

    # System errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class DomainError(Exception):
    """
    Base exception for all domain-level errors.

    Used by services to signal failures without coupling to HTTP layer.
    Endpoints catch this and convert to appropriate HTTP status codes.

    Attributes:
        code: Machine-readable error code (ErrorCode enum)
        message: Human-readable error message
        details: Additional context as dict
        http_status_code: Suggested HTTP status code (for endpoint mapping)
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        http_status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.http_status_code = http_status_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        return f"{self.code.value}: {self.message}"

    def log(self, logger_instance=None):
        """Log error with full context for debugging."""
        target_logger = logger_instance or logger
        target_logger.error(
            f"Domain error: {self.code.value} - {self.message}",
            extra={
                "error_code": self.code.value,
                "error_message": self.message,
                "details": self.details,
                "http_status": self.http_status_code,
            },
        )


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            http_status_code=400,
            details=details,
        )


class NotFoundError(DomainError):
    """Requested resource not found."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        full_details = details or {}
        if resource_type:
            full_details["resource_type"] = resource_type
        if resource_id:
            full_details["resource_id"] = resource_id

        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            http_status_code=404,
            details=full_details,
        )


class ConflictError(DomainError):
    """Resource is in a state that conflicts with the requested change."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RESOURCE_CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            http_status_code=409,
            details=details,
        )


class PaymentVerificationError(DomainError):
    """Gateway callback signature did not match the recomputed one."""

    def __init__(
        self,
        message: str = "Invalid payment signature",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=ErrorCode.INVALID_SIGNATURE,
            message=message,
            http_status_code=400,
            details=details,
        )


class ExternalServiceError(DomainError):
    """External service (email, identity provider, payment gateway, database) call failed."""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        full_details = details or {}
        if service_name:
            full_details["service_name"] = service_name

        super().__init__(
            code=code,
            message=message,
            http_status_code=502,
            details=full_details,
        )


class ConfigurationError(DomainError):
    """Required secret or setting is missing. Needs operator action."""

    def __init__(
        self,
        message: str,
        setting_names: Optional[list] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        full_details = details or {}
        if setting_names:
            full_details["settings"] = list(setting_names)

        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            http_status_code=500,
            details=full_details,
        )
