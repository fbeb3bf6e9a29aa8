"""Domain error hierarchy."""

from .exceptions import (
    DomainError,
    ValidationError,
    NotFoundError,
    ConflictError,
    PaymentVerificationError,
    ExternalServiceError,
    ConfigurationError,
    ErrorCode,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PaymentVerificationError",
    "ExternalServiceError",
    "ConfigurationError",
    "ErrorCode",
]
