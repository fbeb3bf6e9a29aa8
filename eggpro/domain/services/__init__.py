"""Domain services for business logic."""

from .otp_service import OtpService, OtpResult, OtpErrorKind
from .payment_service import PaymentService, CheckoutOrder, PaymentConfirmation

__all__ = [
    "OtpService",
    "OtpResult",
    "OtpErrorKind",
    "PaymentService",
    "CheckoutOrder",
    "PaymentConfirmation",
]
