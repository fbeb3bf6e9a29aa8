"""Domain schemas for API request/response validation."""

from .otp import (
    OtpSendRequest,
    OtpVerifyRequest,
    EmailOtpActionRequest,
    OtpResponse,
)
from .payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderItem,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)

__all__ = [
    # OTP schemas
    "OtpSendRequest",
    "OtpVerifyRequest",
    "EmailOtpActionRequest",
    "OtpResponse",
    # Payment schemas
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderItem",
    "VerifyPaymentRequest",
    "VerifyPaymentResponse",
]
