"""Domain repositories for data access."""

from .otp_repository import OtpRepository
from .order_repository import OrderRepository
from .user_repository import UserRepository

__all__ = [
    "OtpRepository",
    "OrderRepository",
    "UserRepository",
]
