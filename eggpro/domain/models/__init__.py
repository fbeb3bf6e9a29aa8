"""ORM models. Importing this package registers every table on Base.metadata."""

from eggpro.infrastructure.database.session import Base
from .otp import EmailOtp
from .order import Order, PaymentStatus, OrderStatus
from .user import User

__all__ = ["Base", "EmailOtp", "Order", "PaymentStatus", "OrderStatus", "User"]
