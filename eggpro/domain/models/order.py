from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
import enum
import uuid
from sqlalchemy import String, DateTime, Numeric, JSON, Text
from sqlalchemy.orm import mapped_column, Mapped
from sqlalchemy.sql import func

from eggpro.infrastructure.database.session import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[Optional[str]] = mapped_column(String(36), index=True, nullable=True)
    receipt: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(8), default="INR")
    items: Mapped[List[Any]] = mapped_column(JSON, default=list)
    community: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment_id: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    payment_status: Mapped[str] = mapped_column(String(20), default=PaymentStatus.PENDING.value, nullable=False)
    order_status: Mapped[str] = mapped_column(String(20), default=OrderStatus.PENDING.value, nullable=False)
    subscription_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
