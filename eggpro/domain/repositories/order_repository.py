"""Repository for locally stored orders."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eggpro.domain.models.order import Order, PaymentStatus, OrderStatus
from eggpro.domain.errors import ConflictError, NotFoundError


class OrderRepository:
    """Repository for Order entity operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        total_amount: Decimal,
        items: Optional[List[Any]] = None,
        user_id: Optional[str] = None,
        receipt: Optional[str] = None,
        currency: str = "INR",
        community: Optional[str] = None,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        customer_name: Optional[str] = None,
    ) -> Order:
        """Create a new order in the pending/pending state."""
        order = Order(
            total_amount=total_amount,
            items=items or [],
            user_id=user_id,
            receipt=receipt,
            currency=currency,
            community=community,
            address=address,
            phone=phone,
            customer_name=customer_name,
            payment_status=PaymentStatus.PENDING.value,
            order_status=OrderStatus.PENDING.value,
        )
        self.db.add(order)
        await self.db.flush()
        return order

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        """Get order by ID."""
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        return result.scalar_one_or_none()

    async def mark_paid(
        self,
        order_id: str,
        payment_id: str,
        subscription_end_date: Optional[datetime] = None,
    ) -> None:
        """
        Move a pending order to paid/confirmed and record the gateway payment id.

        Only (pending, pending) orders are transitioned. Repeating the call for an
        order already paid with the same payment id rewrites the same values.

        Raises:
            NotFoundError: no such order
            ConflictError: order is in any other state
        """
        values = {
            "payment_id": payment_id,
            "payment_status": PaymentStatus.PAID.value,
            "order_status": OrderStatus.CONFIRMED.value,
        }
        if subscription_end_date:
            values["subscription_end_date"] = subscription_end_date

        stmt = (
            update(Order)
            .where(Order.id == order_id)
            .where(
                or_(
                    and_(
                        Order.payment_status == PaymentStatus.PENDING.value,
                        Order.order_status == OrderStatus.PENDING.value,
                    ),
                    and_(
                        Order.payment_status == PaymentStatus.PAID.value,
                        Order.order_status == OrderStatus.CONFIRMED.value,
                        Order.payment_id == payment_id,
                    ),
                )
            )
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.db.execute(stmt)
        if result.rowcount:
            await self.db.flush()
            return

        order = await self.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found", resource_type="Order", resource_id=order_id)
        raise ConflictError(
            f"Order {order_id} is {order.payment_status}/{order.order_status}",
            details={"payment_id": order.payment_id},
        )

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
