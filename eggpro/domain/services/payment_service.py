"""Payment order creation and checkout signature verification."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError

from eggpro.core.security import verify_payment_signature
from eggpro.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    PaymentVerificationError,
    ValidationError,
)
from eggpro.domain.interfaces import IEmailProvider, IPaymentGateway
from eggpro.domain.repositories.order_repository import OrderRepository
from eggpro.infrastructure.email.templates import order_email_subject, render_order_email_html

logger = logging.getLogger(__name__)

IST = timezone(timedelta(hours=5, minutes=30), "IST")


@dataclass
class CheckoutOrder:
    """What the client-side checkout widget needs. Never carries the secret."""

    order_id: str
    amount: int
    currency: str
    key_id: str


@dataclass
class PaymentConfirmation:
    success: bool
    whatsapp_url: str
    admin_phone: Optional[str] = None


def to_minor_units(amount: Any) -> int:
    """Convert a major-unit amount (rupees) to the gateway's minor units (paise)."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number")
    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be greater than zero")
    try:
        return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except DecimalException:
        raise ValidationError("Amount is too large")


def format_amount(value: Any) -> str:
    """Display form of an amount: whole numbers without decimals, otherwise two places."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return str(value)
    if not amount.is_finite():
        return str(amount)
    # Format specs round without the context precision limit that quantize() has.
    if amount == amount.to_integral_value():
        return f"{amount:.0f}"
    return f"{amount:.2f}"


class PaymentService:
    """
    Creates gateway orders and confirms local orders from signed callbacks.

    The only transition performed here is (pending, pending) -> (paid, confirmed),
    and only after the recomputed HMAC matches the submitted signature.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_gateway: IPaymentGateway,
        email_provider: Optional[IEmailProvider] = None,
        default_currency: str = "INR",
        admin_phone: Optional[str] = None,
        admin_email: Optional[str] = None,
    ):
        self.order_repo = order_repo
        self.payment_gateway = payment_gateway
        self.email_provider = email_provider
        self.default_currency = default_currency
        self.admin_phone = admin_phone
        self.admin_email = admin_email

    async def create_order(
        self,
        amount: Any,
        currency: Optional[str] = None,
        receipt: Optional[str] = None,
    ) -> CheckoutOrder:
        """
        Create a gateway order for a major-unit amount.

        Raises:
            ValidationError: amount missing or not positive
            ConfigurationError: gateway credentials missing
            ExternalServiceError: gateway rejected the request (carries its description)
        """
        minor_amount = to_minor_units(amount)
        currency = (currency or self.default_currency).upper()
        receipt = receipt or f"receipt_{int(time.time() * 1000)}"

        data = await self.payment_gateway.create_order(amount=minor_amount, currency=currency, receipt=receipt)

        return CheckoutOrder(
            order_id=data["id"],
            amount=int(data.get("amount", minor_amount)),
            currency=data.get("currency", currency),
            key_id=self.payment_gateway.key_id,
        )

    async def verify_payment(
        self,
        razorpay_order_id: str,
        razorpay_payment_id: str,
        razorpay_signature: str,
        order_id: str,
        customer_name: str = "",
        phone: str = "",
        community: str = "",
        address: str = "",
        items: Optional[List[Dict[str, Any]]] = None,
        total_amount: Any = 0,
        subscription_end_date: Optional[datetime] = None,
    ) -> PaymentConfirmation:
        """
        Check the checkout signature, then mark the local order paid.

        Raises:
            ValidationError: a gateway identifier or the order id is missing
            ConfigurationError: gateway secret missing
            PaymentVerificationError: signature mismatch (order untouched)
        """
        if not razorpay_order_id or not razorpay_payment_id or not razorpay_signature:
            raise ValidationError("razorpay_order_id, razorpay_payment_id and razorpay_signature are required")
        if not order_id:
            raise ValidationError("orderId is required")

        secret = self.payment_gateway.key_secret
        if not verify_payment_signature(razorpay_order_id, razorpay_payment_id, razorpay_signature, secret):
            logger.warning(
                "Payment signature mismatch",
                extra={"order_id": order_id, "razorpay_order_id": razorpay_order_id},
            )
            raise PaymentVerificationError("Invalid payment signature")

        logger.info(f"Payment verified: {razorpay_payment_id}")
        await self._confirm_order(order_id, razorpay_payment_id, subscription_end_date)

        line_items = [_line_item(item) for item in (items or [])]
        if self.admin_email and self.email_provider:
            await self._email_admin(
                order_id=order_id,
                payment_id=razorpay_payment_id,
                customer_name=customer_name,
                phone=phone,
                community=community,
                address=address,
                items=line_items,
                total_amount=total_amount,
                subscription_end_date=subscription_end_date,
            )

        message = build_order_message(
            order_id=order_id,
            payment_id=razorpay_payment_id,
            customer_name=customer_name,
            phone=phone,
            community=community,
            address=address,
            items=line_items,
            total_amount=total_amount,
            subscription_end_date=subscription_end_date,
        )
        return PaymentConfirmation(
            success=True,
            whatsapp_url=whatsapp_link(self.admin_phone, message),
            admin_phone=self.admin_phone,
        )

    async def _confirm_order(
        self,
        order_id: str,
        payment_id: str,
        subscription_end_date: Optional[datetime],
    ) -> None:
        # Single attempt. Failures are logged for reconciliation and do not
        # fail the verification response.
        try:
            await self.order_repo.mark_paid(order_id, payment_id, subscription_end_date)
            await self.order_repo.commit()
        except NotFoundError as e:
            logger.error(
                "Verified payment for unknown order; needs reconciliation",
                extra={"order_id": order_id, "payment_id": payment_id, "error_message": e.message},
            )
        except ConflictError as e:
            logger.error(
                "Verified payment for an order that is not pending; needs reconciliation",
                extra={"order_id": order_id, "payment_id": payment_id, "error_message": e.message},
            )
        except SQLAlchemyError as e:
            await self.order_repo.rollback()
            logger.error(
                "Verified payment but order update failed; needs reconciliation",
                extra={"order_id": order_id, "payment_id": payment_id, "error_message": str(e)},
            )
        else:
            logger.info(f"Order confirmed: {order_id}")

    async def _email_admin(
        self,
        order_id: str,
        payment_id: str,
        customer_name: str,
        phone: str,
        community: str,
        address: str,
        items: List[Dict[str, Any]],
        total_amount: Any,
        subscription_end_date: Optional[datetime],
    ) -> None:
        total = format_amount(total_amount)
        try:
            await self.email_provider.send(
                to=self.admin_email,
                subject=order_email_subject(order_id, total),
                html_content=render_order_email_html(
                    order_id=order_id,
                    payment_id=payment_id,
                    customer_name=customer_name,
                    phone=phone,
                    community=community,
                    address=address,
                    items=items,
                    total_amount=total,
                    subscription_end_date=subscription_end_date.strftime("%d/%m/%Y") if subscription_end_date else None,
                ),
            )
            logger.info("Admin email sent")
        except DomainError as e:
            logger.warning(f"Admin order email failed: {e.message}")


def _line_item(item: Dict[str, Any]) -> Dict[str, Any]:
    quantity = item.get("quantity", 1)
    price = item.get("price", 0)
    return {
        "name": item.get("name", ""),
        "quantity": quantity,
        "price": format_amount(price),
        "line_total": format_amount(Decimal(str(price)) * Decimal(str(quantity))),
    }


def build_order_message(
    order_id: str,
    payment_id: str,
    customer_name: str,
    phone: str,
    community: str,
    address: str,
    items: List[Dict[str, Any]],
    total_amount: Any,
    subscription_end_date: Optional[datetime] = None,
    placed_at: Optional[datetime] = None,
) -> str:
    """Operator WhatsApp message for a confirmed order."""
    items_list = "\n".join(f"• {i['name']} x{i['quantity']} = ₹{i['line_total']}" for i in items)
    placed_at = (placed_at or datetime.now(timezone.utc)).astimezone(IST)

    lines = [
        "🥚 *New Order Received!*",
        "",
        f"*Order ID:* {order_id}",
        f"*Payment ID:* {payment_id}",
        "",
        "*Customer Details:*",
        f"Name: {customer_name}",
        f"Phone: {phone}",
        "",
        "*Delivery Location:*",
        f"Community: {community}",
        f"Address: {address}",
        "",
        "*Order Items:*",
        items_list,
        "",
        f"*Total Amount:* ₹{format_amount(total_amount)}",
    ]
    if subscription_end_date:
        lines.append(f"*Subscription Ends:* {subscription_end_date.strftime('%d/%m/%Y')}")
    lines += ["", f"_Order placed at {placed_at.strftime('%d/%m/%Y, %I:%M:%S %p')}_"]
    return "\n".join(lines)


def whatsapp_link(phone: Optional[str], message: str) -> str:
    """wa.me deep link. Without a number the user picks the recipient."""
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"
