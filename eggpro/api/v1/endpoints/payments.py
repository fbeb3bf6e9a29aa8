"""Payment endpoints: gateway order creation and checkout verification."""

import logging
from fastapi import APIRouter, Depends

from eggpro.api.deps import get_payment_service
from eggpro.domain.schemas.payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from eggpro.domain.services.payment_service import PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/orders", response_model=CreateOrderResponse)
async def create_order(
    data: CreateOrderRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """Create a Razorpay order for the checkout widget."""
    order = await service.create_order(
        amount=data.amount,
        currency=data.currency,
        receipt=data.receipt,
    )
    return CreateOrderResponse(
        order_id=order.order_id,
        amount=order.amount,
        currency=order.currency,
        key_id=order.key_id,
    )


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    data: VerifyPaymentRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """Verify the checkout signature and confirm the local order."""
    confirmation = await service.verify_payment(
        razorpay_order_id=data.razorpay_order_id,
        razorpay_payment_id=data.razorpay_payment_id,
        razorpay_signature=data.razorpay_signature,
        order_id=data.order_id,
        customer_name=data.customer_name,
        phone=data.phone,
        community=data.community,
        address=data.address,
        items=[item.model_dump() for item in data.items],
        total_amount=data.total_amount,
        subscription_end_date=data.subscription_end_date,
    )
    return VerifyPaymentResponse(
        success=confirmation.success,
        whatsapp_url=confirmation.whatsapp_url,
        admin_phone=confirmation.admin_phone,
    )
