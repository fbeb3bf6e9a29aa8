from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional


class CreateOrderRequest(BaseModel):
    amount: Decimal
    currency: Optional[str] = None
    receipt: Optional[str] = None


class CreateOrderResponse(BaseModel):
    order_id: str = Field(alias="orderId")
    amount: int
    currency: str
    key_id: str = Field(alias="keyId")

    class Config:
        populate_by_name = True


class OrderItem(BaseModel):
    name: str = ""
    quantity: int = 1
    price: Decimal = Decimal("0")

    class Config:
        extra = "allow"


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    order_id: str = Field(alias="orderId")
    community: str = ""
    address: str = ""
    phone: str = ""
    customer_name: str = Field(default="", alias="customerName")
    items: List[OrderItem] = []
    total_amount: Decimal = Field(default=Decimal("0"), alias="totalAmount")
    subscription_end_date: Optional[datetime] = Field(default=None, alias="subscriptionEndDate")

    class Config:
        populate_by_name = True


class VerifyPaymentResponse(BaseModel):
    success: bool
    whatsapp_url: str = Field(alias="whatsappUrl")
    admin_phone: Optional[str] = Field(default=None, alias="adminPhone")

    class Config:
        populate_by_name = True
