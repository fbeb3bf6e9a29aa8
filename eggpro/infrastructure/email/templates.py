"""HTML/text bodies for outgoing emails."""

from html import escape
from typing import Any, Dict, List, Optional

from eggpro.core.config import settings

OTP_EMAIL_SUBJECT = "Your EggPro Verification Code"


def render_otp_email_html(otp_code: str) -> str:
    """
    Create HTML content for the signup OTP email.

    The code is rendered large and letter-spaced so it can be read at a glance.
    """
    return f"""
    <div style="font-family: Arial, sans-serif; padding: 20px; max-width: 480px; margin: 0 auto;">
        <h1 style="color: #FF6B35; margin: 0 0 16px 0;">EggPro</h1>
        <p style="color: #333333; font-size: 16px;">Your verification code is:</p>
        <div style="background: #FF6B35; color: #ffffff; font-size: 32px; font-weight: 700; padding: 20px; border-radius: 12px; text-align: center; letter-spacing: 8px;">
            {otp_code}
        </div>
        <p style="color: #999999; font-size: 14px;">
            This code expires in {settings.OTP_EXPIRE_MINUTES} minutes.
        </p>
        <p style="color: #999999; font-size: 14px;">
            If you didn't request this code, please ignore this email.
        </p>
    </div>
    """


def render_otp_email_text(otp_code: str) -> str:
    return f"""Your EggPro Verification Code

Your verification code is: {otp_code}

This code expires in {settings.OTP_EXPIRE_MINUTES} minutes.

If you didn't request this code, please ignore this email.
"""


def order_email_subject(order_id: str, total_amount: Any) -> str:
    return f"New Order #{order_id[:8]} - ₹{total_amount}"


def render_order_email_html(
    order_id: str,
    payment_id: str,
    customer_name: str,
    phone: str,
    community: str,
    address: str,
    items: List[Dict[str, Any]],
    total_amount: Any,
    subscription_end_date: Optional[str] = None,
) -> str:
    """Create HTML content for the operator's new-order email."""
    items_html = "<br>".join(
        f"{escape(str(item['name']))} x {item['quantity']} - ₹{item['line_total']}" for item in items
    )
    ends = f"<p><b>Ends:</b> {escape(subscription_end_date)}</p>" if subscription_end_date else ""
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <div style="background: linear-gradient(135deg, #F59E0B, #EA580C); padding: 20px; border-radius: 10px 10px 0 0;">
            <h1 style="color: #ffffff; margin: 0;">New Order!</h1>
        </div>
        <div style="background: #fff8e7; padding: 20px; border: 1px solid #f3d4a0;">
            <p><b>Order ID:</b> {escape(order_id)}</p>
            <p><b>Payment ID:</b> {escape(payment_id)}</p>
            <p><b>Customer:</b> {escape(customer_name)}</p>
            <p><b>Phone:</b> {escape(phone)}</p>
            <p><b>Community:</b> {escape(community)}</p>
            <p><b>Address:</b> {escape(address)}</p>
            {ends}
            <h3>Items</h3>
            <div style="background: #ffffff; padding: 15px; border-radius: 8px;">{items_html}</div>
            <div style="background: #fde68a; padding: 15px; border-radius: 8px; margin-top: 20px;">
                <h2 style="color: #92400e; margin: 0;">Total: ₹{total_amount}</h2>
            </div>
        </div>
    </div>
    """
