from pydantic import BaseModel, Field
from typing import Optional


class OtpSendRequest(BaseModel):
    email: Optional[str] = None


class OtpVerifyRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")

    class Config:
        populate_by_name = True


class EmailOtpActionRequest(OtpVerifyRequest):
    """Single-endpoint form: {action: "send" | "verify", ...}."""

    action: Optional[str] = None


class OtpResponse(BaseModel):
    success: bool
    user_id: Optional[str] = Field(default=None, alias="userId")
    error: Optional[str] = None
    code: Optional[str] = None

    class Config:
        populate_by_name = True
