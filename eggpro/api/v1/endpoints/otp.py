"""
Email OTP endpoints.

Logical failures are returned with HTTP 200 and success=false so RPC-style
clients can read the reason from the body instead of a transport error.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from eggpro.api.deps import get_otp_service
from eggpro.domain.schemas.otp import (
    EmailOtpActionRequest,
    OtpResponse,
    OtpSendRequest,
    OtpVerifyRequest,
)
from eggpro.domain.services.otp_service import OtpResult, OtpService

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_response(result: OtpResult) -> OtpResponse:
    return OtpResponse(
        success=result.success,
        user_id=result.user_id,
        error=result.error,
        code=result.error_kind.value if result.error_kind else None,
    )


@router.post("/otp/send", response_model=OtpResponse, response_model_exclude_none=True)
async def send_otp(
    data: OtpSendRequest,
    service: OtpService = Depends(get_otp_service),
):
    """Issue a signup code to an email address."""
    return _to_response(await service.send(email=data.email))


@router.post("/otp/verify", response_model=OtpResponse, response_model_exclude_none=True)
async def verify_otp(
    data: OtpVerifyRequest,
    service: OtpService = Depends(get_otp_service),
):
    """Redeem a signup code and create the account."""
    result = await service.verify(
        email=data.email,
        otp=data.otp,
        password=data.password,
        full_name=data.full_name,
    )
    return _to_response(result)


@router.post("/email-otp", response_model=OtpResponse, response_model_exclude_none=True)
async def email_otp(
    data: EmailOtpActionRequest,
    service: OtpService = Depends(get_otp_service),
):
    """Single-endpoint form used by older clients: dispatches on `action`."""
    if data.action == "send":
        return _to_response(await service.send(email=data.email))
    if data.action == "verify":
        result = await service.verify(
            email=data.email,
            otp=data.otp,
            password=data.password,
            full_name=data.full_name,
        )
        return _to_response(result)

    logger.warning(f"Unknown email-otp action: {data.action}")
    return JSONResponse(status_code=400, content={"success": False, "error": "Invalid action"})
