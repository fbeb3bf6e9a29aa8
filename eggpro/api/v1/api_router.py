from fastapi import APIRouter

from eggpro.api.v1.endpoints import otp, payments, health


api_router = APIRouter()

# Include all API routes
api_router.include_router(otp.router, prefix="", tags=["otp"])  # /otp/* and /email-otp
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
