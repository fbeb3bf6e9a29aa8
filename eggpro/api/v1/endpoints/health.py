from fastapi import APIRouter
from typing import Dict

from eggpro.infrastructure.monitoring.logging_setup import SERVICE_NAME

router = APIRouter()


@router.get("/")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness_check() -> Dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready", "service": SERVICE_NAME}


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness check endpoint."""
    return {"status": "alive", "service": SERVICE_NAME}
