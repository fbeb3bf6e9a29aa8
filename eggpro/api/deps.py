from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eggpro.infrastructure.database.session import get_db_session
from eggpro.infrastructure.container import ServiceContainer


# Dependency to get the database session
DBSession = Depends(get_db_session)


async def get_service_container(db: AsyncSession = DBSession) -> ServiceContainer:
    """
    Get or create the service container.

    Creates a new container instance per request to avoid session conflicts.
    Each request gets its own container with its own database session.
    """
    return ServiceContainer(db=db)


async def get_otp_service(container: ServiceContainer = Depends(get_service_container)):
    """Get OtpService from container."""
    return container.get_otp_service()


async def get_payment_service(container: ServiceContainer = Depends(get_service_container)):
    """Get PaymentService from container."""
    return container.get_payment_service()
