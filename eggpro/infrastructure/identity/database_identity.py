"""Identity provider backed by the local users table."""

from datetime import datetime, timezone
from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from eggpro.core.security import get_password_hash
from eggpro.domain.errors import ExternalServiceError, ErrorCode
from eggpro.domain.interfaces import Account, IIdentityProvider
from eggpro.domain.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class DatabaseIdentityProvider(IIdentityProvider):
    """Stores accounts in the record store with bcrypt password hashes."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def get_user_by_email(self, email: str) -> Optional[Account]:
        try:
            user = await self.user_repo.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed for {email}: {str(e)}")
            raise ExternalServiceError(
                "Account lookup failed",
                service_name="database",
                code=ErrorCode.DATABASE_ERROR,
            )
        if not user:
            return None
        return Account(id=user.id, email=user.email, full_name=user.full_name)

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        email_confirmed: bool = True,
    ) -> Account:
        confirmed_at = datetime.now(timezone.utc) if email_confirmed else None
        try:
            user = await self.user_repo.create(
                email=email,
                hashed_password=get_password_hash(password),
                full_name=full_name,
                email_confirmed_at=confirmed_at,
            )
            await self.user_repo.commit()
        except IntegrityError:
            await self.user_repo.rollback()
            logger.warning(f"Account for {email} was created concurrently")
            raise ExternalServiceError(
                "An account with this email already exists",
                service_name="database",
                code=ErrorCode.DATABASE_ERROR,
            )
        except SQLAlchemyError as e:
            await self.user_repo.rollback()
            logger.error(f"User creation failed for {email}: {str(e)}")
            raise ExternalServiceError(
                "Account creation failed",
                service_name="database",
                code=ErrorCode.DATABASE_ERROR,
            )

        logger.info(f"Account created: {user.id}")
        return Account(id=user.id, email=user.email, full_name=user.full_name)
