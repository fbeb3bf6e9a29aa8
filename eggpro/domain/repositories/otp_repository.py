"""Repository for the email OTP table."""

from datetime import datetime
from typing import Optional
from sqlalchemy import select, delete, func
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from eggpro.domain.models.otp import EmailOtp

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class OtpRepository:
    """Repository for EmailOtp entity operations. At most one row per email."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[EmailOtp]:
        """Get the live OTP record for an email."""
        # Rows are rewritten by bulk statements; never trust a cached instance.
        result = await self.db.execute(
            select(EmailOtp)
            .where(EmailOtp.email == email)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert(self, email: str, otp_hash: str, expires_at: datetime) -> EmailOtp:
        """
        Insert or replace the OTP record for an email in one statement.

        Concurrent upserts for the same email never fail on the unique
        constraint; the last one to commit wins.
        """
        insert = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)
        if insert is None:
            return await self._upsert_read_then_write(email, otp_hash, expires_at)

        stmt = insert(EmailOtp).values(email=email, otp_hash=otp_hash, expires_at=expires_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[EmailOtp.email],
            set_={
                "otp_hash": stmt.excluded.otp_hash,
                "expires_at": stmt.excluded.expires_at,
                "updated_at": func.now(),
            },
        )
        await self.db.execute(stmt)
        return await self.get_by_email(email)

    async def _upsert_read_then_write(self, email: str, otp_hash: str, expires_at: datetime) -> EmailOtp:
        record = await self.get_by_email(email)
        if record:
            record.otp_hash = otp_hash
            record.expires_at = expires_at
        else:
            record = EmailOtp(email=email, otp_hash=otp_hash, expires_at=expires_at)
            self.db.add(record)
        await self.db.flush()
        return record

    async def delete_by_email(self, email: str) -> bool:
        """Delete the OTP record for an email. Returns True if a row was removed."""
        result = await self.db.execute(delete(EmailOtp).where(EmailOtp.email == email))
        await self.db.flush()
        return result.rowcount > 0

    async def delete_expired(self, now: datetime) -> int:
        """Delete all records whose expiry has passed."""
        result = await self.db.execute(delete(EmailOtp).where(EmailOtp.expires_at < now))
        await self.db.flush()
        return result.rowcount

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
