"""Unit tests for OtpRepository against in-memory SQLite."""

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from eggpro.core.security import hash_otp
from eggpro.domain.models import Base, EmailOtp
from eggpro.domain.repositories import OtpRepository
from tests._fixtures import OtpFactory, async_db


class TestOtpRepository:
    """Test cases for OtpRepository."""

    @pytest.mark.asyncio
    async def test_upsert_is_a_single_conflict_statement(self, async_db: AsyncSession):
        """Test the write does not depend on a prior read of the row."""
        statements = []

        def record(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement.strip().upper())

        engine = async_db.bind.sync_engine
        event.listen(engine, "before_cursor_execute", record)
        try:
            await OtpRepository(async_db).upsert(
                email="a@b.com",
                otp_hash=hash_otp("111111"),
                expires_at=datetime.now(timezone.utc) + timedelta(minutes=10),
            )
        finally:
            event.remove(engine, "before_cursor_execute", record)

        first = next(s for s in statements if s.startswith(("SELECT", "INSERT", "UPDATE")))
        assert first.startswith("INSERT INTO EMAIL_OTPS")
        assert "ON CONFLICT (EMAIL) DO UPDATE" in first

    @pytest.mark.asyncio
    async def test_upsert_replaces_existing_row(self, async_db: AsyncSession):
        """Test a second upsert for the same email overwrites instead of failing."""
        repo = OtpRepository(async_db)
        await OtpFactory.create(async_db, email="a@b.com", code="111111")

        later = datetime.now(timezone.utc) + timedelta(minutes=20)
        record = await repo.upsert(email="a@b.com", otp_hash=hash_otp("222222"), expires_at=later)
        await repo.commit()

        assert record.otp_hash == hash_otp("222222")
        count = await async_db.execute(select(func.count()).select_from(EmailOtp))
        assert count.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_last_writer_wins_across_sessions(self, tmp_path):
        """Test two sessions inserting a code for a new email both succeed."""
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'otp.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=10)

        try:
            async with factory() as first, factory() as second:
                assert await OtpRepository(first).get_by_email("a@b.com") is None
                assert await OtpRepository(second).get_by_email("a@b.com") is None

                await OtpRepository(first).upsert("a@b.com", hash_otp("111111"), expires_at)
                await first.commit()
                await OtpRepository(second).upsert("a@b.com", hash_otp("222222"), expires_at)
                await second.commit()

            async with factory() as check:
                record = await OtpRepository(check).get_by_email("a@b.com")
                assert record.otp_hash == hash_otp("222222")
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_delete_expired_only_removes_past_records(self, async_db: AsyncSession):
        """Test the sweep keeps live codes."""
        await OtpFactory.create(async_db, email="old@b.com", expires_in=timedelta(minutes=-5))
        await OtpFactory.create(async_db, email="live@b.com", expires_in=timedelta(minutes=5))
        repo = OtpRepository(async_db)

        removed = await repo.delete_expired(datetime.now(timezone.utc))
        await repo.commit()

        assert removed == 1
        assert await repo.get_by_email("old@b.com") is None
        assert await repo.get_by_email("live@b.com") is not None

    @pytest.mark.asyncio
    async def test_delete_by_email(self, async_db: AsyncSession):
        await OtpFactory.create(async_db, email="a@b.com")
        repo = OtpRepository(async_db)

        assert await repo.delete_by_email("a@b.com") is True
        assert await repo.delete_by_email("a@b.com") is False
