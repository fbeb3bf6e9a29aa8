"""Test fixtures and factories for service tests."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eggpro.core.security import get_password_hash, hash_otp
from eggpro.domain.models.order import Order
from eggpro.domain.models.otp import EmailOtp
from eggpro.domain.models.user import User
from eggpro.domain.repositories import OrderRepository, OtpRepository, UserRepository
from eggpro.infrastructure.email.mock_email import MockEmailProvider
from eggpro.infrastructure.identity.database_identity import DatabaseIdentityProvider
from eggpro.infrastructure.payments.mock_gateway import MockPaymentGateway


# ============================================================================
# PYTEST FIXTURES
# ============================================================================

@pytest.fixture
async def async_db():
    """Create an in-memory SQLite database for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    # Create all tables
    async with engine.begin() as conn:
        from eggpro.domain.models import Base
        await conn.run_sync(Base.metadata.create_all)

    # Create sessionmaker
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def mock_email():
    """Create a mock email provider."""
    return MockEmailProvider()


@pytest.fixture
def mock_gateway():
    """Create a mock payment gateway."""
    return MockPaymentGateway()


@pytest.fixture
def local_identity(async_db: AsyncSession):
    """Identity provider backed by the test database."""
    return DatabaseIdentityProvider(UserRepository(async_db))


# ============================================================================
# DATA FACTORIES
# ============================================================================

class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create(
        db: AsyncSession,
        email: str = "test@example.com",
        password: str = "secret123",
        full_name: str = "Test User",
    ) -> User:
        """Create a test user."""
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            full_name=full_name,
            email_confirmed_at=datetime.now(timezone.utc),
        )
        db.add(user)
        await db.flush()
        return user


class OtpFactory:
    """Factory for creating stored OTP records."""

    @staticmethod
    async def create(
        db: AsyncSession,
        email: str = "test@example.com",
        code: str = "123456",
        expires_in: timedelta = timedelta(minutes=10),
    ) -> EmailOtp:
        """Store the digest of a known code."""
        record = await OtpRepository(db).upsert(
            email=email,
            otp_hash=hash_otp(code),
            expires_at=datetime.now(timezone.utc) + expires_in,
        )
        await db.commit()
        return record


class OrderFactory:
    """Factory for creating test orders."""

    @staticmethod
    async def create(
        db: AsyncSession,
        total_amount: Decimal = Decimal("120"),
        customer_name: str = "Asha",
        phone: str = "9876543210",
        community: str = "Green Meadows",
        address: str = "Tower B, 1204",
    ) -> Order:
        """Create a pending order."""
        order = await OrderRepository(db).create(
            total_amount=total_amount,
            items=[{"name": "Farm Eggs (12)", "quantity": 2, "price": 60}],
            customer_name=customer_name,
            phone=phone,
            community=community,
            address=address,
        )
        await db.commit()
        return order
