"""Dependency injection container for service instantiation and composition."""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from eggpro.domain.services import OtpService, PaymentService
from eggpro.domain.repositories import OtpRepository, OrderRepository, UserRepository
from eggpro.domain.interfaces import IEmailProvider, IIdentityProvider, IPaymentGateway
from eggpro.infrastructure.email.resend_email import ResendEmailProvider
from eggpro.infrastructure.identity.database_identity import DatabaseIdentityProvider
from eggpro.infrastructure.identity.supabase_identity import SupabaseIdentityProvider
from eggpro.infrastructure.payments.razorpay_gateway import RazorpayGateway
from eggpro.core.config import settings

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Dependency injection container providing centralized service composition.

    Responsibilities:
    - Initialize infrastructure providers
    - Create repositories
    - Instantiate services

    Hosted providers are always the real ones unless injected; missing
    credentials surface as ConfigurationError when a provider is first used.

    Usage:
        container = ServiceContainer(db_session)
        otp_service = container.get_otp_service()
    """

    def __init__(
        self,
        db: AsyncSession,
        email_provider: Optional[IEmailProvider] = None,
        identity_provider: Optional[IIdentityProvider] = None,
        payment_gateway: Optional[IPaymentGateway] = None,
    ):
        self.db = db
        self.email_provider = email_provider or ResendEmailProvider()
        self.payment_gateway = payment_gateway or RazorpayGateway()

        # Identity provider - use Supabase auth if configured, otherwise the local users table
        if identity_provider:
            self.identity_provider = identity_provider
        elif settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY:
            self.identity_provider = SupabaseIdentityProvider()
        else:
            self.identity_provider = DatabaseIdentityProvider(self.get_user_repository())

        logger.debug(
            "ServiceContainer initialized",
            extra={
                "email_provider": self.email_provider.__class__.__name__,
                "identity_provider": self.identity_provider.__class__.__name__,
                "payment_gateway": self.payment_gateway.__class__.__name__,
            },
        )

    # ========================================================================
    # REPOSITORY FACTORIES
    # ========================================================================

    def get_otp_repository(self) -> OtpRepository:
        return OtpRepository(self.db)

    def get_order_repository(self) -> OrderRepository:
        return OrderRepository(self.db)

    def get_user_repository(self) -> UserRepository:
        return UserRepository(self.db)

    # ========================================================================
    # SERVICE FACTORIES
    # ========================================================================

    def get_otp_service(self) -> OtpService:
        """
        Get OtpService instance.

        Service composition:
        - OtpRepository (email_otps table)
        - IEmailProvider (code delivery)
        - IIdentityProvider (account lookup/creation)
        """
        return OtpService(
            otp_repo=self.get_otp_repository(),
            email_provider=self.email_provider,
            identity_provider=self.identity_provider,
            otp_expire_minutes=settings.OTP_EXPIRE_MINUTES,
            min_password_length=settings.MIN_PASSWORD_LENGTH,
        )

    def get_payment_service(self) -> PaymentService:
        """
        Get PaymentService instance.

        Service composition:
        - OrderRepository (orders table)
        - IPaymentGateway (order creation, signing secret)
        - IEmailProvider (optional admin order email)
        """
        return PaymentService(
            order_repo=self.get_order_repository(),
            payment_gateway=self.payment_gateway,
            email_provider=self.email_provider,
            default_currency=settings.DEFAULT_CURRENCY,
            admin_phone=settings.ADMIN_PHONE,
            admin_email=settings.ADMIN_EMAIL,
        )
