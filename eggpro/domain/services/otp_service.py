"""Email OTP issuance and redemption for signup."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from eggpro.core.security import generate_otp, hash_otp, is_well_formed_otp, verify_otp_hash
from eggpro.domain.errors import ConfigurationError, DomainError
from eggpro.domain.interfaces import IEmailProvider, IIdentityProvider
from eggpro.domain.repositories.otp_repository import OtpRepository
from eggpro.infrastructure.email.templates import (
    OTP_EMAIL_SUBJECT,
    render_otp_email_html,
    render_otp_email_text,
)

logger = logging.getLogger(__name__)


class OtpErrorKind(str, Enum):
    """Closed set of OTP failure kinds. Clients branch on these."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "OTP_NOT_FOUND"
    EXPIRED = "OTP_EXPIRED"
    INVALID_CODE = "INVALID_OTP"
    PASSWORD_REQUIRED = "PASSWORD_REQUIRED"
    DELIVERY_FAILED = "DELIVERY_FAILED"
    STORAGE_FAILED = "STORAGE_FAILED"
    ACCOUNT_CREATION_FAILED = "ACCOUNT_CREATION_FAILED"
    CONFIGURATION = "CONFIGURATION"


@dataclass
class OtpResult:
    """Outcome of an OTP operation: success, or a failure kind with a readable reason."""

    success: bool
    user_id: Optional[str] = None
    error_kind: Optional[OtpErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, user_id: Optional[str] = None) -> "OtpResult":
        return cls(success=True, user_id=user_id)

    @classmethod
    def fail(cls, kind: OtpErrorKind, message: str) -> "OtpResult":
        return cls(success=False, error_kind=kind, error=message)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class OtpService:
    """
    Issues 6-digit email codes and redeems them exactly once.

    Only the SHA-256 digest of a code is stored, keyed by normalized email,
    so issuing a new code replaces any outstanding one. Redemption creates
    the account through the identity provider.

    Delegates to:
    - OtpRepository for the email_otps table
    - IEmailProvider for code delivery
    - IIdentityProvider for account lookup/creation
    """

    def __init__(
        self,
        otp_repo: OtpRepository,
        email_provider: IEmailProvider,
        identity_provider: IIdentityProvider,
        otp_expire_minutes: int = 10,
        min_password_length: int = 6,
    ):
        self.otp_repo = otp_repo
        self.email_provider = email_provider
        self.identity_provider = identity_provider
        self.otp_expire_minutes = otp_expire_minutes
        self.min_password_length = min_password_length

    async def send(self, email: Optional[str]) -> OtpResult:
        """
        Generate a code for the email, store its digest and mail it.

        If delivery fails the stored record is removed again, so a live
        record always means the user was actually sent that code.
        """
        email = normalize_email(email)
        if not email:
            return OtpResult.fail(OtpErrorKind.VALIDATION, "Email is required")
        if "@" not in email:
            return OtpResult.fail(OtpErrorKind.VALIDATION, "Invalid email address")

        code = generate_otp()
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=self.otp_expire_minutes)

        try:
            await self.otp_repo.upsert(email=email, otp_hash=hash_otp(code), expires_at=expires_at)
            await self.otp_repo.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to store OTP for {email}: {str(e)}")
            await self.otp_repo.rollback()
            return OtpResult.fail(
                OtpErrorKind.STORAGE_FAILED,
                "Could not create a verification code. Please try again.",
            )

        try:
            await self.email_provider.send(
                to=email,
                subject=OTP_EMAIL_SUBJECT,
                html_content=render_otp_email_html(code),
                text_content=render_otp_email_text(code),
            )
        except DomainError as e:
            e.log(logger)
            await self._discard(email)
            if isinstance(e, ConfigurationError):
                return OtpResult.fail(OtpErrorKind.CONFIGURATION, "Email delivery is not configured")
            return OtpResult.fail(
                OtpErrorKind.DELIVERY_FAILED,
                f"Failed to send verification email: {e.message}",
            )

        logger.info(f"OTP sent to: {email}")
        return OtpResult.ok()

    async def verify(
        self,
        email: Optional[str],
        otp: Optional[str],
        password: Optional[str] = None,
        full_name: Optional[str] = None,
    ) -> OtpResult:
        """
        Redeem a code and create (or find) the account for the email.

        A wrong code leaves the record in place so the user can retry until
        expiry. A correct or expired code removes it.
        """
        email = normalize_email(email)
        code = (otp or "").strip()
        if not email:
            return OtpResult.fail(OtpErrorKind.VALIDATION, "Email is required")
        if not is_well_formed_otp(code):
            return OtpResult.fail(OtpErrorKind.VALIDATION, "OTP must be a 6-digit code")

        try:
            record = await self.otp_repo.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"OTP lookup failed for {email}: {str(e)}")
            return OtpResult.fail(OtpErrorKind.STORAGE_FAILED, "Could not check the code. Please try again.")

        if not record:
            return OtpResult.fail(OtpErrorKind.NOT_FOUND, "OTP not found. Please request a new one.")

        if record.is_expired(datetime.now(timezone.utc)):
            await self._discard(email)
            logger.info(f"Expired OTP presented for: {email}")
            return OtpResult.fail(OtpErrorKind.EXPIRED, "OTP expired. Please request a new one.")

        if not verify_otp_hash(code, record.otp_hash):
            logger.warning(f"Invalid OTP presented for: {email}")
            return OtpResult.fail(OtpErrorKind.INVALID_CODE, "Invalid OTP")

        # One-time use: consume before touching the identity provider.
        try:
            await self.otp_repo.delete_by_email(email)
            await self.otp_repo.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to consume OTP for {email}: {str(e)}")
            await self.otp_repo.rollback()
            return OtpResult.fail(OtpErrorKind.STORAGE_FAILED, "Could not check the code. Please try again.")

        try:
            existing = await self.identity_provider.get_user_by_email(email)
        except DomainError as e:
            e.log(logger)
            return self._account_failure(e, "Could not look up your account. Please try again.")

        if existing:
            logger.info(f"OTP verified for existing account: {existing.id}")
            return OtpResult.ok(user_id=existing.id)

        if not password or len(password) < self.min_password_length:
            return OtpResult.fail(
                OtpErrorKind.PASSWORD_REQUIRED,
                f"Password must be at least {self.min_password_length} characters",
            )

        try:
            account = await self.identity_provider.create_user(
                email=email,
                password=password,
                full_name=full_name,
                email_confirmed=True,
            )
        except DomainError as e:
            e.log(logger)
            return self._account_failure(e, e.message)

        logger.info(f"OTP verified, account created: {account.id}")
        return OtpResult.ok(user_id=account.id)

    async def _discard(self, email: str) -> None:
        try:
            await self.otp_repo.delete_by_email(email)
            await self.otp_repo.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete OTP for {email}: {str(e)}")
            await self.otp_repo.rollback()

    @staticmethod
    def _account_failure(error: DomainError, message: str) -> OtpResult:
        if isinstance(error, ConfigurationError):
            return OtpResult.fail(OtpErrorKind.CONFIGURATION, "Account service is not configured")
        return OtpResult.fail(OtpErrorKind.ACCOUNT_CREATION_FAILED, message)
