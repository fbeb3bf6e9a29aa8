"""
Abstract interfaces for infrastructure providers.

Services depend on these contracts, never on a concrete provider. This enables:
- Dependency injection without coupling
- Testability via mock implementations
- Swapping hosted providers without touching business logic
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


# ============================================================================
# EMAIL
# ============================================================================

class IEmailProvider(ABC):
    """Email provider for sending emails."""

    @abstractmethod
    async def send(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> str:
        """
        Send email.

        Returns:
            Provider message id

        Raises:
            ConfigurationError: provider credentials missing
            ExternalServiceError: provider rejected or could not be reached
        """
        pass


# ============================================================================
# IDENTITY
# ============================================================================

@dataclass
class Account:
    """Account as seen through the identity provider."""

    id: str
    email: str
    full_name: Optional[str] = None


class IIdentityProvider(ABC):
    """Account/credential service. Owns accounts; we only reference them."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[Account]:
        """Return the account registered for an email, if any."""
        pass

    @abstractmethod
    async def create_user(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        email_confirmed: bool = True,
    ) -> Account:
        """
        Create an account.

        Raises:
            ConfigurationError: provider credentials missing
            ExternalServiceError: provider refused the account
        """
        pass


# ============================================================================
# PAYMENTS
# ============================================================================

class IPaymentGateway(ABC):
    """Hosted payment gateway."""

    @property
    @abstractmethod
    def key_id(self) -> str:
        """Public key id handed to the client-side checkout widget."""
        pass

    @property
    @abstractmethod
    def key_secret(self) -> str:
        """Secret used to sign checkout callbacks. Never returned to clients."""
        pass

    @abstractmethod
    async def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        """
        Create a gateway order.

        Args:
            amount: Amount in minor currency units (paise for INR)
            currency: ISO currency code
            receipt: Merchant receipt reference

        Returns:
            Gateway order document (at least 'id', 'amount', 'currency')
        """
        pass
