"""Mock email provider for testing."""

from typing import Optional
import logging
import uuid

from eggpro.domain.interfaces import IEmailProvider
from eggpro.domain.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class MockEmailProvider(IEmailProvider):
    """Mock email provider that records messages instead of sending."""

    def __init__(self, fail_with: Optional[str] = None):
        self.sent_emails = []
        self.fail_with = fail_with

    async def send(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> str:
        """Record email instead of sending."""
        if self.fail_with:
            raise ExternalServiceError(self.fail_with, service_name="mock_email")

        self.sent_emails.append({
            "to": to,
            "subject": subject,
            "html_content": html_content,
            "text_content": text_content,
        })
        logger.info(f"Mock email sent to {to}: {subject}")
        return f"mock-{uuid.uuid4().hex[:12]}"
