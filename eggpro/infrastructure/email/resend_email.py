"""Resend email provider implementation."""

from typing import Optional
import logging
import time

import httpx

from eggpro.core.config import settings
from eggpro.domain.errors import ConfigurationError, ExternalServiceError, ErrorCode
from eggpro.domain.interfaces import IEmailProvider
from eggpro.infrastructure.monitoring.logging_setup import log_performance

logger = logging.getLogger(__name__)


class ResendEmailProvider(IEmailProvider):
    """Sends email through the Resend HTTP API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.sender = sender or settings.EMAIL_FROM
        self.base_url = (base_url or settings.RESEND_API_URL).rstrip("/")
        self.timeout = timeout or settings.EXTERNAL_REQUEST_TIMEOUT_SECONDS
        self._transport = transport

    async def send(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> str:
        """Send email via Resend."""
        if not self.api_key:
            raise ConfigurationError("Email provider is not configured", setting_names=["RESEND_API_KEY"])

        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html_content,
        }
        if text_content:
            payload["text"] = text_content

        start = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.TimeoutException:
            logger.error(f"Resend request timed out sending to {to}")
            raise ExternalServiceError(
                "Email provider timed out",
                service_name="resend",
                code=ErrorCode.EXTERNAL_SERVICE_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.error(f"Resend request failed sending to {to}: {str(e)}")
            raise ExternalServiceError(
                "Email provider is unreachable",
                service_name="resend",
                code=ErrorCode.EXTERNAL_SERVICE_UNAVAILABLE,
            )
        finally:
            log_performance(logger, operation="resend.send", duration=time.time() - start, resource="email")

        if response.status_code >= 400:
            reason = _error_message(response) or "Email delivery failed"
            logger.error(
                f"Resend rejected email to {to}",
                extra={"status_code": response.status_code, "provider_error": response.text[:500]},
            )
            raise ExternalServiceError(reason, service_name="resend")

        message_id = response.json().get("id", "")
        logger.info(f"Email sent to {to}", extra={"message_id": message_id})
        return message_id


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        return str(message) if message else None
    return None
