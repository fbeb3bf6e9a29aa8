"""Razorpay orders API client."""

from typing import Any, Dict, Optional
import logging
import time

import httpx

from eggpro.core.config import settings
from eggpro.domain.errors import ConfigurationError, ExternalServiceError, ErrorCode
from eggpro.domain.interfaces import IPaymentGateway
from eggpro.infrastructure.monitoring.logging_setup import log_performance

logger = logging.getLogger(__name__)


class RazorpayGateway(IPaymentGateway):
    """Creates Razorpay orders with basic auth (key id / key secret)."""

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._key_id = key_id if key_id is not None else settings.RAZORPAY_KEY_ID
        self._key_secret = key_secret if key_secret is not None else settings.RAZORPAY_KEY_SECRET
        self.base_url = (base_url or settings.RAZORPAY_API_URL).rstrip("/")
        self.timeout = timeout or settings.EXTERNAL_REQUEST_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def key_id(self) -> str:
        if not self._key_id:
            raise ConfigurationError("Razorpay credentials not configured", setting_names=["RAZORPAY_KEY_ID"])
        return self._key_id

    @property
    def key_secret(self) -> str:
        if not self._key_secret:
            raise ConfigurationError("Razorpay credentials not configured", setting_names=["RAZORPAY_KEY_SECRET"])
        return self._key_secret

    async def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        auth = (self.key_id, self.key_secret)

        start = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/orders",
                    json={"amount": amount, "currency": currency, "receipt": receipt},
                    auth=auth,
                )
        except httpx.TimeoutException:
            logger.error(f"Razorpay order creation timed out for receipt {receipt}")
            raise ExternalServiceError(
                "Payment gateway timed out",
                service_name="razorpay",
                code=ErrorCode.EXTERNAL_SERVICE_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.error(f"Razorpay order creation failed for receipt {receipt}: {str(e)}")
            raise ExternalServiceError(
                "Payment gateway is unreachable",
                service_name="razorpay",
                code=ErrorCode.EXTERNAL_SERVICE_UNAVAILABLE,
            )
        finally:
            log_performance(logger, operation="razorpay.create_order", duration=time.time() - start, resource="payment_gateway")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            logger.error(
                "Razorpay error",
                extra={"status_code": response.status_code, "provider_error": response.text[:500]},
            )
            error = data.get("error") if isinstance(data, dict) else None
            description = error.get("description") if isinstance(error, dict) else None
            raise ExternalServiceError(description or "Failed to create order", service_name="razorpay")

        logger.info(f"Razorpay order created: {data.get('id')}")
        return data
