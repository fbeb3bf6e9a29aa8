"""In-memory payment gateway for testing."""

from typing import Any, Dict, List, Optional
import uuid

from eggpro.domain.errors import ExternalServiceError
from eggpro.domain.interfaces import IPaymentGateway


class MockPaymentGateway(IPaymentGateway):
    """Records created orders and returns Razorpay-shaped documents."""

    def __init__(self, key_id: str = "rzp_test_key", key_secret: str = "test_secret", fail_with: Optional[str] = None):
        self._key_id = key_id
        self._key_secret = key_secret
        self.fail_with = fail_with
        self.orders: List[Dict[str, Any]] = []

    @property
    def key_id(self) -> str:
        return self._key_id

    @property
    def key_secret(self) -> str:
        return self._key_secret

    async def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        if self.fail_with:
            raise ExternalServiceError(self.fail_with, service_name="mock_gateway")

        order = {
            "id": f"order_{uuid.uuid4().hex[:14]}",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }
        self.orders.append(order)
        return order
