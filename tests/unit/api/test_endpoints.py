"""HTTP surface tests: FastAPI app over ASGITransport with injected providers."""

import pytest
import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from eggpro.api.deps import get_service_container
from eggpro.core.security import compute_payment_signature
from eggpro.domain.repositories import OrderRepository, UserRepository
from eggpro.infrastructure.container import ServiceContainer
from eggpro.infrastructure.email.mock_email import MockEmailProvider
from eggpro.infrastructure.payments.mock_gateway import MockPaymentGateway
from eggpro.infrastructure.payments.razorpay_gateway import RazorpayGateway
from eggpro.main import app
from tests._fixtures import OrderFactory, OtpFactory, async_db, local_identity, mock_email


class TestApi:

    @pytest.fixture
    def gateway(self):
        return MockPaymentGateway()

    @pytest.fixture
    async def client(self, async_db: AsyncSession, mock_email: MockEmailProvider, local_identity, gateway):
        """Client whose requests share the test session and mock providers."""

        async def override_container():
            return ServiceContainer(
                db=async_db,
                email_provider=mock_email,
                identity_provider=local_identity,
                payment_gateway=gateway,
            )

        app.dependency_overrides[get_service_container] = override_container
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        app.dependency_overrides.clear()

    # ========================================================================
    # SYSTEM
    # ========================================================================

    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "eggpro-backend"}
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_versioned_health(self, client: httpx.AsyncClient):
        response = await client.get("/api/v1/health/live")

        assert response.json()["status"] == "alive"

    # ========================================================================
    # OTP
    # ========================================================================

    @pytest.mark.asyncio
    async def test_send_otp(self, client: httpx.AsyncClient, mock_email: MockEmailProvider):
        response = await client.post("/api/v1/otp/send", json={"email": "a@b.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert mock_email.sent_emails[0]["to"] == "a@b.com"

    @pytest.mark.asyncio
    async def test_send_otp_without_email(self, client: httpx.AsyncClient):
        response = await client.post("/api/v1/otp/send", json={})

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "Email is required", "code": "VALIDATION"}

    @pytest.mark.asyncio
    async def test_verify_otp_creates_account(self, async_db: AsyncSession, client: httpx.AsyncClient):
        await OtpFactory.create(async_db, email="a@b.com", code="123456")

        response = await client.post(
            "/api/v1/otp/verify",
            json={"email": "a@b.com", "otp": "123456", "password": "secret1", "fullName": "Asha"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        user = await UserRepository(async_db).get_by_email("a@b.com")
        assert body["userId"] == user.id
        assert user.full_name == "Asha"

    @pytest.mark.asyncio
    async def test_verify_wrong_otp(self, async_db: AsyncSession, client: httpx.AsyncClient):
        await OtpFactory.create(async_db, email="a@b.com", code="123456")

        response = await client.post(
            "/api/v1/otp/verify",
            json={"email": "a@b.com", "otp": "000000", "password": "secret1"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "Invalid OTP", "code": "INVALID_OTP"}

    @pytest.mark.asyncio
    async def test_email_otp_action_dispatch(self, async_db: AsyncSession, client: httpx.AsyncClient):
        sent = await client.post("/api/v1/email-otp", json={"action": "send", "email": "b@c.com"})
        assert sent.json() == {"success": True}

        await OtpFactory.create(async_db, email="b@c.com", code="222222")
        verified = await client.post(
            "/api/v1/email-otp",
            json={"action": "verify", "email": "b@c.com", "otp": "222222", "password": "secret1"},
        )
        assert verified.json()["success"] is True
        assert verified.json()["userId"]

    @pytest.mark.asyncio
    async def test_email_otp_unknown_action(self, client: httpx.AsyncClient):
        response = await client.post("/api/v1/email-otp", json={"action": "resend", "email": "a@b.com"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid action"}

    # ========================================================================
    # PAYMENTS
    # ========================================================================

    @pytest.mark.asyncio
    async def test_create_order(self, client: httpx.AsyncClient, gateway: MockPaymentGateway):
        response = await client.post("/api/v1/payments/orders", json={"amount": 500, "receipt": "r1"})

        assert response.status_code == 200
        assert response.json() == {
            "orderId": gateway.orders[0]["id"],
            "amount": 50000,
            "currency": "INR",
            "keyId": "rzp_test_key",
        }

    @pytest.mark.asyncio
    async def test_create_order_invalid_amount(self, client: httpx.AsyncClient):
        response = await client.post("/api/v1/payments/orders", json={"amount": 0})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_create_order_gateway_failure(self, async_db: AsyncSession, client: httpx.AsyncClient, gateway):
        gateway.fail_with = "Authentication failed"

        response = await client.post("/api/v1/payments/orders", json={"amount": 500})

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "Authentication failed"

    @pytest.mark.asyncio
    async def test_create_order_unconfigured(self, async_db: AsyncSession, mock_email, local_identity):
        async def override_container():
            return ServiceContainer(
                db=async_db,
                email_provider=mock_email,
                identity_provider=local_identity,
                payment_gateway=RazorpayGateway(key_id="", key_secret=""),
            )

        app.dependency_overrides[get_service_container] = override_container
        try:
            async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post("/api/v1/payments/orders", json={"amount": 500})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "CONFIGURATION_ERROR"
        assert error["details"] is None

    @pytest.mark.asyncio
    async def test_verify_payment(self, async_db: AsyncSession, client: httpx.AsyncClient, gateway):
        order = await OrderFactory.create(async_db)

        response = await client.post(
            "/api/v1/payments/verify",
            json={
                "razorpay_order_id": "order_abc",
                "razorpay_payment_id": "pay_xyz",
                "razorpay_signature": compute_payment_signature("order_abc", "pay_xyz", gateway.key_secret),
                "orderId": order.id,
                "customerName": "Asha",
                "phone": "9876543210",
                "community": "Green Meadows",
                "address": "Tower B, 1204",
                "items": [{"name": "Farm Eggs (12)", "quantity": 2, "price": 60}],
                "totalAmount": 120,
                "subscriptionEndDate": "2026-12-31T00:00:00Z",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["whatsappUrl"].startswith("https://wa.me/")

        stored = await OrderRepository(async_db).get_by_id(order.id)
        assert stored.payment_status == "paid"
        assert stored.order_status == "confirmed"

    @pytest.mark.asyncio
    async def test_verify_payment_bad_signature(self, async_db: AsyncSession, client: httpx.AsyncClient):
        order = await OrderFactory.create(async_db)

        response = await client.post(
            "/api/v1/payments/verify",
            json={
                "razorpay_order_id": "order_abc",
                "razorpay_payment_id": "pay_xyz",
                "razorpay_signature": "0" * 64,
                "orderId": order.id,
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "INVALID_SIGNATURE",
            "message": "Invalid payment signature",
            "details": None,
        }
        stored = await OrderRepository(async_db).get_by_id(order.id)
        assert stored.payment_status == "pending"

    @pytest.mark.asyncio
    async def test_verify_payment_missing_fields(self, client: httpx.AsyncClient):
        response = await client.post("/api/v1/payments/verify", json={"razorpay_order_id": "order_abc"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"
