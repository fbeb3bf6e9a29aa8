"""Supabase (GoTrue) admin API identity provider."""

from typing import Any, Dict, Optional
import logging

import httpx

from eggpro.core.config import settings
from eggpro.domain.errors import ConfigurationError, ExternalServiceError, ErrorCode
from eggpro.domain.interfaces import Account, IIdentityProvider

logger = logging.getLogger(__name__)

MAX_LOOKUP_PAGES = 20


class SupabaseIdentityProvider(IIdentityProvider):
    """Creates and looks up accounts with the service-role key."""

    def __init__(
        self,
        url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        page_size: int = 100,
    ):
        self.url = (url or settings.SUPABASE_URL or "").rstrip("/")
        self.service_role_key = service_role_key or settings.SUPABASE_SERVICE_ROLE_KEY
        self.timeout = timeout or settings.EXTERNAL_REQUEST_TIMEOUT_SECONDS
        self._transport = transport
        self.page_size = page_size

    def _headers(self) -> Dict[str, str]:
        if not self.url or not self.service_role_key:
            raise ConfigurationError(
                "Identity provider is not configured",
                setting_names=["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"],
            )
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
        }

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = self._headers()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, f"{self.url}/auth/v1{path}", headers=headers, **kwargs)
        except httpx.TimeoutException:
            logger.error(f"Supabase auth {method} {path} timed out")
            raise ExternalServiceError(
                "Identity provider timed out",
                service_name="supabase",
                code=ErrorCode.EXTERNAL_SERVICE_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase auth {method} {path} failed: {str(e)}")
            raise ExternalServiceError(
                "Identity provider is unreachable",
                service_name="supabase",
                code=ErrorCode.EXTERNAL_SERVICE_UNAVAILABLE,
            )

    async def get_user_by_email(self, email: str) -> Optional[Account]:
        # The filter is a substring match and results are paged; require the
        # exact address and keep reading until a short page.
        for page in range(1, MAX_LOOKUP_PAGES + 1):
            response = await self._request(
                "GET",
                "/admin/users",
                params={"filter": email, "page": page, "per_page": self.page_size},
            )
            if response.status_code >= 400:
                logger.error(
                    "Supabase user lookup failed",
                    extra={"status_code": response.status_code, "provider_error": response.text[:500]},
                )
                raise ExternalServiceError("Account lookup failed", service_name="supabase")

            users = response.json().get("users", [])
            for user in users:
                if (user.get("email") or "").lower() == email:
                    return _to_account(user)
            if len(users) < self.page_size:
                return None

        logger.error(f"Supabase user lookup for {email} exceeded {MAX_LOOKUP_PAGES} pages")
        raise ExternalServiceError("Account lookup failed", service_name="supabase")

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        email_confirmed: bool = True,
    ) -> Account:
        response = await self._request(
            "POST",
            "/admin/users",
            json={
                "email": email,
                "password": password,
                "email_confirm": email_confirmed,
                "user_metadata": {"full_name": full_name},
            },
        )
        if response.status_code >= 400:
            body = _safe_json(response)
            reason = body.get("msg") or body.get("message") or body.get("error_description") or "Account creation failed"
            logger.error(
                "Supabase user creation failed",
                extra={"status_code": response.status_code, "provider_error": response.text[:500]},
            )
            raise ExternalServiceError(str(reason), service_name="supabase")

        body = response.json()
        # Older GoTrue versions wrap the user object.
        user = body.get("user", body)
        logger.info(f"Account created: {user.get('id')}")
        return _to_account(user)


def _to_account(user: Dict[str, Any]) -> Account:
    metadata = user.get("user_metadata") or {}
    return Account(id=str(user["id"]), email=user.get("email", ""), full_name=metadata.get("full_name"))


def _safe_json(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
