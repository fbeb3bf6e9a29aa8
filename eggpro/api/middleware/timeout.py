import asyncio
import logging
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from eggpro.core.config import settings

logger = logging.getLogger(__name__)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Enforce a global timeout on all requests."""

    def __init__(self, app, timeout: float = None):
        super().__init__(app)
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SECONDS

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Request timeout after {self.timeout}s: {request.url.path}")
            return JSONResponse(
                status_code=504,
                content={
                    "error": {
                        "code": "REQUEST_TIMEOUT",
                        "message": f"Request processing timed out after {self.timeout} seconds.",
                        "details": None
                    }
                }
            )
