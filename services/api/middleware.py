"""Security and webhook authentication middleware."""

from __future__ import annotations

import hmac
from typing import Any, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

WEBHOOK_KEY_HEADER = "x-lakemirror-key"


class WebhookKeyMiddleware(BaseHTTPMiddleware):
    """Require a shared secret on event deliveries.

    Event Grid cannot send custom auth headers to plain webhooks, so the key
    may come either as ``?code=`` on the subscription URL or as a header.
    """

    def __init__(
        self,
        app: Any,
        *,
        secret: str | None,
        protected_prefix: str = "/v1/events",
    ) -> None:
        """Initialize the key check.

        Args:
            app: FastAPI application.
            secret: Expected key. None disables the check.
            protected_prefix: Path prefix the check applies to.
        """
        super().__init__(app)
        self.secret = secret
        self.protected_prefix = protected_prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.secret and request.url.path.startswith(self.protected_prefix):
            supplied = request.query_params.get("code") or request.headers.get(WEBHOOK_KEY_HEADER) or ""
            if not hmac.compare_digest(supplied.encode("utf-8"), self.secret.encode("utf-8")):
                client_ip = request.client.host if request.client else "unknown"
                logger.warning("Rejected event delivery with invalid key", client=client_ip)
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"error": "Unauthorized", "message": "Invalid or missing webhook key"},
                )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
