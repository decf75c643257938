"""
RequestContext Middleware - Adds request tracking to all requests.

This middleware automatically adds the following to every request:
- request_id: Unique ID for request tracing
- ip_address: Client IP address ("unknown" if unavailable)
- user_agent: Client user agent string ("unknown" if absent)

These values are stored in request.state and are used by:
- Open-event ingestion (ip and user agent of the email client)
- Request logging (request_id is bound into every log entry)

Usage:
    In endpoints:
        request.state.request_id
        request.state.ip_address
        request.state.user_agent
"""

import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.open_event import UNKNOWN

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Add request context to all incoming requests.

    Adds to request.state:
    - request_id: UUID for tracing this request
    - ip_address: Client IP address
    - user_agent: Client user agent string

    Also adds X-Request-ID header to responses for client-side tracing.
    """

    async def dispatch(self, request: Request, call_next):
        """Process request and add context."""

        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.ip_address = extract_client_ip(request)
        request.state.user_agent = request.headers.get("user-agent") or UNKNOWN

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            logger.debug(
                "Request started",
                method=request.method,
                path=request.url.path,
                ip_address=request.state.ip_address,
                user_agent=request.state.user_agent,
            )

            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id

        return response


def extract_client_ip(request: Request) -> str:
    """
    Extract the client IP address.

    Honors X-Forwarded-For when TRUST_X_FORWARDED_FOR is enabled and the
    peer is a trusted proxy (an empty TRUSTED_PROXY_IPS trusts any peer).
    X-Forwarded-For format: "client, proxy1, proxy2" - the first entry is
    the original client.

    Args:
        request: FastAPI Request

    Returns:
        Client IP address or "unknown"
    """
    peer_ip = request.client.host if request.client else None

    if settings.TRUST_X_FORWARDED_FOR:
        trusted_peer = not settings.TRUSTED_PROXY_IPS or peer_ip in settings.TRUSTED_PROXY_IPS
        forwarded_for = request.headers.get("x-forwarded-for")
        if trusted_peer and forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
            if client_ip:
                return client_ip

    return peer_ip or UNKNOWN
