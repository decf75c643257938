"""
Middleware components for request processing.

This package contains middleware for:
- Request context (request ID, IP address, user agent)
- CORS (permissive cross-origin access to the stats endpoints)
"""

from app.middleware.cors import CORSMiddleware, build_cors_headers
from app.middleware.request_context import RequestContextMiddleware, extract_client_ip

__all__ = [
    "RequestContextMiddleware",
    "CORSMiddleware",
    "build_cors_headers",
    "extract_client_ip",
]
