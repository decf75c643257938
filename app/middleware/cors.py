"""
CORS Middleware - Cross-Origin Resource Sharing configuration.

The stats endpoints are consumed by internal dashboards and scripts hosted
on other origins, so the default policy is fully permissive ("*").

Usage:
    from app.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allowed_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
    )

Headers added:
- Access-Control-Allow-Origin: Which origin is allowed ("*" or the request origin)
- Access-Control-Allow-Methods: Which HTTP methods allowed
- Access-Control-Allow-Headers: Which headers allowed
- Access-Control-Allow-Credentials: Whether cookies/auth allowed (never with "*")
- Access-Control-Max-Age: How long to cache preflight responses (preflight only)
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

WILDCARD = "*"
DEFAULT_METHODS = ["GET", "POST", "OPTIONS"]
DEFAULT_HEADERS = ["Origin", "X-Requested-With", "Content-Type", "Accept"]


def build_cors_headers(
    origin: str | None,
    allowed_origins: list[str],
    allow_methods: list[str] | None = None,
    allow_headers: list[str] | None = None,
    allow_credentials: bool = False,
) -> dict[str, str]:
    """
    Headers granted to a request from `origin`.

    Returns an empty dict when the origin is not allowed.
    """
    if WILDCARD in allowed_origins:
        allow_origin = WILDCARD
    elif origin and origin in allowed_origins:
        allow_origin = origin
    else:
        return {}

    headers = {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ", ".join(allow_methods or DEFAULT_METHODS),
        "Access-Control-Allow-Headers": ", ".join(allow_headers or DEFAULT_HEADERS),
    }
    # Browsers reject credentials combined with a wildcard origin
    if allow_credentials and allow_origin != WILDCARD:
        headers["Access-Control-Allow-Credentials"] = "true"
    return headers


class CORSMiddleware(BaseHTTPMiddleware):
    """
    CORS (Cross-Origin Resource Sharing) middleware.

    Handles preflight OPTIONS requests and adds CORS headers to responses.
    """

    def __init__(
        self,
        app,
        allowed_origins: list[str] | None = None,
        allow_credentials: bool = False,
        allow_methods: list[str] | None = None,
        allow_headers: list[str] | None = None,
        max_age: int = 600,
    ):
        """
        Initialize CORS middleware.

        Args:
            app: FastAPI application
            allowed_origins: Allowed origins; ["*"] allows every origin
            allow_credentials: Whether to allow credentials (ignored for "*")
            allow_methods: Allowed HTTP methods
            allow_headers: Allowed request headers
            max_age: How long (seconds) to cache preflight responses
        """
        super().__init__(app)
        self.allowed_origins = allowed_origins if allowed_origins is not None else [WILDCARD]
        self.allow_credentials = allow_credentials
        self.allow_methods = allow_methods or DEFAULT_METHODS
        self.allow_headers = allow_headers or DEFAULT_HEADERS
        self.max_age = max_age

        logger.info(
            "CORS middleware initialized",
            allowed_origins=self.allowed_origins,
            allow_credentials=self.allow_credentials,
        )

    async def dispatch(self, request, call_next):
        """
        Process request and add CORS headers.

        Handles:
        1. Preflight OPTIONS requests (return immediately)
        2. Regular requests (add CORS headers to response)
        """
        origin = request.headers.get("origin")
        headers = build_cors_headers(
            origin,
            self.allowed_origins,
            self.allow_methods,
            self.allow_headers,
            self.allow_credentials,
        )

        if request.method == "OPTIONS":
            if not headers:
                logger.warning(
                    "CORS preflight rejected - origin not allowed",
                    origin=origin,
                    allowed_origins=self.allowed_origins,
                )
                return Response(status_code=403, content="Origin not allowed")
            return Response(
                status_code=204,
                headers={**headers, "Access-Control-Max-Age": str(self.max_age)},
            )

        response = await call_next(request)

        if headers:
            response.headers.update(headers)
        elif origin:
            logger.warning(
                "CORS request from disallowed origin",
                origin=origin,
                path=request.url.path,
            )

        return response
