"""
Application entrypoint: FastAPI app, lifecycle, middleware and error handlers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.infrastructure.observability.logging import get_logger, log_request, setup_logging
from app.middleware import CORSMiddleware, RequestContextMiddleware, build_cors_headers
from app.repositories.event_store import event_store
from app.routes import dashboard, data_management, health, stats, tracking
from app.services.aggregation_service import InvalidTimestampError

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tracking file on startup if it does not exist."""

    logger.info(
        "Application starting",
        environment=settings.environment,
        tracking_file=str(settings.TRACKING_FILE),
        report_timezone=settings.REPORT_TIMEZONE,
    )

    try:
        event_store.initialize()
    except Exception as e:
        logger.error("Failed to initialize tracking file", error=str(e), error_type=type(e).__name__)
        raise

    logger.info("Ready to track email opens")

    yield

    logger.info("Application shutting down")


app = FastAPI(
    title="Newsletter Open Tracker",
    description="Tracking pixel and open analytics for internal newsletters",
    version="0.1.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(tracking.router)
app.include_router(stats.router)
app.include_router(dashboard.router)
app.include_router(data_management.router)
app.include_router(health.router)

# Middleware runs in reverse order of registration: CORS wraps RequestContext
app.add_middleware(RequestContextMiddleware)
app.add_middleware(CORSMiddleware, **settings.cors_config())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Structured JSON errors; unmatched routes get the 404 body."""
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(InvalidTimestampError)
async def invalid_timestamp_handler(request: Request, exc: InvalidTimestampError):
    logger.error(
        "Tracking data is corrupt",
        path=request.url.path,
        timestamp=repr(exc.timestamp),
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Tracking data is corrupt", "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Last-resort handler. Runs outside the middleware stack, so CORS
    headers are attached here directly.
    """
    logger.error(
        "Server error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=build_cors_headers(request.headers.get("origin"), **settings.cors_config()),
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
