"""
Smoke Check Job - Exercise a running server's public endpoints.

Hits /health, /track, /stats, /stats/test-2025 and an unknown path, and
checks each response against what the endpoint promises. Note that the
/track check records one real open for test@company.com.

Usage:
    SMOKE_CHECK_BASE_URL=http://localhost:3000 python -m app.jobs.worker smoke_check
"""

from dataclasses import dataclass

import httpx

from app.config import settings
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SMOKE_TIMEOUT_SECONDS = 10.0


@dataclass(slots=True)
class SmokeCheckResult:
    name: str
    path: str
    ok: bool
    status_code: int | None = None
    detail: str | None = None


def _check_health(response: httpx.Response) -> str | None:
    if response.status_code != 200 or response.json().get("status") != "ok":
        return "health endpoint did not report ok"
    return None


def _check_pixel(response: httpx.Response) -> str | None:
    if response.status_code != 200:
        return "pixel request failed"
    if response.headers.get("content-type") != "image/png":
        return f"unexpected content type {response.headers.get('content-type')}"
    if "no-store" not in response.headers.get("cache-control", ""):
        return "pixel response is cacheable"
    return None


def _check_stats(response: httpx.Response) -> str | None:
    body = response.json()
    if response.status_code != 200 or "totalOpens" not in body or "uniqueUsers" not in body:
        return "stats payload missing totals"
    return None


def _check_newsletter(response: httpx.Response) -> str | None:
    body = response.json()
    if response.status_code != 200 or body.get("newsletter") != "test-2025":
        return "newsletter stats payload missing newsletter key"
    return None


def _check_not_found(response: httpx.Response) -> str | None:
    if response.status_code != 404 or response.json().get("error") != "Endpoint not found":
        return "unknown path did not return the structured 404"
    return None


SMOKE_CHECKS = [
    ("health", "/health", _check_health),
    (
        "tracking_pixel",
        "/track?email=test@company.com&user=Test%20User&newsletter=test-2025",
        _check_pixel,
    ),
    ("stats", "/stats", _check_stats),
    ("newsletter_stats", "/stats/test-2025", _check_newsletter),
    ("not_found", "/nonexistent", _check_not_found),
]


async def run_smoke_check(
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SmokeCheckResult]:
    """
    Run every smoke check against `base_url` and log the outcome.

    Args:
        base_url: Server root, defaults to SMOKE_CHECK_BASE_URL
        transport: Optional httpx transport (e.g. ASGITransport in tests)

    Returns:
        One result per check, in execution order
    """
    base_url = base_url or settings.SMOKE_CHECK_BASE_URL
    results: list[SmokeCheckResult] = []

    logger.info("Starting smoke check", base_url=base_url)

    async with httpx.AsyncClient(
        base_url=base_url, transport=transport, timeout=SMOKE_TIMEOUT_SECONDS
    ) as client:
        for name, path, check in SMOKE_CHECKS:
            try:
                response = await client.get(path)
                problem = check(response)
                result = SmokeCheckResult(
                    name=name,
                    path=path,
                    ok=problem is None,
                    status_code=response.status_code,
                    detail=problem,
                )
            except (httpx.HTTPError, ValueError) as e:
                result = SmokeCheckResult(
                    name=name, path=path, ok=False, detail=f"{type(e).__name__}: {e}"
                )

            if result.ok:
                logger.info("Smoke check passed", check=name, status_code=result.status_code)
            else:
                logger.error(
                    "Smoke check failed",
                    check=name,
                    status_code=result.status_code,
                    detail=result.detail,
                )
            results.append(result)

    failed = [result.name for result in results if not result.ok]
    logger.info("Smoke check completed", passed=len(results) - len(failed), failed=failed)
    return results
