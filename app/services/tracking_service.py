"""
Open-event ingestion.

Builds OpenEventRecords from tracking pixel requests and appends them to the
event store. Ingestion is best-effort: inputs are defaulted rather than
rejected, and store failures are logged instead of surfaced, because the
email client must always receive the pixel.
"""

import asyncio
import base64
from datetime import datetime

from app.infrastructure.observability.logging import get_logger
from app.models.domain.open_event import UNKNOWN, OpenEventRecord
from app.repositories.event_store import EventStore
from app.utils.timestamps import now_iso, to_iso_z

logger = get_logger(__name__)

# 1x1 transparent PNG
TRANSPARENT_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

PIXEL_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _or_unknown(value: str | None) -> str:
    return value if value else UNKNOWN


def build_open_event(
    email: str | None,
    user: str | None,
    newsletter: str | None,
    ip: str | None,
    user_agent: str | None,
    now: datetime | None = None,
) -> OpenEventRecord:
    """Create a record with server-assigned timestamp and defaulted fields."""
    return OpenEventRecord(
        email=_or_unknown(email),
        user=_or_unknown(user),
        newsletter=_or_unknown(newsletter),
        timestamp=to_iso_z(now) if now else now_iso(),
        ip=_or_unknown(ip),
        user_agent=_or_unknown(user_agent),
    )


async def record_open(store: EventStore, record: OpenEventRecord) -> bool:
    """
    Append an open event without blocking the event loop.

    Returns:
        True if the record was persisted. Failures are logged, never raised.
    """
    logger.info(
        "Email opened",
        email=record.email,
        user=record.user,
        newsletter=record.newsletter,
        ip=record.ip,
    )

    try:
        saved = await asyncio.to_thread(store.append, record)
    except Exception as e:
        logger.error(
            "Failed to record open event",
            email=record.email,
            newsletter=record.newsletter,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False

    if not saved:
        logger.error(
            "Open event was not persisted",
            email=record.email,
            newsletter=record.newsletter,
        )
    return saved
