"""
tracking.py
-----------
Purpose:
    Serves the 1x1 tracking pixel embedded in newsletter emails.

    Each fetch records one open event (email, user, newsletter, timestamp,
    client ip, user agent). The pixel is always returned, even if the
    event could not be persisted, so mail clients never see an error.

Usage:
    <img src="https://tracker.example.com/track?email=user@company.com&user=John&newsletter=oct-2025"
         width="1" height="1" style="display:none;" alt="" />
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from app.repositories.event_store import EventStore, get_event_store
from app.services.tracking_service import (
    PIXEL_HEADERS,
    TRANSPARENT_PIXEL,
    build_open_event,
    record_open,
)

router = APIRouter(tags=["Tracking"])


@router.get("/track")
async def track(
    request: Request,
    email: str | None = None,
    user: str | None = None,
    newsletter: str | None = None,
    store: EventStore = Depends(get_event_store),
):
    """Record an email open and return a transparent PNG."""
    record = build_open_event(
        email=email,
        user=user,
        newsletter=newsletter,
        ip=request.state.ip_address,
        user_agent=request.state.user_agent,
    )
    await record_open(store, record)

    return Response(content=TRANSPARENT_PIXEL, media_type="image/png", headers=PIXEL_HEADERS)
