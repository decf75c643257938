"""
Data Management API Router - tracking data reset.

Provides endpoints for:
- POST /reset: clear every recorded open (JSON, for scripts)
- GET /reset: same, with an HTML confirmation page for browsers

Intended for development and testing; there is no authentication.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from app.models.api.stats_response import ResetResponse
from app.repositories.event_store import EventStore, get_event_store, reset_records
from app.templating import templates
from app.utils.timestamps import now_iso

router = APIRouter(tags=["Data Management"])

_RESET_LINKS = [
    {"href": "/dashboard", "text": "View Dashboard"},
    {"href": "/stats", "text": "View Stats"},
    {"href": "/", "text": "Home"},
]


@router.post("/reset", response_model=ResetResponse, response_model_exclude_none=True)
async def reset_data(store: EventStore = Depends(get_event_store)):
    """Clear all tracking data."""
    if not await reset_records(store):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ResetResponse(
                success=False,
                message="Failed to reset tracking data",
            ).model_dump(by_alias=True, exclude_none=True),
        )

    return ResetResponse(
        success=True,
        message="All tracking data has been reset",
        timestamp=now_iso(),
    )


@router.get("/reset", response_class=HTMLResponse)
async def reset_data_page(request: Request, store: EventStore = Depends(get_event_store)):
    """Browser-friendly reset with a confirmation page."""
    if not await reset_records(store):
        return templates.TemplateResponse(
            request,
            "message.html",
            {
                "title": "Reset Failed",
                "message": "Failed to reset tracking data. Check the server logs.",
                "links": _RESET_LINKS,
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return templates.TemplateResponse(
        request,
        "message.html",
        {
            "title": "Tracking Data Reset",
            "message": "All tracking data has been cleared successfully!",
            "timestamp": now_iso(),
            "links": _RESET_LINKS,
        },
    )
