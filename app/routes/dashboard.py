"""
HTML pages: the endpoint index, the recent-opens dashboard and the monthly
history view. All numbers come from the aggregation service; this module
only shapes them for the templates.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.repositories.event_store import EventStore, get_event_store, load_records
from app.services.aggregation_service import growth_indicators, history_stats, overall_stats
from app.templating import templates
from app.utils.timestamps import month_name

router = APIRouter(tags=["Dashboards"])
logger = get_logger(__name__)

ENDPOINTS = [
    {
        "title": "Tracking Pixel",
        "usage": "GET /track?email=user@company.com&user=John&newsletter=oct-2025",
        "link": None,
        "description": "Returns a 1x1 transparent PNG pixel and logs the open event",
    },
    {
        "title": "Overall Statistics",
        "usage": "GET /stats",
        "link": "/stats",
        "description": "Returns total opens, unique users, and all tracking data",
    },
    {
        "title": "Newsletter Statistics",
        "usage": "GET /stats/{newsletter}",
        "link": None,
        "description": "Per-user opens for one newsletter, e.g. /stats/oct-2025",
    },
    {
        "title": "Dashboard",
        "usage": "GET /dashboard",
        "link": "/dashboard",
        "description": "Visual dashboard with recent opens and summary statistics",
    },
    {
        "title": "Historical Analytics",
        "usage": "GET /history",
        "link": "/history",
        "description": "Monthly trends and comparisons (JSON at /stats/history)",
    },
    {
        "title": "Reset Data (Development)",
        "usage": "GET /reset",
        "link": "/reset",
        "description": "Clear all tracking data - useful for development/testing",
    },
    {
        "title": "Health",
        "usage": "GET /health",
        "link": "/health",
        "description": "Liveness check",
    },
]


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Static index of the available endpoints."""
    pixel_url = (
        f"{str(request.base_url).rstrip('/')}/track"
        "?email=user@company.com&user=John&newsletter=oct-2025"
    )
    return templates.TemplateResponse(
        request,
        "index.html",
        {"endpoints": ENDPOINTS, "pixel_url": pixel_url},
    )


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, store: EventStore = Depends(get_event_store)):
    """Summary cards and the most recent opens, newest first."""
    records = await load_records(store)
    stats = overall_stats(records)
    limit = settings.RECENT_OPENS_LIMIT

    recent_opens = list(reversed(records[-limit:])) if limit > 0 else []
    avg_opens_per_user = (
        f"{stats.total_opens / stats.unique_users:.1f}" if stats.unique_users else "0"
    )

    logger.info("Dashboard accessed", total_opens=stats.total_opens)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "stats": stats,
            "avg_opens_per_user": avg_opens_per_user,
            "recent_opens": recent_opens,
            "recent_limit": limit,
        },
    )


@router.get("/history", response_class=HTMLResponse)
async def history(request: Request, store: EventStore = Depends(get_event_store)):
    """Monthly bar chart and comparison table, newest month first."""
    records = await load_records(store)
    report = history_stats(records, tz=settings.report_timezone())

    if not report.monthly_stats:
        return templates.TemplateResponse(
            request,
            "message.html",
            {
                "title": "No Historical Data",
                "message": "Start tracking emails to see monthly trends and comparisons!",
                "links": [{"href": "/dashboard", "text": "Go to Dashboard"}],
            },
        )

    months = report.monthly_stats
    peak_month_opens = max(month.total_opens for month in months)
    chart_bars = [
        {
            "label": month_name(int(month.year_month[5:]))[:3],
            "total_opens": month.total_opens,
            "height": round(month.total_opens / peak_month_opens * 100, 1),
        }
        for month in months
    ]
    table_rows = [
        {"month": month, "growth": growth}
        for month, growth in zip(months, growth_indicators(months))
    ][::-1]

    logger.info("Historical dashboard accessed", months=report.total_months)

    return templates.TemplateResponse(
        request,
        "history.html",
        {
            "report": report,
            "total_opens": len(records),
            "peak_month_opens": peak_month_opens,
            "avg_opens_per_month": round(len(records) / report.total_months),
            "chart_bars": chart_bars,
            "table_rows": table_rows,
        },
    )
