"""
JSON statistics endpoints.

/stats/history is registered before /stats/{newsletter}, so a newsletter
literally named "history" is only reachable through the dashboards.
"""

from fastapi import APIRouter, Depends

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.api.stats_response import StatsResponse
from app.models.domain.open_event import HistoryReport, NewsletterSummary
from app.repositories.event_store import EventStore, get_event_store, load_records
from app.services.aggregation_service import history_stats, newsletter_stats, overall_stats

router = APIRouter(prefix="/stats", tags=["Stats"])
logger = get_logger(__name__)


@router.get("", response_model=StatsResponse)
async def get_stats(store: EventStore = Depends(get_event_store)):
    """Overall totals plus the full list of recorded opens."""
    records = await load_records(store)
    totals = overall_stats(records)

    logger.info(
        "Stats requested",
        total_opens=totals.total_opens,
        unique_users=totals.unique_users,
    )

    return StatsResponse(
        total_opens=totals.total_opens,
        unique_users=totals.unique_users,
        opens=records,
    )


@router.get("/history", response_model=HistoryReport, response_model_exclude_none=True)
async def get_history_stats(store: EventStore = Depends(get_event_store)):
    """Monthly aggregates in chronological order with the latest trend."""
    records = await load_records(store)
    report = history_stats(records, tz=settings.report_timezone())

    logger.info(
        "Historical stats requested",
        months=report.total_months,
        trend=report.overall_trend,
    )
    return report


@router.get("/{newsletter}", response_model=NewsletterSummary)
async def get_newsletter_stats(newsletter: str, store: EventStore = Depends(get_event_store)):
    """Per-recipient opens of one newsletter. Unknown newsletters return zero counts."""
    records = await load_records(store)
    summary = newsletter_stats(records, newsletter)

    if summary.total_opens == 0:
        logger.warning("No data found for newsletter", newsletter=newsletter)
    else:
        logger.info(
            "Newsletter stats requested",
            newsletter=newsletter,
            total_opens=summary.total_opens,
            unique_users=summary.unique_users,
        )
    return summary
