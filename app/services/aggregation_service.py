"""
Open-event aggregation.

Pure functions that turn a sequence of OpenEventRecords into overall,
per-newsletter and per-month summaries. Nothing here touches the store;
every accumulator is built fresh per call.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo

from app.models.domain.open_event import (
    GrowthIndicator,
    HistoryReport,
    MonthlySummary,
    NewsletterSummary,
    OpenEventRecord,
    OverallStats,
    Trend,
    UserOpenSummary,
)
from app.utils.timestamps import month_label


TREND_GROWING: Trend = "Growing"
TREND_DECLINING: Trend = "Declining"
TREND_STABLE: Trend = "Stable"
TREND_NO_DATA: Trend = "No data available"


class InvalidTimestampError(Exception):
    """A stored record carries a timestamp that cannot be parsed."""

    def __init__(self, timestamp: object, record: OpenEventRecord | None = None):
        super().__init__(f"Unparseable timestamp: {timestamp!r}")
        self.timestamp = timestamp
        self.record = record


def parse_timestamp(value: str, record: OpenEventRecord | None = None) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise InvalidTimestampError(value, record) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def overall_stats(records: Sequence[OpenEventRecord]) -> OverallStats:
    return OverallStats(
        total_opens=len(records),
        unique_users=len({record.email for record in records}),
    )


@dataclass
class _UserWorkingSet:
    user: str
    count: int = 0
    first_open: str = ""
    last_open: str = ""
    first_at: datetime | None = None
    last_at: datetime | None = None


def newsletter_stats(records: Sequence[OpenEventRecord], newsletter: str) -> NewsletterSummary:
    """
    Summarize the opens of a single newsletter, grouped by recipient email.

    A newsletter with no opens yields zero counts rather than an error.
    """
    users: dict[str, _UserWorkingSet] = {}
    total = 0

    for record in records:
        if record.newsletter != newsletter:
            continue
        total += 1
        opened_at = parse_timestamp(record.timestamp, record)

        working = users.get(record.email)
        if working is None:
            # Display name sticks to the first record seen for this email
            working = users[record.email] = _UserWorkingSet(user=record.user)

        working.count += 1
        if working.first_at is None or opened_at < working.first_at:
            working.first_at = opened_at
            working.first_open = record.timestamp
        if working.last_at is None or opened_at > working.last_at:
            working.last_at = opened_at
            working.last_open = record.timestamp

    return NewsletterSummary(
        newsletter=newsletter,
        total_opens=total,
        unique_users=len(users),
        opens_by_user={
            email: UserOpenSummary(
                count=working.count,
                first_open=working.first_open,
                last_open=working.last_open,
                user=working.user,
            )
            for email, working in users.items()
        },
    )


@dataclass
class _MonthWorkingSet:
    label: str
    opens: int = 0
    emails: set[str] = field(default_factory=set)
    # dict keeps first-seen order for the newsletter list
    newsletters: dict[str, None] = field(default_factory=dict)
    daily_opens: Counter[int] = field(default_factory=Counter)


def _peak_day(daily_opens: Counter[int]) -> int:
    # Highest count wins; ties go to the earliest day of the month
    return min(daily_opens, key=lambda day: (-daily_opens[day], day))


def _classify_trend(monthly: Sequence[MonthlySummary]) -> Trend:
    if len(monthly) < 2:
        return TREND_STABLE
    last, previous = monthly[-1].total_opens, monthly[-2].total_opens
    if last > previous:
        return TREND_GROWING
    if last < previous:
        return TREND_DECLINING
    return TREND_STABLE


def history_stats(records: Sequence[OpenEventRecord], tz: tzinfo = UTC) -> HistoryReport:
    """
    Bucket records by calendar month and classify the latest trend.

    Args:
        records: Stored open events, in any order
        tz: Timezone whose calendar decides which month an instant falls in

    Returns:
        HistoryReport with months in chronological order

    Raises:
        InvalidTimestampError: If any record has an unparseable timestamp
    """
    if not records:
        return HistoryReport()

    months: dict[str, _MonthWorkingSet] = {}
    first: tuple[datetime, str] | None = None
    last: tuple[datetime, str] | None = None

    for record in records:
        instant = parse_timestamp(record.timestamp, record)
        local = instant.astimezone(tz)
        year_month = f"{local.year:04d}-{local.month:02d}"

        working = months.get(year_month)
        if working is None:
            working = months[year_month] = _MonthWorkingSet(label=month_label(local))

        working.opens += 1
        working.emails.add(record.email)
        working.newsletters[record.newsletter] = None
        working.daily_opens[local.day] += 1

        if first is None or instant < first[0]:
            first = (instant, record.timestamp)
        if last is None or instant > last[0]:
            last = (instant, record.timestamp)

    # Zero-padded keys sort chronologically
    monthly_stats = [
        MonthlySummary(
            year_month=year_month,
            month=working.label,
            total_opens=working.opens,
            unique_users=len(working.emails),
            unique_newsletters=len(working.newsletters),
            avg_opens_per_user=round(working.opens / len(working.emails), 2),
            newsletters=list(working.newsletters),
            peak_day=_peak_day(working.daily_opens),
        )
        for year_month, working in sorted(months.items())
    ]

    return HistoryReport(
        total_months=len(monthly_stats),
        monthly_stats=monthly_stats,
        overall_trend=_classify_trend(monthly_stats),
        first_record=first[1],
        last_record=last[1],
    )


def growth_indicators(monthly_stats: Sequence[MonthlySummary]) -> list[GrowthIndicator]:
    """
    Month-over-month change for each month against its predecessor.

    Input must be chronological; output follows the same order. The oldest
    month has no predecessor and is reported as neutral.
    """
    indicators: list[GrowthIndicator] = []
    previous: MonthlySummary | None = None

    for current in monthly_stats:
        if previous is None or current.total_opens == previous.total_opens:
            indicators.append(
                GrowthIndicator(year_month=current.year_month, direction="neutral", label="━")
            )
        else:
            change = (current.total_opens - previous.total_opens) / previous.total_opens * 100
            percent = round(change, 1)
            if change > 0:
                indicators.append(
                    GrowthIndicator(
                        year_month=current.year_month,
                        direction="up",
                        percent=percent,
                        label=f"↑ {abs(percent):.1f}%",
                    )
                )
            else:
                indicators.append(
                    GrowthIndicator(
                        year_month=current.year_month,
                        direction="down",
                        percent=percent,
                        label=f"↓ {abs(percent):.1f}%",
                    )
                )
        previous = current

    return indicators
