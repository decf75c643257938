"""Timestamp helpers shared by ingestion, aggregation and the HTML pages."""

from datetime import UTC, datetime

# Fixed English names; strftime("%B") follows the host's LC_TIME
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def to_iso_z(moment: datetime) -> str:
    """
    Format an instant as ISO-8601 UTC with millisecond precision.

    Example: 2025-10-01T12:34:56.789Z
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return to_iso_z(datetime.now(UTC))


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def month_label(moment: datetime) -> str:
    """Month and year of `moment`, e.g. 'October 2025'."""
    return f"{month_name(moment.month)} {moment.year}"
