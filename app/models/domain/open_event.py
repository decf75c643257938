"""
Domain models for newsletter open tracking.

OpenEventRecord is the only persisted shape. Everything else is derived
from a sequence of records on every request and never stored.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN = "unknown"

Trend = Literal["Growing", "Declining", "Stable", "No data available"]


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OpenEventRecord(CamelModel):
    """A single tracking pixel fetch. Immutable once created."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    email: str = UNKNOWN
    user: str = UNKNOWN
    newsletter: str = UNKNOWN
    timestamp: str
    ip: str = UNKNOWN
    user_agent: str = UNKNOWN

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


class OverallStats(CamelModel):
    total_opens: int = 0
    unique_users: int = 0


class UserOpenSummary(CamelModel):
    """Per-recipient opens of one newsletter."""

    count: int
    first_open: str
    last_open: str
    user: str


class NewsletterSummary(CamelModel):
    newsletter: str
    total_opens: int = 0
    unique_users: int = 0
    opens_by_user: dict[str, UserOpenSummary] = Field(default_factory=dict)


class MonthlySummary(CamelModel):
    """Aggregate of all opens that fall in one calendar month."""

    year_month: str
    month: str
    total_opens: int
    unique_users: int
    unique_newsletters: int
    avg_opens_per_user: float
    newsletters: list[str]
    peak_day: int


class HistoryReport(CamelModel):
    total_months: int = 0
    monthly_stats: list[MonthlySummary] = Field(default_factory=list)
    overall_trend: Trend = "No data available"
    first_record: str | None = None
    last_record: str | None = None


class GrowthIndicator(CamelModel):
    """Month-over-month change shown next to each month in the history view."""

    year_month: str
    direction: Literal["up", "down", "neutral"]
    percent: float | None = None
    label: str
