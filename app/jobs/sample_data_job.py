"""
Sample Data Job - Fill the tracking store with realistic multi-month data.

Used to try out the history dashboard without waiting for real opens.
Existing data is REPLACED.

Volume:
- Month i of N (1 = oldest) gets 30 + i*10 opens, +/- 10 at random,
  so the generated history trends upward.
- Opens land on a random day and time within their month.

Usage:
    python -m app.jobs.worker sample_data
"""

import asyncio
import calendar
import random
from datetime import UTC, datetime

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.open_event import OpenEventRecord
from app.repositories.event_store import EventStore, event_store
from app.utils.timestamps import month_name, to_iso_z

logger = get_logger(__name__)

USERS = [
    ("john.doe@company.com", "John Doe"),
    ("jane.smith@company.com", "Jane Smith"),
    ("bob.johnson@company.com", "Bob Johnson"),
    ("alice.williams@company.com", "Alice Williams"),
    ("charlie.brown@company.com", "Charlie Brown"),
    ("diana.davis@company.com", "Diana Davis"),
    ("evan.miller@company.com", "Evan Miller"),
    ("fiona.wilson@company.com", "Fiona Wilson"),
    ("george.moore@company.com", "George Moore"),
    ("helen.taylor@company.com", "Helen Taylor"),
]

NEWSLETTERS = [
    "monthly-update",
    "weekly-digest",
    "special-announcement",
    "product-news",
]

IP_ADDRESSES = [
    "192.168.1.1",
    "192.168.1.2",
    "10.0.0.1",
    "10.0.0.2",
    "172.16.0.1",
]

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) AppleWebKit/605.1.15",
    "Mozilla/5.0 (Linux; Android 11) AppleWebKit/537.36",
]


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) - offset
    return index // 12, index % 12 + 1


def generate_sample_records(
    months: int,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[OpenEventRecord]:
    """
    Build open events spanning the last `months` calendar months (UTC),
    ending with the current month. Records are sorted by timestamp.
    """
    now = now or datetime.now(UTC)
    rng = rng or random.Random()
    generated: list[tuple[datetime, OpenEventRecord]] = []

    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, offset)
        month_suffix = f"{month_name(month)[:3].lower()}-{year}"
        days_in_month = calendar.monthrange(year, month)[1]

        base_opens = 30 + (months - offset) * 10
        monthly_opens = base_opens + rng.randint(-10, 9)

        logger.info(
            "Generating sample opens",
            year_month=f"{year:04d}-{month:02d}",
            opens=monthly_opens,
        )

        for _ in range(monthly_opens):
            email, name = rng.choice(USERS)
            opened_at = datetime(
                year,
                month,
                rng.randint(1, days_in_month),
                rng.randint(0, 23),
                rng.randint(0, 59),
                rng.randint(0, 59),
                tzinfo=UTC,
            )
            record = OpenEventRecord(
                email=email,
                user=name,
                newsletter=f"{rng.choice(NEWSLETTERS)}-{month_suffix}",
                timestamp=to_iso_z(opened_at),
                ip=rng.choice(IP_ADDRESSES),
                user_agent=rng.choice(USER_AGENTS),
            )
            generated.append((opened_at, record))

    generated.sort(key=lambda item: item[0])
    return [record for _, record in generated]


async def run_sample_data_job(
    store: EventStore | None = None,
    months: int | None = None,
) -> int:
    """
    Replace the store contents with generated sample data.

    Returns:
        Number of records written

    Raises:
        RuntimeError: If the store could not be written
    """
    store = store or event_store
    months = months or settings.SAMPLE_DATA_MONTHS

    existing = await asyncio.to_thread(store.load_all)
    if existing:
        logger.warning("Existing tracking data will be replaced", existing_records=len(existing))

    records = generate_sample_records(months)
    if not await asyncio.to_thread(store.replace_all, records):
        raise RuntimeError("Failed to write sample tracking data")

    logger.info(
        "Sample data generated",
        months=months,
        users=len(USERS),
        newsletters=len(NEWSLETTERS),
        total_records=len(records),
        first_record=records[0].timestamp if records else None,
        last_record=records[-1].timestamp if records else None,
    )
    return len(records)
