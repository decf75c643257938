from app.models.domain.open_event import OpenEventRecord
from app.repositories.event_store import EventStore


def make_record(
    timestamp: str,
    email: str = "john.doe@company.com",
    user: str = "John Doe",
    newsletter: str = "monthly-update-oct-2025",
    ip: str = "10.0.0.1",
    user_agent: str = "Mozilla/5.0",
) -> OpenEventRecord:
    return OpenEventRecord(
        email=email,
        user=user,
        newsletter=newsletter,
        timestamp=timestamp,
        ip=ip,
        user_agent=user_agent,
    )


class FailingEventStore(EventStore):
    """Store whose writes always fail, as when the disk is full."""

    def __init__(self, records: list[OpenEventRecord] | None = None):
        self.records = records or []

    def load_all(self) -> list[OpenEventRecord]:
        return list(self.records)

    def replace_all(self, records) -> bool:
        return False

    def append(self, record: OpenEventRecord) -> bool:
        return False
