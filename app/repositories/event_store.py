"""
Event store for open-event records.

The whole collection is loaded and replaced wholesale. Writes go through a
single lock so concurrent appends cannot overwrite each other, and every
write lands via an atomic rename so readers never observe a partial file.
"""

import asyncio
import json
import os
import stat
import tempfile
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.models.domain.open_event import OpenEventRecord

logger = get_logger(__name__)

DEFAULT_FILE_MODE = 0o644


class EventStoreError(Exception):
    """Raised when the backing store cannot be initialized."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class EventStore(ABC):
    """Storage contract for the open-event collection."""

    @abstractmethod
    def load_all(self) -> list[OpenEventRecord]:
        """Return every stored record; empty if the store is absent or unreadable."""

    @abstractmethod
    def replace_all(self, records: Sequence[OpenEventRecord]) -> bool:
        """Overwrite the whole collection. Returns False on failure."""

    @abstractmethod
    def append(self, record: OpenEventRecord) -> bool:
        """Add one record to the end of the collection. Returns False on failure."""

    def reset_all(self) -> bool:
        return self.replace_all([])


class JsonFileEventStore(EventStore):
    """Flat-file store holding a pretty-printed JSON array."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._write_lock = threading.Lock()

    def initialize(self) -> None:
        """Create the store as an empty array if it does not exist yet."""
        if self.path.exists():
            return

        logger.info("Creating tracking file", path=str(self.path))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.replace_all([]):
            raise EventStoreError("Failed to create tracking file", path=self.path)

    def load_all(self) -> list[OpenEventRecord]:
        try:
            return self._read()
        except (OSError, ValueError, ValidationError) as e:
            logger.error(
                "Error reading tracking file",
                path=str(self.path),
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

    def replace_all(self, records: Sequence[OpenEventRecord]) -> bool:
        with self._write_lock:
            return self._write(records)

    def append(self, record: OpenEventRecord) -> bool:
        """
        Add one record. An existing file that cannot be parsed is left
        untouched and the append fails, so history is never overwritten.
        """
        with self._write_lock:
            try:
                records = self._read()
            except (OSError, ValueError, ValidationError) as e:
                logger.error(
                    "Refusing to append to unreadable tracking file",
                    path=str(self.path),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return False
            records.append(record)
            return self._write(records)

    def _read(self) -> list[OpenEventRecord]:
        """Parse the file; only a missing file counts as an empty store."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        if not isinstance(raw, list):
            raise ValueError("tracking file does not contain a JSON array")
        return [OpenEventRecord.model_validate(item) for item in raw]

    def _file_mode(self) -> int:
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    def _write(self, records: Sequence[OpenEventRecord]) -> bool:
        payload = json.dumps([record.to_storage() for record in records], indent=2)
        tmp_path = None
        try:
            mode = self._file_mode()
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            # mkstemp creates 0600 files; keep the store's mode across the rename
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(
                "Error writing tracking file",
                path=str(self.path),
                record_count=len(records),
                error=str(e),
                error_type=type(e).__name__,
            )
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            return False


event_store = JsonFileEventStore(settings.TRACKING_FILE)


def get_event_store() -> EventStore:
    """FastAPI dependency returning the configured store."""
    return event_store


async def load_records(store: EventStore) -> list[OpenEventRecord]:
    """Load every record off the event loop."""
    return await asyncio.to_thread(store.load_all)


async def reset_records(store: EventStore) -> bool:
    """Clear the store off the event loop."""
    logger.info("Resetting all tracking data")
    success = await asyncio.to_thread(store.reset_all)
    if success:
        logger.info("All tracking data cleared")
    else:
        logger.error("Failed to reset tracking data")
    return success
