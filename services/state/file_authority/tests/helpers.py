"""Test doubles and helpers shared by File Authority Service tests."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session

from resources.substrates.blob.table_substrate import TableBlobSubstrate, file_objects
from services.state.file_authority.data import files


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FaultyBlobStore(TableBlobSubstrate):
    """Table blob store with switchable failure injection."""

    def __init__(self) -> None:
        self.raise_on_write: Exception | None = None
        self.raise_on_read: Exception | None = None
        self.raise_on_release: Exception | None = None

    def write_all(self, session: Session, object_ref: int, content: bytes) -> None:
        if self.raise_on_write is not None:
            raise self.raise_on_write
        super().write_all(session, object_ref, content)

    def read_all(self, session: Session, object_ref: int) -> bytes:
        if self.raise_on_read is not None:
            raise self.raise_on_read
        return super().read_all(session, object_ref)

    def release(self, session: Session, object_ref: int) -> None:
        if self.raise_on_release is not None:
            raise self.raise_on_release
        super().release(session, object_ref)


def count_rows(engine: Engine) -> tuple[int, int]:
    """Return ``(file rows, blob rows)`` currently committed."""
    with engine.connect() as conn:
        file_count = conn.execute(select(func.count()).select_from(files)).scalar_one()
        blob_count = conn.execute(
            select(func.count()).select_from(file_objects)
        ).scalar_one()
    return int(file_count), int(blob_count)
