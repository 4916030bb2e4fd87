"""Authoritative SQL repository for File Authority Service state."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from packages.filestore_shared.ids import (
    generate_ulid_bytes,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)
from services.state.file_authority.domain import FileRecord
from services.state.file_authority.interfaces import FileRepository
from services.state.file_authority.paths import TEMP_PREFIX

from .schema import files


class SqlFileRepository(FileRepository):
    """SQL repository over File Authority-owned schema tables."""

    def get_by_path(
        self, session: Session, *, path: str, for_update: bool = False
    ) -> FileRecord | None:
        """Read one file row by canonical path, optionally row-locked."""
        stmt = select(files).where(files.c.filepath == path)
        if for_update:
            stmt = stmt.with_for_update()
        row = session.execute(stmt).mappings().one_or_none()
        return None if row is None else _to_record(row)

    def list_files(
        self,
        session: Session,
        *,
        path_prefix: str | None,
        include_temp: bool,
        skip: int | None,
        limit: int | None,
    ) -> list[FileRecord]:
        """List file rows ordered by path after prefix and temp filtering."""
        stmt = select(files)
        if path_prefix is not None:
            stmt = stmt.where(files.c.filepath.startswith(path_prefix, autoescape=True))
        if not include_temp:
            stmt = stmt.where(~files.c.filepath.startswith(TEMP_PREFIX, autoescape=True))
        stmt = stmt.order_by(files.c.filepath)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = session.execute(stmt).mappings().all()
        return [_to_record(row) for row in rows]

    def insert_file(
        self,
        session: Session,
        *,
        object_ref: int,
        path: str,
        created_on: datetime,
        created_by: str | None,
        modified_on: datetime,
        modified_by: str | None,
    ) -> FileRecord:
        """Insert one file row and read it back."""
        file_id = generate_ulid_bytes()
        session.execute(
            insert(files).values(
                id=file_id,
                object_ref=object_ref,
                filepath=path,
                created_on=created_on,
                created_by=created_by,
                modified_on=modified_on,
                modified_by=modified_by,
            )
        )
        return self._get_by_id(session, file_id=file_id)

    def update_modified_on(
        self, session: Session, *, file_id: str, modified_on: datetime
    ) -> FileRecord:
        """Set ``modified_on`` on one row keyed by its own id."""
        key = ulid_str_to_bytes(file_id)
        session.execute(
            update(files).where(files.c.id == key).values(modified_on=modified_on)
        )
        return self._get_by_id(session, file_id=key)

    def update_path(
        self,
        session: Session,
        *,
        file_id: str,
        path: str,
        modified_on: datetime,
        modified_by: str | None,
    ) -> FileRecord:
        """Reassign one row's path in place."""
        key = ulid_str_to_bytes(file_id)
        session.execute(
            update(files)
            .where(files.c.id == key)
            .values(filepath=path, modified_on=modified_on, modified_by=modified_by)
        )
        return self._get_by_id(session, file_id=key)

    def lock_by_id(self, session: Session, *, file_id: str) -> bool:
        """Lock one row by id and return whether it still exists."""
        row = session.execute(
            select(files.c.id)
            .where(files.c.id == ulid_str_to_bytes(file_id))
            .with_for_update()
        ).first()
        return row is not None

    def delete_by_id(self, session: Session, *, file_id: str) -> bool:
        """Delete one row by id and return whether it existed."""
        result = session.execute(
            delete(files).where(files.c.id == ulid_str_to_bytes(file_id))
        )
        return int(result.rowcount or 0) > 0

    def _get_by_id(self, session: Session, *, file_id: bytes) -> FileRecord:
        row = session.execute(select(files).where(files.c.id == file_id)).mappings().one()
        return _to_record(row)


def _to_record(row: Any) -> FileRecord:
    """Map one SQL row to strict domain file record."""
    return FileRecord(
        id=ulid_bytes_to_str(bytes(row["id"])),
        object_ref=int(row["object_ref"]),
        path=str(row["filepath"]),
        created_on=_row_dt(row, "created_on"),
        modified_on=_row_dt(row, "modified_on"),
        created_by=row["created_by"],
        modified_by=row["modified_by"],
    )


def _row_dt(row: Any, column: str) -> datetime:
    """Read and normalize one timezone-aware datetime field from SQL row."""
    value = row.get(column)
    if not isinstance(value, datetime):
        raise ValueError(f"expected datetime column for {column}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
