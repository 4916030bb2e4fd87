"""Transport-neutral protocol interfaces used by File Authority Service."""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from sqlalchemy.orm import Session

from services.state.file_authority.domain import FileRecord


class SessionProvider(Protocol):
    """Protocol for opening one transactional unit of work."""

    def session(self) -> AbstractContextManager[Session]:
        """Yield a session that commits on success and rolls back on failure."""


class FileRepository(Protocol):
    """Protocol for authoritative file metadata persistence operations.

    Every method runs on the caller-provided session and never opens its own
    transaction.
    """

    def get_by_path(
        self, session: Session, *, path: str, for_update: bool = False
    ) -> FileRecord | None:
        """Read one file record by canonical path.

        ``for_update`` locks the row until the caller's transaction ends.
        """

    def list_files(
        self,
        session: Session,
        *,
        path_prefix: str | None,
        include_temp: bool,
        skip: int | None,
        limit: int | None,
    ) -> list[FileRecord]:
        """List file records matching optional prefix and temp filters."""

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
        """Insert one file record and return it as stored."""

    def update_modified_on(
        self, session: Session, *, file_id: str, modified_on: datetime
    ) -> FileRecord:
        """Set ``modified_on`` for one record identified by id."""

    def update_path(
        self,
        session: Session,
        *,
        file_id: str,
        path: str,
        modified_on: datetime,
        modified_by: str | None,
    ) -> FileRecord:
        """Reassign one record's path and modification stamp."""

    def lock_by_id(self, session: Session, *, file_id: str) -> bool:
        """Lock one record by id and return whether it still exists."""

    def delete_by_id(self, session: Session, *, file_id: str) -> bool:
        """Delete one record by id and return whether it existed."""
