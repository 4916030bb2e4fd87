"""Path-addressed file metadata store over a transactional blob substrate.

Each method runs on the caller's session. Blob operations and metadata row
changes issued through one session commit or roll back together.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from packages.filestore_shared.errors import (
    AlreadyExistsError,
    NotFoundError,
    codes,
    conflict_error,
    not_found_error,
)
from resources.substrates.blob import BlobObjectSubstrate
from services.state.file_authority.domain import FileRecord
from services.state.file_authority.interfaces import FileRepository
from services.state.file_authority.paths import normalize_path, normalize_path_prefix

_PATH_CONSTRAINT_MARKERS = ("uq_files_filepath", "files.filepath")


def utc_now() -> datetime:
    """Return the current aware UTC time."""
    return datetime.now(UTC)


class FileMetadataStore:
    """Owns the mapping from canonical path to file record and blob object."""

    def __init__(
        self,
        *,
        repository: FileRepository,
        blob_store: BlobObjectSubstrate,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self._blob_store = blob_store
        self._clock = clock

    def find(
        self, session: Session, *, path: str, for_update: bool = False
    ) -> FileRecord | None:
        """Return the record at ``path`` or ``None``."""
        return self._repository.get_by_path(
            session, path=normalize_path(path), for_update=for_update
        )

    def find_all(
        self,
        session: Session,
        *,
        path_prefix: str | None = None,
        include_temp: bool = False,
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[FileRecord]:
        """List records, filtered by path prefix and temp namespace, by path."""
        return self._repository.list_files(
            session,
            path_prefix=normalize_path_prefix(path_prefix),
            include_temp=include_temp,
            skip=skip,
            limit=limit,
        )

    def create(
        self,
        session: Session,
        *,
        path: str,
        content: bytes,
        created_on: datetime | None = None,
        created_by: str | None = None,
        modified_on: datetime | None = None,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Allocate a blob, write ``content``, and insert the record.

        Modification fields default to the creation fields.
        """
        canonical = normalize_path(path)
        if self._repository.get_by_path(session, path=canonical) is not None:
            raise _already_exists(canonical)

        created_on = created_on or self._clock()
        object_ref = self._blob_store.allocate(session)
        self._blob_store.write_all(session, object_ref, content)
        try:
            return self._repository.insert_file(
                session,
                object_ref=object_ref,
                path=canonical,
                created_on=created_on,
                created_by=created_by,
                modified_on=modified_on or created_on,
                modified_by=modified_by if modified_by is not None else created_by,
            )
        except IntegrityError as exc:
            if _is_path_conflict(exc):
                raise _already_exists(canonical) from exc
            raise

    def update_modification_date(
        self, session: Session, *, path: str, modified_on: datetime
    ) -> FileRecord:
        """Set ``modified_on`` on the record found at ``path``."""
        record = self.require(session, path=path, for_update=True)
        return self._repository.update_modified_on(
            session, file_id=record.id, modified_on=modified_on
        )

    def delete(self, session: Session, *, path: str) -> bool:
        """Delete the record at ``path`` and its blob; missing paths are a no-op."""
        record = self.find(session, path=path, for_update=True)
        if record is None:
            return False
        return self.remove(session, record=record)

    def read_content(self, session: Session, *, path: str) -> bytes:
        """Return the full payload stored at ``path``."""
        return self.load_content(session, record=self.require(session, path=path))

    def require(
        self, session: Session, *, path: str, for_update: bool = False
    ) -> FileRecord:
        """Return the record at ``path`` or raise ``NotFoundError``."""
        canonical = normalize_path(path)
        record = self._repository.get_by_path(
            session, path=canonical, for_update=for_update
        )
        if record is None:
            raise NotFoundError(
                f"file not found: {canonical}",
                details=[
                    not_found_error(
                        "file not found",
                        code=codes.RESOURCE_NOT_FOUND,
                        metadata={"path": canonical},
                    )
                ],
            )
        return record

    def load_content(self, session: Session, *, record: FileRecord) -> bytes:
        """Read the payload referenced by one record."""
        return self._blob_store.read_all(session, record.object_ref)

    def remove(self, session: Session, *, record: FileRecord) -> bool:
        """Release the record's blob then delete its row.

        Returns ``False`` without touching the blob when the row is already
        gone, as happens when another transaction deleted it first.
        """
        if not self._repository.lock_by_id(session, file_id=record.id):
            return False
        self._blob_store.release(session, record.object_ref)
        self._repository.delete_by_id(session, file_id=record.id)
        return True

    def relocate(
        self,
        session: Session,
        *,
        record: FileRecord,
        destination_path: str,
        modified_on: datetime,
        modified_by: str | None,
    ) -> FileRecord:
        """Reassign one record's path, keeping its id and blob object."""
        canonical = normalize_path(destination_path)
        try:
            return self._repository.update_path(
                session,
                file_id=record.id,
                path=canonical,
                modified_on=modified_on,
                modified_by=modified_by,
            )
        except IntegrityError as exc:
            if _is_path_conflict(exc):
                raise _already_exists(canonical) from exc
            raise


def _already_exists(path: str) -> AlreadyExistsError:
    """Build the canonical path-collision error."""
    return AlreadyExistsError(
        f"file already exists: {path}",
        details=[
            conflict_error(
                "file already exists",
                code=codes.ALREADY_EXISTS,
                metadata={"path": path},
            )
        ],
    )


def _is_path_conflict(exc: IntegrityError) -> bool:
    """Return whether one integrity error is the unique-path constraint."""
    message = str(exc)
    return any(marker in message for marker in _PATH_CONSTRAINT_MARKERS)
