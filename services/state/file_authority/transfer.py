"""Copy and move composed from metadata store and blob operations."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from packages.filestore_shared.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    codes,
    conflict_error,
    validation_error,
)
from services.state.file_authority.domain import FileRecord
from services.state.file_authority.paths import normalize_path
from services.state.file_authority.store import FileMetadataStore, utc_now


class FileTransferOrchestrator:
    """Run copy and move as single units of work on one session."""

    def __init__(
        self,
        *,
        store: FileMetadataStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def copy(
        self,
        session: Session,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool = False,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Create an independent record and blob at the destination.

        The copy keeps the source's ``created_on``/``created_by`` and gets a new
        id, a new blob object, and ``modified_on`` set to now.
        """
        source, destination = self._prepare(
            session,
            source_path=source_path,
            destination_path=destination_path,
            overwrite=overwrite,
        )
        content = self._store.load_content(session, record=source)
        return self._store.create(
            session,
            path=destination,
            content=content,
            created_on=source.created_on,
            created_by=source.created_by,
            modified_on=self._clock(),
            modified_by=modified_by if modified_by is not None else source.created_by,
        )

    def move(
        self,
        session: Session,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool = False,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Reassign the source record's path; id and blob object are kept."""
        source, destination = self._prepare(
            session,
            source_path=source_path,
            destination_path=destination_path,
            overwrite=overwrite,
        )
        return self._store.relocate(
            session,
            record=source,
            destination_path=destination,
            modified_on=self._clock(),
            modified_by=modified_by if modified_by is not None else source.modified_by,
        )

    def _prepare(
        self,
        session: Session,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool,
    ) -> tuple[FileRecord, str]:
        """Resolve the source and clear the destination per overwrite policy."""
        source_canonical = normalize_path(source_path)
        destination = normalize_path(destination_path)
        if source_canonical == destination:
            raise InvalidArgumentError(
                "source and destination are the same path",
                details=[
                    validation_error(
                        "source and destination are the same path",
                        code=codes.INVALID_ARGUMENT,
                        metadata={"path": destination},
                    )
                ],
            )

        source = self._store.require(
            session, path=source_canonical, for_update=True
        )
        existing = self._store.find(session, path=destination, for_update=True)
        if existing is not None:
            if not overwrite:
                raise AlreadyExistsError(
                    f"file already exists: {destination}",
                    details=[
                        conflict_error(
                            "destination already exists",
                            code=codes.ALREADY_EXISTS,
                            metadata={"path": destination},
                        )
                    ],
                )
            self._store.remove(session, record=existing)
        return source, destination
