"""Temporary file creation and the expired temp-file sweep."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

from sqlalchemy.orm import Session

from packages.filestore_shared.errors import (
    TransactionFailureError,
    codes,
    dependency_error,
)
from packages.filestore_shared.logging import get_logger
from services.state.file_authority.domain import FileRecord, TempCleanupResult
from services.state.file_authority.interfaces import SessionProvider
from services.state.file_authority.paths import TEMP_PREFIX, build_temp_path
from services.state.file_authority.store import FileMetadataStore, utc_now

_LOGGER = get_logger(__name__)


def random_section() -> str:
    """Return one fresh random temp folder token."""
    return uuid4().hex


class TempFileLifecycleManager:
    """Manage files under ``/tmp/`` and their age-based expiry."""

    def __init__(
        self,
        *,
        store: FileMetadataStore,
        clock: Callable[[], datetime] = utc_now,
        section_factory: Callable[[], str] = random_section,
    ) -> None:
        self._store = store
        self._clock = clock
        self._section_factory = section_factory

    def create_temp_file(
        self,
        session: Session,
        *,
        filename: str,
        content: bytes,
        extension: str | None = None,
        created_by: str | None = None,
    ) -> FileRecord:
        """Persist ``content`` at ``/tmp/<random-section>/<filename><.ext>``."""
        path = build_temp_path(
            filename=filename,
            section=self._section_factory(),
            extension=extension,
        )
        return self._store.create(
            session, path=path, content=content, created_by=created_by
        )

    def find_expired(
        self, session: Session, *, expiration: timedelta
    ) -> tuple[int, list[FileRecord]]:
        """Return the temp record count and the records older than ``expiration``."""
        now = self._clock()
        records = self._store.find_all(
            session, path_prefix=TEMP_PREFIX, include_temp=True
        )
        expired = [record for record in records if now - record.created_on > expiration]
        return len(records), expired

    def cleanup_expired_temp_files(
        self, sessions: SessionProvider, *, expiration: timedelta
    ) -> TempCleanupResult:
        """Delete expired temp files, each in its own transaction.

        A failed deletion does not stop the sweep; failed paths are reported
        together in one ``TransactionFailureError`` once every file was tried.
        """
        with sessions.session() as session:
            scanned, expired = self.find_expired(session, expiration=expiration)

        deleted: list[str] = []
        failed: list[str] = []
        for record in expired:
            try:
                with sessions.session() as session:
                    if self._delete_if_unchanged(session, record=record):
                        deleted.append(record.path)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.warning(
                    "temp file cleanup failed: path=%s exception_type=%s",
                    record.path,
                    type(exc).__name__,
                    exc_info=exc,
                )
                failed.append(record.path)

        if failed:
            raise TransactionFailureError(
                f"cleanup_expired_temp_files failed for {len(failed)} file(s)",
                details=[
                    dependency_error(
                        "temp file cleanup failed",
                        code=codes.DEPENDENCY_FAILURE,
                        metadata={"path": path},
                    )
                    for path in failed
                ],
            )
        return TempCleanupResult(scanned=scanned, deleted_paths=tuple(deleted))

    def _delete_if_unchanged(self, session: Session, *, record: FileRecord) -> bool:
        """Delete ``record`` only when its path still names the same file."""
        current = self._store.find(session, path=record.path, for_update=True)
        if current is None or current.id != record.id:
            return False
        return self._store.remove(session, record=current)
