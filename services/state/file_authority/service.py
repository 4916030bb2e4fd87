"""Authoritative in-process Python API for File Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from packages.filestore_shared.config import FileStoreSettings
from resources.substrates.blob.substrate import BlobObjectSubstrate
from services.state.file_authority.domain import (
    FileRecord,
    HealthStatus,
    TempCleanupResult,
)


class FileAuthorityService(ABC):
    """Public API for path-addressed file operations."""

    @abstractmethod
    def find(self, *, path: str) -> FileRecord | None:
        """Read one file record by path; ``None`` when missing."""

    @abstractmethod
    def find_all(
        self,
        *,
        path_prefix: str | None = None,
        include_temp: bool = False,
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[FileRecord]:
        """List file records ordered by path."""

    @abstractmethod
    def read_content(self, *, path: str) -> bytes:
        """Read the full payload of one file."""

    @abstractmethod
    def create(
        self,
        *,
        path: str,
        content: bytes,
        created_on: datetime | None = None,
        created_by: str | None = None,
    ) -> FileRecord:
        """Persist one new file and return its record."""

    @abstractmethod
    def update_modification_date(
        self, *, path: str, modified_on: datetime
    ) -> FileRecord:
        """Set the modification timestamp of one file."""

    @abstractmethod
    def delete(self, *, path: str) -> None:
        """Delete one file and its payload; missing files are a no-op."""

    @abstractmethod
    def copy(
        self,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool = False,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Copy one file to a new path with an independent payload."""

    @abstractmethod
    def move(
        self,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool = False,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Move one file to a new path keeping its identity."""

    @abstractmethod
    def create_temp_file(
        self,
        *,
        filename: str,
        content: bytes,
        extension: str | None = None,
        created_by: str | None = None,
    ) -> FileRecord:
        """Persist one file in the temp namespace."""

    @abstractmethod
    def cleanup_expired_temp_files(
        self, *, expiration: timedelta | None = None
    ) -> TempCleanupResult:
        """Delete temp files older than ``expiration``."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return service and owned dependency readiness status."""


def build_file_authority_service(
    *,
    settings: FileStoreSettings,
    blob_store: BlobObjectSubstrate | None = None,
) -> FileAuthorityService:
    """Build default File Authority implementation from typed settings."""
    from resources.substrates.blob import (
        create_blob_substrate,
        resolve_blob_substrate_settings,
    )
    from services.state.file_authority.config import resolve_file_authority_settings
    from services.state.file_authority.data import (
        FilePostgresRuntime,
        SqlFileRepository,
    )
    from services.state.file_authority.implementation import (
        DefaultFileAuthorityService,
    )

    runtime = FilePostgresRuntime.from_settings(settings)
    return DefaultFileAuthorityService(
        settings=resolve_file_authority_settings(settings),
        sessions=runtime.schema_sessions,
        repository=SqlFileRepository(),
        blob_store=blob_store
        or create_blob_substrate(resolve_blob_substrate_settings(settings)),
        readiness_probe=runtime.is_healthy,
    )
