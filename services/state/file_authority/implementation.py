"""Concrete File Authority Service implementation."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from packages.filestore_shared.config import FileStoreSettings
from packages.filestore_shared.errors import (
    FileStoreError,
    InvalidArgumentError,
    TransactionFailureError,
    codes,
    dependency_error,
    error_for_details,
    validation_error,
)
from packages.filestore_shared.logging import get_logger, public_api_logged
from resources.substrates.blob import BlobObjectSubstrate
from resources.substrates.postgres.errors import (
    is_database_error,
    normalize_postgres_error,
)
from services.state.file_authority.component import SERVICE_COMPONENT_ID
from services.state.file_authority.config import FileAuthoritySettings
from services.state.file_authority.domain import (
    FileRecord,
    HealthStatus,
    TempCleanupResult,
)
from services.state.file_authority.interfaces import FileRepository, SessionProvider
from services.state.file_authority.service import (
    FileAuthorityService,
    build_file_authority_service,
)
from services.state.file_authority.store import FileMetadataStore, utc_now
from services.state.file_authority.temp_files import (
    TempFileLifecycleManager,
    random_section,
)
from services.state.file_authority.transfer import FileTransferOrchestrator
from services.state.file_authority.validation import (
    CleanupTempFilesRequest,
    CreateFileRequest,
    CreateTempFileRequest,
    ListFilesRequest,
    PathRequest,
    TransferRequest,
    UpdateModificationDateRequest,
)

_LOGGER = get_logger(__name__)
_HEALTH_CHECK_PATH = "/__filestore_health_check__"

TRequest = TypeVar("TRequest", bound=BaseModel)
TResult = TypeVar("TResult")


class DefaultFileAuthorityService(FileAuthorityService):
    """Default implementation over SQL metadata and a transactional blob store.

    Each public call opens exactly one unit of work (the temp sweep opens one
    per file) and hands its session to the store, orchestrator, and lifecycle
    manager.
    """

    def __init__(
        self,
        *,
        settings: FileAuthoritySettings,
        sessions: SessionProvider,
        repository: FileRepository,
        blob_store: BlobObjectSubstrate,
        clock: Callable[[], datetime] = utc_now,
        section_factory: Callable[[], str] = random_section,
        readiness_probe: Callable[[], bool] | None = None,
    ) -> None:
        self._settings = settings
        self._sessions = sessions
        self._readiness_probe = readiness_probe
        self._store = FileMetadataStore(
            repository=repository, blob_store=blob_store, clock=clock
        )
        self._transfers = FileTransferOrchestrator(store=self._store, clock=clock)
        self._temp_files = TempFileLifecycleManager(
            store=self._store, clock=clock, section_factory=section_factory
        )

    @classmethod
    def from_settings(cls, settings: FileStoreSettings) -> FileAuthorityService:
        """Build the service from typed settings and owned resources."""
        return build_file_authority_service(settings=settings)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def health(self) -> HealthStatus:
        """Report readiness of the metadata schema and the database."""
        substrate_ready = (
            True if self._readiness_probe is None else self._readiness_probe()
        )
        try:
            with self._sessions.session() as session:
                self._store.find(session, path=_HEALTH_CHECK_PATH)
        except Exception as exc:  # noqa: BLE001
            _LOGGER.warning(
                "health probe failed: exception_type=%s",
                type(exc).__name__,
                exc_info=exc,
            )
            return HealthStatus(
                service_ready=False,
                substrate_ready=substrate_ready,
                detail=f"metadata probe failed: {type(exc).__name__}",
            )
        return HealthStatus(
            service_ready=True,
            substrate_ready=substrate_ready,
            detail="ok" if substrate_ready else "postgres ping failed",
        )

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("path",)
    )
    def find(self, *, path: str) -> FileRecord | None:
        """Read one file record by path."""
        request = self._validate_request(
            operation="find", model=PathRequest, payload={"path": path}
        )
        return self._in_transaction(
            operation="find",
            work=lambda session: self._store.find(session, path=request.path),
        )

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("path_prefix",)
    )
    def find_all(
        self,
        *,
        path_prefix: str | None = None,
        include_temp: bool = False,
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[FileRecord]:
        """List file records ordered by path."""
        request = self._validate_request(
            operation="find_all",
            model=ListFilesRequest,
            payload={
                "path_prefix": path_prefix,
                "include_temp": include_temp,
                "skip": skip,
                "limit": limit,
            },
        )
        return self._in_transaction(
            operation="find_all",
            work=lambda session: self._store.find_all(
                session,
                path_prefix=request.path_prefix,
                include_temp=request.include_temp,
                skip=request.skip,
                limit=request.limit,
            ),
        )

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("path",)
    )
    def read_content(self, *, path: str) -> bytes:
        """Read the full payload of one file."""
        request = self._validate_request(
            operation="read_content", model=PathRequest, payload={"path": path}
        )
        return self._in_transaction(
            operation="read_content",
            work=lambda session: self._store.read_content(session, path=request.path),
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("path",),
        principal_fields=("created_by",),
    )
    def create(
        self,
        *,
        path: str,
        content: bytes,
        created_on: datetime | None = None,
        created_by: str | None = None,
    ) -> FileRecord:
        """Persist one new file and return its stored record."""
        request = self._validate_request(
            operation="create",
            model=CreateFileRequest,
            payload={
                "path": path,
                "content": content,
                "created_on": created_on,
                "created_by": created_by,
            },
        )
        self._check_content_size(operation="create", content=request.content)
        return self._in_transaction(
            operation="create",
            work=lambda session: self._store.create(
                session,
                path=request.path,
                content=request.content,
                created_on=request.created_on,
                created_by=request.created_by,
            ),
        )

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("path",)
    )
    def update_modification_date(
        self, *, path: str, modified_on: datetime
    ) -> FileRecord:
        """Set the modification timestamp of one file."""
        request = self._validate_request(
            operation="update_modification_date",
            model=UpdateModificationDateRequest,
            payload={"path": path, "modified_on": modified_on},
        )
        return self._in_transaction(
            operation="update_modification_date",
            work=lambda session: self._store.update_modification_date(
                session, path=request.path, modified_on=request.modified_on
            ),
        )

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("path",)
    )
    def delete(self, *, path: str) -> None:
        """Delete one file and its payload with idempotent semantics."""
        request = self._validate_request(
            operation="delete", model=PathRequest, payload={"path": path}
        )
        self._in_transaction(
            operation="delete",
            work=lambda session: self._store.delete(session, path=request.path),
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("source_path", "destination_path"),
        principal_fields=("modified_by",),
    )
    def copy(
        self,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool = False,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Copy one file to a new path with an independent payload."""
        request = self._validate_transfer(
            operation="copy",
            source_path=source_path,
            destination_path=destination_path,
            overwrite=overwrite,
            modified_by=modified_by,
        )
        return self._in_transaction(
            operation="copy",
            work=lambda session: self._transfers.copy(
                session,
                source_path=request.source_path,
                destination_path=request.destination_path,
                overwrite=request.overwrite,
                modified_by=request.modified_by,
            ),
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("source_path", "destination_path"),
        principal_fields=("modified_by",),
    )
    def move(
        self,
        *,
        source_path: str,
        destination_path: str,
        overwrite: bool = False,
        modified_by: str | None = None,
    ) -> FileRecord:
        """Move one file to a new path keeping its id and payload object."""
        request = self._validate_transfer(
            operation="move",
            source_path=source_path,
            destination_path=destination_path,
            overwrite=overwrite,
            modified_by=modified_by,
        )
        return self._in_transaction(
            operation="move",
            work=lambda session: self._transfers.move(
                session,
                source_path=request.source_path,
                destination_path=request.destination_path,
                overwrite=request.overwrite,
                modified_by=request.modified_by,
            ),
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("filename",),
        principal_fields=("created_by",),
    )
    def create_temp_file(
        self,
        *,
        filename: str,
        content: bytes,
        extension: str | None = None,
        created_by: str | None = None,
    ) -> FileRecord:
        """Persist one file under a fresh ``/tmp/<section>/`` folder."""
        request = self._validate_request(
            operation="create_temp_file",
            model=CreateTempFileRequest,
            payload={
                "filename": filename,
                "content": content,
                "extension": extension,
                "created_by": created_by,
            },
        )
        self._check_content_size(operation="create_temp_file", content=request.content)
        return self._in_transaction(
            operation="create_temp_file",
            work=lambda session: self._temp_files.create_temp_file(
                session,
                filename=request.filename,
                content=request.content,
                extension=request.extension,
                created_by=request.created_by,
            ),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def cleanup_expired_temp_files(
        self, *, expiration: timedelta | None = None
    ) -> TempCleanupResult:
        """Delete temp files whose age exceeds ``expiration``."""
        request = self._validate_request(
            operation="cleanup_expired_temp_files",
            model=CleanupTempFilesRequest,
            payload={
                "expiration": (
                    self._settings.temp_expiration if expiration is None else expiration
                )
            },
        )
        try:
            result = self._temp_files.cleanup_expired_temp_files(
                self._sessions, expiration=request.expiration
            )
        except FileStoreError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._transaction_failure(
                operation="cleanup_expired_temp_files", exc=exc
            ) from exc
        _LOGGER.info(
            "temp file cleanup finished: scanned=%d deleted=%d",
            result.scanned,
            len(result.deleted_paths),
        )
        return result

    def _in_transaction(
        self, *, operation: str, work: Callable[[Session], TResult]
    ) -> TResult:
        """Run ``work`` in one unit of work and map unexpected failures."""
        try:
            with self._sessions.session() as session:
                return work(session)
        except FileStoreError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._transaction_failure(operation=operation, exc=exc) from exc

    def _validate_request(
        self,
        *,
        operation: str,
        model: type[TRequest],
        payload: dict[str, Any],
    ) -> TRequest:
        """Validate one request payload model before any I/O."""
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise error_for_details(
                operation=operation,
                details=[
                    validation_error(
                        f"request validation failed: {err['msg']}",
                        code=codes.INVALID_ARGUMENT,
                        metadata={"field": ".".join(str(p) for p in err["loc"])},
                    )
                    for err in exc.errors()
                ],
            ) from exc

    def _validate_transfer(
        self,
        *,
        operation: str,
        source_path: str,
        destination_path: str,
        overwrite: bool,
        modified_by: str | None,
    ) -> TransferRequest:
        return self._validate_request(
            operation=operation,
            model=TransferRequest,
            payload={
                "source_path": source_path,
                "destination_path": destination_path,
                "overwrite": overwrite,
                "modified_by": modified_by,
            },
        )

    def _check_content_size(self, *, operation: str, content: bytes) -> None:
        if len(content) > self._settings.max_content_size_bytes:
            raise InvalidArgumentError(
                f"{operation} failed: content exceeds max_content_size_bytes",
                details=[
                    validation_error(
                        "content exceeds max_content_size_bytes",
                        code=codes.INVALID_ARGUMENT,
                        metadata={"size_bytes": str(len(content))},
                    )
                ],
            )

    def _transaction_failure(
        self, *, operation: str, exc: Exception
    ) -> TransactionFailureError:
        """Map one rolled-back dependency/runtime exception into a typed error."""
        _LOGGER.warning(
            "%s failed and was rolled back: exception_type=%s",
            operation,
            type(exc).__name__,
            exc_info=exc,
        )
        if is_database_error(exc):
            detail = normalize_postgres_error(exc)
        else:
            detail = dependency_error(
                f"{operation} failed",
                code=codes.DEPENDENCY_FAILURE,
                metadata={"exception_type": type(exc).__name__},
            )
        return TransactionFailureError(f"{operation} failed", details=[detail])
