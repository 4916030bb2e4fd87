"""Process startup for File Authority Service: logging, migrations, wiring."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from packages.filestore_shared.config import FileStoreSettings, load_settings
from packages.filestore_shared.logging import configure_logging, get_logger
from services.state.file_authority.data.migrations import run_migrations
from services.state.file_authority.service import (
    FileAuthorityService,
    build_file_authority_service,
)

_LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FileAuthorityStartupResult:
    """Summary of one startup pass."""

    settings: FileStoreSettings
    service: FileAuthorityService
    migration_config: Path | None


def start_file_authority(
    *,
    settings: FileStoreSettings | None = None,
    run_schema_migrations: bool = False,
    migration_runner: Callable[[], Path] = run_migrations,
    service_builder: Callable[..., FileAuthorityService] = build_file_authority_service,
) -> FileAuthorityStartupResult:
    """Configure logging, optionally migrate, then build the service."""
    resolved = settings if settings is not None else load_settings()
    configure_logging(
        level=resolved.logging.level,
        json_output=resolved.logging.json_output,
        service=resolved.logging.service,
        environment=resolved.logging.environment,
    )

    migration_config = migration_runner() if run_schema_migrations else None
    service = service_builder(settings=resolved)
    _LOGGER.info(
        "file authority started: migrated=%s", migration_config is not None
    )
    return FileAuthorityStartupResult(
        settings=resolved,
        service=service,
        migration_config=migration_config,
    )
