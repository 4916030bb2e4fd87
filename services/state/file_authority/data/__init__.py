"""Data-layer exports for File Authority Service."""

from services.state.file_authority.data.repository import SqlFileRepository
from services.state.file_authority.data.migrations import (
    MigrationExecutionError,
    run_migrations,
)
from services.state.file_authority.data.runtime import FilePostgresRuntime
from services.state.file_authority.data.schema import files, metadata

__all__ = [
    "FilePostgresRuntime",
    "MigrationExecutionError",
    "SqlFileRepository",
    "files",
    "metadata",
    "run_migrations",
]
