"""Domain contracts for File Authority Service payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from services.state.file_authority.paths import is_temp_path


class FileRecord(BaseModel):
    """Authoritative metadata for one path-addressed file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    object_ref: int
    path: str
    created_on: datetime
    modified_on: datetime
    created_by: str | None = None
    modified_by: str | None = None

    @property
    def is_temp(self) -> bool:
        """Return whether this record lives in the temp namespace."""
        return is_temp_path(self.path)


class TempCleanupResult(BaseModel):
    """Outcome of one expired temp-file sweep."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    scanned: int
    deleted_paths: tuple[str, ...]


class HealthStatus(BaseModel):
    """File Authority Service and owned dependency readiness status payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
