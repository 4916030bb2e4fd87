"""Pydantic settings for File Authority Service behavior."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

from packages.filestore_shared.config import (
    FileStoreSettings,
    resolve_component_settings,
)
from services.state.file_authority.component import SERVICE_COMPONENT_ID


class FileAuthoritySettings(BaseModel):
    """File Authority Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_content_size_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    temp_expiration_seconds: int = Field(default=24 * 60 * 60, ge=0)

    @property
    def temp_expiration(self) -> timedelta:
        """Return the default temp-file age limit."""
        return timedelta(seconds=self.temp_expiration_seconds)


def resolve_file_authority_settings(
    settings: FileStoreSettings,
) -> FileAuthoritySettings:
    """Resolve settings from ``components.service.file_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=FileAuthoritySettings,
    )
