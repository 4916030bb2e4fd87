"""Pydantic request-validation models for File Authority Service API."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBytes,
    ValidationInfo,
    field_validator,
    model_validator,
)

from services.state.file_authority.paths import (
    FOLDER_SEPARATOR,
    canonical_path,
    normalize_path_prefix,
    normalize_temp_extension,
)


class _ValidationModel(BaseModel):
    """Base request model with strict shape semantics."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def _utc(value: datetime | None) -> datetime | None:
    """Coerce one timestamp to aware UTC; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _principal(value: str | None) -> str | None:
    """Trim opaque principal ids; blank means absent."""
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


class PathRequest(_ValidationModel):
    """Validated request shape for operations keyed by one path."""

    path: str | None

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: str | None, info: ValidationInfo) -> str:
        return canonical_path(value, field_name=str(info.field_name))


class ListFilesRequest(_ValidationModel):
    """Validated listing filters."""

    path_prefix: str | None = None
    include_temp: bool = False
    skip: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)

    @field_validator("path_prefix")
    @classmethod
    def _validate_prefix(cls, value: str | None) -> str | None:
        return normalize_path_prefix(value)


class CreateFileRequest(PathRequest):
    """Validated create-file request shape."""

    content: StrictBytes
    created_on: datetime | None = None
    created_by: str | None = Field(default=None, max_length=128)

    @field_validator("created_on")
    @classmethod
    def _validate_created_on(cls, value: datetime | None) -> datetime | None:
        return _utc(value)

    @field_validator("created_by")
    @classmethod
    def _validate_created_by(cls, value: str | None) -> str | None:
        return _principal(value)


class UpdateModificationDateRequest(PathRequest):
    """Validated modification-date update request shape."""

    modified_on: datetime

    @field_validator("modified_on")
    @classmethod
    def _validate_modified_on(cls, value: datetime) -> datetime:
        return _utc(value)


class TransferRequest(_ValidationModel):
    """Validated copy/move request shape."""

    source_path: str | None
    destination_path: str | None
    overwrite: bool = False
    modified_by: str | None = Field(default=None, max_length=128)

    @field_validator("source_path", "destination_path")
    @classmethod
    def _validate_paths(cls, value: str | None, info: ValidationInfo) -> str:
        return canonical_path(value, field_name=str(info.field_name))

    @field_validator("modified_by")
    @classmethod
    def _validate_modified_by(cls, value: str | None) -> str | None:
        return _principal(value)

    @model_validator(mode="after")
    def _reject_same_path(self) -> "TransferRequest":
        """Source and destination must name different files."""
        if self.source_path == self.destination_path:
            raise ValueError("source_path and destination_path must differ")
        return self


class CreateTempFileRequest(_ValidationModel):
    """Validated temp-file creation request shape."""

    filename: str | None
    content: StrictBytes
    extension: str | None = None
    created_by: str | None = Field(default=None, max_length=128)

    @field_validator("filename")
    @classmethod
    def _validate_filename(cls, value: str | None) -> str:
        """Require one non-blank path segment."""
        normalized = (value or "").strip()
        if normalized == "":
            raise ValueError("filename is required")
        if FOLDER_SEPARATOR in normalized:
            raise ValueError("filename must not contain a path separator")
        return normalized

    @field_validator("extension")
    @classmethod
    def _validate_extension(cls, value: str | None) -> str:
        normalized = normalize_temp_extension(value)
        if FOLDER_SEPARATOR in normalized:
            raise ValueError("extension must not contain a path separator")
        return normalized

    @field_validator("created_by")
    @classmethod
    def _validate_created_by(cls, value: str | None) -> str | None:
        return _principal(value)


class CleanupTempFilesRequest(_ValidationModel):
    """Validated expired temp-file sweep request shape."""

    expiration: timedelta

    @field_validator("expiration")
    @classmethod
    def _validate_expiration(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("expiration must not be negative")
        return value
