"""Canonical path rules and the reserved temporary-file namespace.

Every path that reaches storage is canonical: trimmed, lowercased, and
starting with exactly one leading separator. Paths below ``/tmp/`` are temp
files and are hidden from default listings.
"""

from __future__ import annotations

from packages.filestore_shared.errors import (
    InvalidArgumentError,
    codes,
    validation_error,
)

FOLDER_SEPARATOR = "/"
TEMP_FOLDER_NAME = "tmp"
TEMP_PREFIX = f"{FOLDER_SEPARATOR}{TEMP_FOLDER_NAME}{FOLDER_SEPARATOR}"
MAX_PATH_LENGTH = 1024


def canonical_path(value: str | None, *, field_name: str = "path") -> str:
    """Return the canonical form of one path or raise ``ValueError``."""
    if value is None:
        raise ValueError(f"{field_name} is required")
    normalized = value.strip().lower()
    if normalized == "":
        raise ValueError(f"{field_name} is required")
    if not normalized.startswith(FOLDER_SEPARATOR):
        normalized = FOLDER_SEPARATOR + normalized
    if len(normalized) > MAX_PATH_LENGTH:
        raise ValueError(
            f"{field_name} must be at most {MAX_PATH_LENGTH} characters"
        )
    return normalized


def normalize_path(path: str | None) -> str:
    """Return the canonical form of ``path``.

    Raises ``InvalidArgumentError`` for missing, empty, or whitespace input.
    """
    try:
        return canonical_path(path)
    except ValueError as exc:
        raise InvalidArgumentError(
            str(exc),
            details=[validation_error(str(exc), code=codes.INVALID_ARGUMENT)],
        ) from exc


def normalize_path_prefix(prefix: str | None) -> str | None:
    """Return a canonical listing prefix, or ``None`` when no filter applies."""
    if prefix is None or prefix.strip() == "":
        return None
    return canonical_path(prefix, field_name="path_prefix")


def is_temp_path(path: str) -> bool:
    """Return whether one canonical path lies in the temp namespace."""
    return path.startswith(TEMP_PREFIX)


def normalize_temp_extension(extension: str | None) -> str:
    """Lowercase one extension and force a single leading dot; blank is empty."""
    if extension is None:
        return ""
    normalized = extension.strip().lower().lstrip(".")
    if normalized == "":
        return ""
    return f".{normalized}"


def build_temp_path(*, filename: str, section: str, extension: str | None) -> str:
    """Build ``/tmp/<section>/<filename><.ext>`` in canonical form."""
    return canonical_path(
        f"{TEMP_PREFIX}{section}{FOLDER_SEPARATOR}{filename.strip()}"
        f"{normalize_temp_extension(extension)}"
    )
