"""Typed exceptions raised by File Store public operations."""

from __future__ import annotations

from collections.abc import Sequence

from .types import ErrorCategory, ErrorDetail


class FileStoreError(Exception):
    """Base error type for File Store failures."""

    def __init__(self, message: str, *, details: Sequence[ErrorDetail] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.details: tuple[ErrorDetail, ...] = tuple(details)

    @property
    def category(self) -> ErrorCategory:
        """Return the category of the leading error detail."""
        if len(self.details) == 0:
            return ErrorCategory.UNSPECIFIED
        return self.details[0].category

    @property
    def code(self) -> str:
        """Return the code of the leading error detail."""
        if len(self.details) == 0:
            return ""
        return self.details[0].code


class InvalidArgumentError(FileStoreError):
    """Caller input failed validation before any I/O."""


class NotFoundError(FileStoreError):
    """Operation requires an existing file record but none exists."""


class AlreadyExistsError(FileStoreError):
    """Destination path collides with a live file record."""


class TransactionFailureError(FileStoreError):
    """Atomic blob and metadata unit of work failed and was rolled back."""


_CATEGORY_TO_ERROR: dict[ErrorCategory, type[FileStoreError]] = {
    ErrorCategory.VALIDATION: InvalidArgumentError,
    ErrorCategory.NOT_FOUND: NotFoundError,
    ErrorCategory.CONFLICT: AlreadyExistsError,
}


def error_for_details(
    *, operation: str, details: Sequence[ErrorDetail]
) -> FileStoreError:
    """Build the typed exception matching the leading error detail category."""
    if len(details) == 0:
        raise ValueError("at least one error detail is required")
    error_type = _CATEGORY_TO_ERROR.get(details[0].category, TransactionFailureError)
    return error_type(
        f"{operation} failed: {'; '.join(item.message for item in details)}",
        details=details,
    )
