"""Public shared error API for File Store components."""

from . import codes
from .exceptions import (
    AlreadyExistsError,
    FileStoreError,
    InvalidArgumentError,
    NotFoundError,
    TransactionFailureError,
    error_for_details,
)
from .factories import (
    conflict_error,
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "AlreadyExistsError",
    "ErrorCategory",
    "ErrorDetail",
    "FileStoreError",
    "InvalidArgumentError",
    "NotFoundError",
    "TransactionFailureError",
    "codes",
    "conflict_error",
    "dependency_error",
    "error_for_details",
    "internal_error",
    "not_found_error",
    "validation_error",
]
