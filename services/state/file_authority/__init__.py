"""File Authority Service native package exports."""

from packages.filestore_shared.errors import (
    AlreadyExistsError,
    ErrorCategory,
    ErrorDetail,
    FileStoreError,
    InvalidArgumentError,
    NotFoundError,
    TransactionFailureError,
)
from services.state.file_authority.config import FileAuthoritySettings
from services.state.file_authority.domain import (
    FileRecord,
    HealthStatus,
    TempCleanupResult,
)
from services.state.file_authority.implementation import DefaultFileAuthorityService
from services.state.file_authority.paths import normalize_path
from services.state.file_authority.service import (
    FileAuthorityService,
    build_file_authority_service,
)

__all__ = [
    "AlreadyExistsError",
    "DefaultFileAuthorityService",
    "ErrorCategory",
    "ErrorDetail",
    "FileAuthorityService",
    "FileAuthoritySettings",
    "FileRecord",
    "FileStoreError",
    "HealthStatus",
    "InvalidArgumentError",
    "NotFoundError",
    "TempCleanupResult",
    "TransactionFailureError",
    "build_file_authority_service",
    "normalize_path",
]
