"""Shared ULID primitives for binary primary keys."""

from packages.filestore_shared.ids.sqlalchemy import ulid_primary_key_column
from packages.filestore_shared.ids.ulid import (
    ULID_BYTES_LENGTH,
    generate_ulid_bytes,
    generate_ulid_str,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)

__all__ = [
    "ULID_BYTES_LENGTH",
    "ulid_primary_key_column",
    "ulid_str_to_bytes",
    "ulid_bytes_to_str",
    "generate_ulid_bytes",
    "generate_ulid_str",
]
