"""SQLAlchemy table definitions owned by File Authority Service."""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)

from packages.filestore_shared.ids import ulid_primary_key_column
from services.state.file_authority.paths import MAX_PATH_LENGTH

metadata = MetaData()

files = Table(
    "files",
    metadata,
    ulid_primary_key_column("id", length_constraint_name="ck_files_id_ulid_16"),
    Column("object_ref", BigInteger, nullable=False),
    Column("filepath", String(MAX_PATH_LENGTH), nullable=False),
    Column("created_on", DateTime(timezone=True), nullable=False),
    Column("modified_on", DateTime(timezone=True), nullable=False),
    Column("created_by", String(128), nullable=True),
    Column("modified_by", String(128), nullable=True),
    UniqueConstraint("filepath", name="uq_files_filepath"),
    UniqueConstraint("object_ref", name="uq_files_object_ref"),
)
