"""create file authority tables"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from packages.filestore_shared.config import load_settings
from resources.substrates.postgres.config import resolve_postgres_settings

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _schema() -> str | None:
    """Resolve the configured File Authority schema name."""
    return resolve_postgres_settings(load_settings()).schema_name


def upgrade() -> None:
    """Create file metadata and table-backed blob objects."""
    schema = _schema()

    op.create_table(
        "file_objects",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("content", sa.LargeBinary(), nullable=False),
        schema=schema,
    )

    op.create_table(
        "files",
        sa.Column("id", sa.LargeBinary(length=16), primary_key=True, nullable=False),
        sa.Column("object_ref", sa.BigInteger(), nullable=False),
        sa.Column("filepath", sa.String(length=1024), nullable=False),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=False),
        sa.Column("modified_on", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=True),
        sa.Column("modified_by", sa.String(length=128), nullable=True),
        sa.CheckConstraint("length(id) = 16", name="ck_files_id_ulid_16"),
        sa.UniqueConstraint("filepath", name="uq_files_filepath"),
        sa.UniqueConstraint("object_ref", name="uq_files_object_ref"),
        schema=schema,
    )


def downgrade() -> None:
    """Drop file metadata and table-backed blob objects."""
    schema = _schema()
    op.drop_table("files", schema=schema)
    op.drop_table("file_objects", schema=schema)
