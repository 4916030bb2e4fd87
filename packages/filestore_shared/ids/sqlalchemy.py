"""SQLAlchemy helpers for ULID-backed primary keys."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, LargeBinary

from packages.filestore_shared.ids.ulid import ULID_BYTES_LENGTH


def ulid_primary_key_column(
    name: str = "id",
    *,
    length_constraint_name: str | None = None,
) -> Column[bytes]:
    """Return a standard ULID primary-key column definition.

    Uses a binary column (``bytea`` on Postgres) with a strict 16-byte check
    constraint. ``length()`` counts bytes for binary values on both Postgres
    and SQLite.
    """
    constraint = CheckConstraint(
        f"length({name}) = {ULID_BYTES_LENGTH}",
        name=length_constraint_name or f"ck_{name}_ulid_16",
    )
    return Column(
        name,
        LargeBinary(ULID_BYTES_LENGTH),
        constraint,
        primary_key=True,
        nullable=False,
    )
