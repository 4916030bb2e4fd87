"""Blob substrate backed by Postgres server-side large objects."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from resources.substrates.blob.substrate import (
    BlobObjectNotFoundError,
    BlobObjectSubstrate,
)

_INV_WRITE = 0x20000


class PostgresLargeObjectSubstrate(BlobObjectSubstrate):
    """Store payloads as ``pg_largeobject`` entries addressed by OID.

    Large-object functions are transactional, so every call issued through the
    caller session is undone by that session's rollback.
    """

    def allocate(self, session: Session) -> int:
        """Create one empty large object and return its OID."""
        oid = session.execute(text("SELECT lo_create(0)")).scalar_one()
        return int(oid)

    def write_all(self, session: Session, object_ref: int, content: bytes) -> None:
        """Truncate then write the full payload at offset zero."""
        try:
            session.execute(
                text("SELECT lo_truncate(lo_open(CAST(:oid AS oid), :mode), 0)"),
                {"oid": object_ref, "mode": _INV_WRITE},
            )
            session.execute(
                text("SELECT lo_put(CAST(:oid AS oid), 0, :data)"),
                {"oid": object_ref, "data": content},
            )
        except DBAPIError as exc:
            _raise_if_missing(exc, object_ref)
            raise

    def read_all(self, session: Session, object_ref: int) -> bytes:
        """Read the full payload of one large object."""
        try:
            data = session.execute(
                text("SELECT lo_get(CAST(:oid AS oid))"), {"oid": object_ref}
            ).scalar_one()
        except DBAPIError as exc:
            _raise_if_missing(exc, object_ref)
            raise
        return bytes(data) if data is not None else b""

    def release(self, session: Session, object_ref: int) -> None:
        """Unlink one large object."""
        try:
            session.execute(text("SELECT lo_unlink(CAST(:oid AS oid))"), {"oid": object_ref})
        except DBAPIError as exc:
            _raise_if_missing(exc, object_ref)
            raise


def _raise_if_missing(exc: DBAPIError, object_ref: int) -> None:
    """Translate missing large-object errors into ``BlobObjectNotFoundError``."""
    if "does not exist" in str(exc):
        raise BlobObjectNotFoundError(object_ref) from exc
