"""Blob substrate backed by a plain binary column table."""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    LargeBinary,
    MetaData,
    Table,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.orm import Session

from resources.substrates.blob.substrate import (
    BlobObjectNotFoundError,
    BlobObjectSubstrate,
)

metadata = MetaData()

file_objects = Table(
    "file_objects",
    metadata,
    Column(
        "id",
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    ),
    Column("content", LargeBinary, nullable=False),
)


class TableBlobSubstrate(BlobObjectSubstrate):
    """Store payloads as rows of ``file_objects`` keyed by an integer id."""

    def allocate(self, session: Session) -> int:
        result = session.execute(insert(file_objects).values(content=b""))
        return int(result.inserted_primary_key[0])

    def write_all(self, session: Session, object_ref: int, content: bytes) -> None:
        result = session.execute(
            update(file_objects)
            .where(file_objects.c.id == object_ref)
            .values(content=content)
        )
        if result.rowcount == 0:
            raise BlobObjectNotFoundError(object_ref)

    def read_all(self, session: Session, object_ref: int) -> bytes:
        row = session.execute(
            select(file_objects.c.content).where(file_objects.c.id == object_ref)
        ).first()
        if row is None:
            raise BlobObjectNotFoundError(object_ref)
        return bytes(row.content)

    def release(self, session: Session, object_ref: int) -> None:
        result = session.execute(
            delete(file_objects).where(file_objects.c.id == object_ref)
        )
        if result.rowcount == 0:
            raise BlobObjectNotFoundError(object_ref)
