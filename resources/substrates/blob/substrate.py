"""Transport-agnostic protocol for transactional blob object operations."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.orm import Session


class BlobObjectNotFoundError(LookupError):
    """Referenced blob object does not exist in the backing store."""

    def __init__(self, object_ref: int) -> None:
        super().__init__(f"blob object {object_ref} does not exist")
        self.object_ref = object_ref


class BlobObjectSubstrate(Protocol):
    """Protocol for integer-addressed blob persistence inside a caller session.

    Every operation runs on the session handed in by the caller so blob writes
    commit or roll back together with the metadata rows that reference them.
    """

    def allocate(self, session: Session) -> int:
        """Create one empty blob object and return its reference."""

    def write_all(self, session: Session, object_ref: int, content: bytes) -> None:
        """Replace the full payload of one existing blob object."""

    def read_all(self, session: Session, object_ref: int) -> bytes:
        """Read the full payload of one existing blob object."""

    def release(self, session: Session, object_ref: int) -> None:
        """Destroy one existing blob object."""
