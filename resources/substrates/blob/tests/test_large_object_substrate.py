"""Unit tests for the Postgres large-object blob substrate."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import ProgrammingError

from resources.substrates.blob import (
    BlobObjectNotFoundError,
    PostgresLargeObjectSubstrate,
)


class _FakeResult:
    """Result double exposing ``scalar_one``."""

    def __init__(self, value: object) -> None:
        self._value = value

    def scalar_one(self) -> object:
        return self._value


class _RecordingSession:
    """Session double capturing SQL text and parameters."""

    def __init__(self, *, scalar: object = None, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, dict[str, object] | None]] = []
        self._scalar = scalar
        self._error = error

    def execute(self, statement, params=None) -> _FakeResult:
        self.calls.append((str(statement), params))
        if self._error is not None:
            raise self._error
        return _FakeResult(self._scalar)


def _missing_object_error(oid: int) -> ProgrammingError:
    return ProgrammingError(
        "SELECT lo_get(%(oid)s)",
        {"oid": oid},
        Exception(f"large object {oid} does not exist"),
    )


def test_allocate_creates_large_object() -> None:
    """Allocation should call ``lo_create`` and return the OID as int."""
    session = _RecordingSession(scalar=16400)

    ref = PostgresLargeObjectSubstrate().allocate(session)

    assert ref == 16400
    assert session.calls == [("SELECT lo_create(0)", None)]


def test_write_all_truncates_then_puts_payload() -> None:
    """Writes should truncate the object then put bytes at offset zero."""
    session = _RecordingSession()

    PostgresLargeObjectSubstrate().write_all(session, 7, b"abc")

    assert session.calls == [
        ("SELECT lo_truncate(lo_open(CAST(:oid AS oid), :mode), 0)", {"oid": 7, "mode": 0x20000}),
        ("SELECT lo_put(CAST(:oid AS oid), 0, :data)", {"oid": 7, "data": b"abc"}),
    ]


def test_read_all_returns_bytes() -> None:
    """Reads should coerce driver buffers into bytes."""
    session = _RecordingSession(scalar=memoryview(b"hello"))

    data = PostgresLargeObjectSubstrate().read_all(session, 9)

    assert data == b"hello"
    assert session.calls == [("SELECT lo_get(CAST(:oid AS oid))", {"oid": 9})]


def test_release_unlinks_object() -> None:
    """Release should unlink the large object."""
    session = _RecordingSession(scalar=1)

    PostgresLargeObjectSubstrate().release(session, 11)

    assert session.calls == [("SELECT lo_unlink(CAST(:oid AS oid))", {"oid": 11})]


def test_missing_object_maps_to_not_found() -> None:
    """Driver errors for unknown OIDs should become ``BlobObjectNotFoundError``."""
    session = _RecordingSession(error=_missing_object_error(5))

    with pytest.raises(BlobObjectNotFoundError):
        PostgresLargeObjectSubstrate().read_all(session, 5)


def test_other_driver_errors_propagate_unchanged() -> None:
    """Unrelated driver errors should propagate as-is."""
    error = ProgrammingError("SELECT lo_unlink", {}, Exception("permission denied"))
    session = _RecordingSession(error=error)

    with pytest.raises(ProgrammingError):
        PostgresLargeObjectSubstrate().release(session, 5)
