"""Behavior tests for File Authority Service store semantics."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import Engine

from packages.filestore_shared.errors import (
    AlreadyExistsError,
    ErrorCategory,
    InvalidArgumentError,
    NotFoundError,
    codes,
)
from resources.substrates.blob import BlobObjectNotFoundError
from services.state.file_authority.implementation import DefaultFileAuthorityService
from services.state.file_authority.tests.helpers import (
    FakeClock,
    FaultyBlobStore,
    count_rows,
)


def test_create_find_read_roundtrip(
    service: DefaultFileAuthorityService, clock: FakeClock
) -> None:
    created = service.create(path="/Docs/Readme.TXT", content=b"hello", created_by="ann")

    assert created.path == "/docs/readme.txt"
    assert created.created_on == clock.now
    assert created.modified_on == created.created_on
    assert created.created_by == "ann"
    assert created.modified_by == "ann"
    assert created.is_temp is False
    assert service.find(path=created.path) == created
    assert service.read_content(path=created.path) == b"hello"


def test_create_keeps_caller_supplied_created_on(
    service: DefaultFileAuthorityService,
) -> None:
    stamp = datetime(2020, 5, 6, 7, 8, 9, tzinfo=UTC)

    created = service.create(path="/old.bin", content=b"", created_on=stamp)

    assert created.created_on == stamp
    assert created.modified_on == stamp
    assert service.read_content(path="/old.bin") == b""


def test_lookups_agree_on_normalized_path(service: DefaultFileAuthorityService) -> None:
    created = service.create(path="a/b", content=b"x")

    assert service.find(path="/A/B") == created
    assert service.find(path="  a/b ") == created


def test_find_returns_none_on_miss(service: DefaultFileAuthorityService) -> None:
    assert service.find(path="/nothing/here") is None


def test_second_create_on_same_path_fails_and_keeps_first(
    service: DefaultFileAuthorityService, engine: Engine
) -> None:
    first = service.create(path="/dup.txt", content=b"one")

    with pytest.raises(AlreadyExistsError) as exc_info:
        service.create(path="/DUP.txt", content=b"two")

    assert exc_info.value.code == codes.ALREADY_EXISTS
    assert service.find(path="/dup.txt") == first
    assert service.read_content(path="/dup.txt") == b"one"
    assert count_rows(engine) == (1, 1)


def test_delete_leaves_no_trace(
    service: DefaultFileAuthorityService,
    engine: Engine,
    blob_store: FaultyBlobStore,
    session_factory,
) -> None:
    created = service.create(path="/docs/readme.txt", content=b"hello")

    service.delete(path="/docs/readme.txt")

    assert service.find(path="/docs/readme.txt") is None
    assert count_rows(engine) == (0, 0)
    with session_factory() as session:
        with pytest.raises(BlobObjectNotFoundError):
            blob_store.read_all(session, created.object_ref)


def test_delete_missing_path_is_a_noop(
    service: DefaultFileAuthorityService, engine: Engine
) -> None:
    service.create(path="/keep", content=b"k")

    assert service.delete(path="/missing") is None
    assert count_rows(engine) == (1, 1)


def test_update_modification_date_changes_only_modified_on(
    service: DefaultFileAuthorityService,
) -> None:
    created = service.create(path="/notes.md", content=b"n", created_by="ann")
    later = created.created_on + timedelta(days=3)

    updated = service.update_modification_date(path="/Notes.md", modified_on=later)

    assert updated.modified_on == later
    assert updated.model_dump(exclude={"modified_on"}) == created.model_dump(
        exclude={"modified_on"}
    )


def test_update_modification_date_missing_path_raises_not_found(
    service: DefaultFileAuthorityService,
) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        service.update_modification_date(
            path="/missing", modified_on=datetime(2026, 1, 1, tzinfo=UTC)
        )

    assert exc_info.value.category == ErrorCategory.NOT_FOUND


def test_read_content_missing_path_raises_not_found(
    service: DefaultFileAuthorityService,
) -> None:
    with pytest.raises(NotFoundError):
        service.read_content(path="/missing")


def test_find_all_temp_filter(service: DefaultFileAuthorityService) -> None:
    service.create(path="/a/b", content=b"1")
    service.create(path="/tmp/x1/f.txt", content=b"2")

    default = service.find_all()
    everything = service.find_all(include_temp=True)

    assert [record.path for record in default] == ["/a/b"]
    assert [record.path for record in everything] == ["/a/b", "/tmp/x1/f.txt"]


def test_find_all_prefix_skip_and_limit(service: DefaultFileAuthorityService) -> None:
    for path in ["/docs/c", "/docs/a", "/docs/b", "/other/z"]:
        service.create(path=path, content=b"x")

    docs = service.find_all(path_prefix="Docs/")
    page = service.find_all(path_prefix="/docs", skip=1, limit=1)
    blank_prefix = service.find_all(path_prefix="   ")

    assert [record.path for record in docs] == ["/docs/a", "/docs/b", "/docs/c"]
    assert [record.path for record in page] == ["/docs/b"]
    assert len(blank_prefix) == 4


@pytest.mark.parametrize(
    "kwargs", [{"skip": -1}, {"limit": -5}, {"include_temp": "sometimes"}]
)
def test_find_all_rejects_invalid_paging(
    service: DefaultFileAuthorityService, kwargs: dict[str, object]
) -> None:
    with pytest.raises(InvalidArgumentError):
        service.find_all(**kwargs)


@pytest.mark.parametrize("path", ["", "   ", None])
def test_blank_paths_fail_before_any_io(
    service: DefaultFileAuthorityService, engine: Engine, path: str | None
) -> None:
    with pytest.raises(InvalidArgumentError):
        service.create(path=path, content=b"x")
    with pytest.raises(InvalidArgumentError):
        service.find(path=path)
    with pytest.raises(InvalidArgumentError):
        service.delete(path=path)

    assert count_rows(engine) == (0, 0)


def test_create_requires_a_binary_payload(service: DefaultFileAuthorityService) -> None:
    with pytest.raises(InvalidArgumentError):
        service.create(path="/a", content=None)
    with pytest.raises(InvalidArgumentError):
        service.create(path="/a", content="text is not bytes")


def test_create_rejects_oversized_content(service: DefaultFileAuthorityService) -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        service.create(path="/big", content=b"x" * 1025)

    assert exc_info.value.details[0].metadata == {"size_bytes": "1025"}


def test_overlong_paths_are_invalid_arguments(
    service: DefaultFileAuthorityService, engine: Engine
) -> None:
    long_path = "/" + "a" * 1024
    service.create(path="/src", content=b"x")

    with pytest.raises(InvalidArgumentError):
        service.create(path=long_path, content=b"x")
    with pytest.raises(InvalidArgumentError):
        service.move(source_path="/src", destination_path=long_path)
    with pytest.raises(InvalidArgumentError):
        service.create_temp_file(filename="f" * 1024, content=b"x")

    assert count_rows(engine) == (1, 1)


def test_health_reports_ready(service: DefaultFileAuthorityService) -> None:
    status = service.health()

    assert status.service_ready is True
    assert status.substrate_ready is True
    assert status.detail == "ok"
