"""Real-Postgres integration tests for File Authority with large objects.

Skipped unless ``FILESTORE_RUN_INTEGRATION_REAL=1`` and Postgres is reachable.
"""

from __future__ import annotations

from collections.abc import Iterator
from uuid import uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from packages.filestore_shared.errors import AlreadyExistsError
from resources.substrates.blob import BlobObjectNotFoundError, PostgresLargeObjectSubstrate
from resources.substrates.postgres import (
    ServiceSchemaSessionProvider,
    create_session_factory,
)
from services.state.file_authority.config import FileAuthoritySettings
from services.state.file_authority.data import SqlFileRepository, metadata
from services.state.file_authority.implementation import DefaultFileAuthorityService


@pytest.fixture
def schema_sessions(postgres_engine) -> Iterator[ServiceSchemaSessionProvider]:
    """Provision one throwaway schema holding the ``files`` table."""
    schema = f"file_authority_it_{uuid4().hex[:12]}"
    with postgres_engine.begin() as conn:
        conn.execute(text(f"CREATE SCHEMA {schema}"))
        conn.execute(text(f"SET LOCAL search_path TO {schema}"))
        metadata.create_all(conn)
    try:
        yield ServiceSchemaSessionProvider(
            session_factory=create_session_factory(postgres_engine), schema=schema
        )
    finally:
        with postgres_engine.begin() as conn:
            conn.execute(
                text(
                    "SELECT lo_unlink(object_ref) FROM "
                    f"{schema}.files"
                )
            )
            conn.execute(text(f"DROP SCHEMA {schema} CASCADE"))


@pytest.fixture
def service(schema_sessions: ServiceSchemaSessionProvider) -> DefaultFileAuthorityService:
    return DefaultFileAuthorityService(
        settings=FileAuthoritySettings(),
        sessions=schema_sessions,
        repository=SqlFileRepository(),
        blob_store=PostgresLargeObjectSubstrate(),
    )


def test_large_object_lifecycle_through_service(
    service: DefaultFileAuthorityService,
    schema_sessions: ServiceSchemaSessionProvider,
) -> None:
    created = service.create(path="/Docs/Readme.txt", content=b"hello")
    copied = service.copy(source_path="/docs/readme.txt", destination_path="/docs/b.txt")
    moved = service.move(source_path="/docs/b.txt", destination_path="/archive/b.txt")

    assert service.read_content(path="/docs/readme.txt") == b"hello"
    assert service.read_content(path="/archive/b.txt") == b"hello"
    assert moved.id == copied.id
    assert moved.object_ref == copied.object_ref != created.object_ref

    service.delete(path="/docs/readme.txt")

    with pytest.raises((BlobObjectNotFoundError, DBAPIError)):
        with schema_sessions.session() as session:
            PostgresLargeObjectSubstrate().read_all(session, created.object_ref)


def test_duplicate_create_does_not_leak_large_objects(
    service: DefaultFileAuthorityService,
    schema_sessions: ServiceSchemaSessionProvider,
) -> None:
    service.create(path="/one", content=b"1")

    with pytest.raises(AlreadyExistsError):
        service.create(path="/one", content=b"2")

    with schema_sessions.session() as session:
        count = session.execute(
            text("SELECT count(*) FROM pg_largeobject_metadata")
        ).scalar_one()
        referenced = session.execute(text("SELECT count(*) FROM files")).scalar_one()
    assert count >= referenced == 1
