"""Shared fixtures for File Authority Service tests over in-memory SQLite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from resources.substrates.blob.table_substrate import metadata as blob_metadata
from resources.substrates.postgres import (
    ServiceSchemaSessionProvider,
    create_session_factory,
)
from services.state.file_authority.config import FileAuthoritySettings
from services.state.file_authority.data import SqlFileRepository, metadata
from services.state.file_authority.implementation import DefaultFileAuthorityService
from services.state.file_authority.tests.helpers import FakeClock, FaultyBlobStore


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Yield one in-memory SQLite engine with all owned tables created."""
    db = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(db)
    blob_metadata.create_all(db)
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture
def sessions(session_factory: sessionmaker[Session]) -> ServiceSchemaSessionProvider:
    return ServiceSchemaSessionProvider(session_factory=session_factory, schema=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def blob_store() -> FaultyBlobStore:
    return FaultyBlobStore()


@pytest.fixture
def repository() -> SqlFileRepository:
    return SqlFileRepository()


@pytest.fixture
def service(
    sessions: ServiceSchemaSessionProvider,
    repository: SqlFileRepository,
    blob_store: FaultyBlobStore,
    clock: FakeClock,
) -> DefaultFileAuthorityService:
    """Build the service over SQLite metadata and table-backed blobs."""
    sections = iter(f"section{index:04d}" for index in range(10_000))
    return DefaultFileAuthorityService(
        settings=FileAuthoritySettings(
            max_content_size_bytes=1024, temp_expiration_seconds=3600
        ),
        sessions=sessions,
        repository=repository,
        blob_store=blob_store,
        clock=clock,
        section_factory=lambda: next(sections),
    )
