"""File Authority-owned Postgres runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from packages.filestore_shared.config import FileStoreSettings
from resources.substrates.postgres import (
    PostgresSettings,
    ServiceSchemaSessionProvider,
    create_postgres_engine,
    create_session_factory,
    ping,
)
from resources.substrates.postgres.config import resolve_postgres_settings


@dataclass(frozen=True)
class FilePostgresRuntime:
    """Concrete handle for schema-scoped File Authority database access."""

    engine: Engine
    session_factory: sessionmaker[Session]
    schema_sessions: ServiceSchemaSessionProvider
    health_timeout_seconds: float = 1.0

    @classmethod
    def from_settings(cls, settings: FileStoreSettings) -> "FilePostgresRuntime":
        """Build DB runtime from typed application settings."""
        return cls.from_postgres_settings(resolve_postgres_settings(settings))

    @classmethod
    def from_postgres_settings(
        cls, postgres_settings: PostgresSettings
    ) -> "FilePostgresRuntime":
        """Build DB runtime from resolved Postgres substrate settings."""
        engine = create_postgres_engine(postgres_settings)
        session_factory = create_session_factory(engine)
        return cls(
            engine=engine,
            session_factory=session_factory,
            schema_sessions=ServiceSchemaSessionProvider(
                session_factory=session_factory,
                schema=postgres_settings.schema_name,
            ),
            health_timeout_seconds=postgres_settings.health_timeout_seconds,
        )

    def is_healthy(self) -> bool:
        """Return ``True`` when backing Postgres connection is reachable."""
        return ping(self.engine, timeout_seconds=self.health_timeout_seconds)
