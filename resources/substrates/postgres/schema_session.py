"""Service-schema scoped session helpers for Postgres shared infrastructure."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.postgres.session import transactional_session


class ServiceSchemaSessionProvider:
    """Provide transactional sessions, optionally pinned to one service schema.

    With ``schema=None`` no ``search_path`` is issued, which keeps the provider
    usable against engines without schema support (SQLite in tests).
    """

    def __init__(
        self, *, session_factory: sessionmaker[Session], schema: str | None
    ) -> None:
        self._validate_schema(schema)
        self._session_factory = session_factory
        self._schema = schema

    @property
    def schema(self) -> str | None:
        """Return the owned schema name for this provider."""
        return self._schema

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a transaction-scoped session with local search_path set."""
        with transactional_session(self._session_factory) as db:
            if self._schema is not None:
                db.execute(text(f"SET LOCAL search_path TO {self._schema}, public"))
            yield db

    def _validate_schema(self, schema: str | None) -> None:
        """Validate schema names to prevent malformed search_path statements."""
        if schema is None:
            return
        if not schema:
            raise ValueError("postgres schema must not be empty")
        if not schema.replace("_", "").isalnum():
            raise ValueError("postgres schema must be alphanumeric/underscore")
