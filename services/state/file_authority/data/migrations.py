"""Alembic upgrade entrypoint for File Authority-owned tables."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from alembic import command
from alembic.config import Config

MIGRATIONS_CONFIG_PATH = Path(__file__).resolve().parent.parent / "migrations" / "alembic.ini"


class MigrationExecutionError(RuntimeError):
    """Raised when the schema upgrade fails."""


def run_migrations(
    *,
    config_path: Path = MIGRATIONS_CONFIG_PATH,
    revision: str = "head",
    upgrade_fn: Callable[[Config, str], None] = command.upgrade,
) -> Path:
    """Upgrade the File Authority schema and return the config path used."""
    if not config_path.exists():
        raise MigrationExecutionError(f"alembic config not found: {config_path}")
    try:
        upgrade_fn(Config(str(config_path)), revision)
    except Exception as exc:
        raise MigrationExecutionError(
            f"migration failed for config '{config_path}'"
        ) from exc
    return config_path
