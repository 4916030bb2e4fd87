"""Tests for File Authority process startup wiring."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from packages.filestore_shared.config import FileStoreSettings
from packages.filestore_shared.logging import clear_context, get_context
from services.state.file_authority.startup import start_file_authority


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_context()


def test_startup_configures_logging_then_builds_service() -> None:
    settings = FileStoreSettings.model_validate(
        {"logging": {"level": "DEBUG", "json_output": False, "environment": "test"}}
    )
    built: list[FileStoreSettings] = []
    sentinel = object()

    def _builder(*, settings: FileStoreSettings) -> object:
        built.append(settings)
        return sentinel

    result = start_file_authority(settings=settings, service_builder=_builder)

    assert result.service is sentinel
    assert result.migration_config is None
    assert built == [settings]
    assert logging.getLogger().level == logging.DEBUG
    assert get_context()["environment"] == "test"


def test_startup_runs_migrations_before_building_when_requested() -> None:
    order: list[str] = []

    def _migrate() -> Path:
        order.append("migrate")
        return Path("alembic.ini")

    def _builder(*, settings: FileStoreSettings) -> object:
        order.append("build")
        return object()

    result = start_file_authority(
        settings=FileStoreSettings.model_validate({}),
        run_schema_migrations=True,
        migration_runner=_migrate,
        service_builder=_builder,
    )

    assert order == ["migrate", "build"]
    assert result.migration_config == Path("alembic.ini")
