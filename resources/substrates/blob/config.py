"""Pydantic settings and factory for the blob substrate component."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from packages.filestore_shared.config import (
    FileStoreSettings,
    resolve_component_settings,
)
from resources.substrates.blob.large_object_substrate import (
    PostgresLargeObjectSubstrate,
)
from resources.substrates.blob.substrate import BlobObjectSubstrate
from resources.substrates.blob.table_substrate import TableBlobSubstrate

RESOURCE_COMPONENT_ID = "substrate_blob"


class BlobSubstrateSettings(BaseModel):
    """Blob substrate selection settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    backend: Literal["large_object", "table"] = "large_object"


def resolve_blob_substrate_settings(
    settings: FileStoreSettings,
) -> BlobSubstrateSettings:
    """Resolve blob substrate settings from ``components.substrate.blob``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=BlobSubstrateSettings,
    )


def create_blob_substrate(settings: BlobSubstrateSettings) -> BlobObjectSubstrate:
    """Construct the configured blob substrate implementation."""
    if settings.backend == "table":
        return TableBlobSubstrate()
    return PostgresLargeObjectSubstrate()
