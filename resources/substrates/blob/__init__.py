"""Blob substrate resource exports."""

from resources.substrates.blob.config import (
    RESOURCE_COMPONENT_ID,
    BlobSubstrateSettings,
    create_blob_substrate,
    resolve_blob_substrate_settings,
)
from resources.substrates.blob.large_object_substrate import (
    PostgresLargeObjectSubstrate,
)
from resources.substrates.blob.substrate import (
    BlobObjectNotFoundError,
    BlobObjectSubstrate,
)
from resources.substrates.blob.table_substrate import TableBlobSubstrate

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "BlobObjectNotFoundError",
    "BlobObjectSubstrate",
    "BlobSubstrateSettings",
    "PostgresLargeObjectSubstrate",
    "TableBlobSubstrate",
    "create_blob_substrate",
    "resolve_blob_substrate_settings",
]
