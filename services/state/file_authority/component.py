"""Component identifiers for File Authority Service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_file_authority"
