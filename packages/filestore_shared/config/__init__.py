"""Public API for shared File Store configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    FileStoreSettings,
    LoggingSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "FileStoreSettings",
    "LoggingSettings",
    "load_settings",
    "resolve_component_settings",
]
