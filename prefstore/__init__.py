"""JSON file backed preference store."""

from .config import ConfigError, DEFAULT_FILE_NAME, StoreConfig
from .preferences import AsyncPreferences, Preferences
from .store import InvalidArgumentError, LoadResult, LoadStatus, PreferenceFileStore, stringify

__all__ = [
    "AsyncPreferences",
    "ConfigError",
    "DEFAULT_FILE_NAME",
    "InvalidArgumentError",
    "LoadResult",
    "LoadStatus",
    "PreferenceFileStore",
    "Preferences",
    "StoreConfig",
    "stringify",
]
