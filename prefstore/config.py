"""Configuration model for the preference store."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_FILE_NAME = "Settings.json"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be turned into a StoreConfig."""


def _expand(path: Optional[str | Path]) -> Optional[Path]:
    if path is None:
        return None
    return Path(path).expanduser().resolve()


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Where preference files live.

    ``storage_dir`` holds every logical preference file. The default file is
    ``storage_dir / default_file_name`` unless ``default_path`` points
    somewhere else explicitly.
    """

    storage_dir: Path
    default_file_name: str = DEFAULT_FILE_NAME
    default_path: Optional[Path] = None

    @property
    def default_preference_file_path(self) -> Path:
        if self.default_path is not None:
            return self.default_path
        return self.storage_dir / self.default_file_name

    @classmethod
    def for_directory(cls, storage_dir: str | Path) -> "StoreConfig":
        return cls(storage_dir=Path(storage_dir))

    @classmethod
    def from_yaml(cls, file: Path) -> "StoreConfig":
        try:
            data = yaml.safe_load(Path(file).read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read configuration {file}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {file} must contain a mapping")
        storage_dir = data.get("storage_dir")
        if not storage_dir:
            raise ConfigError(f"Configuration {file} has no storage_dir")
        default_file_name = str(data.get("default_file_name") or DEFAULT_FILE_NAME)
        return cls(
            storage_dir=_expand(str(storage_dir)),
            default_file_name=default_file_name,
            default_path=_expand(data.get("default_path")),
        )


__all__ = ["ConfigError", "DEFAULT_FILE_NAME", "StoreConfig"]
