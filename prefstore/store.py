"""JSON file persistence for preference documents."""
from __future__ import annotations

import enum
import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .config import StoreConfig

logger = logging.getLogger(__name__)

Document = Dict[str, str]


class InvalidArgumentError(TypeError):
    """Raised when a key, file name or bulk argument has the wrong shape."""


def check_text(value: Any, name: str, *, optional: bool = False) -> None:
    if optional and value is None:
        return
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{name} must be a str, got {type(value).__name__}")


def check_file_name(name: Any) -> None:
    check_text(name, "file name", optional=True)
    if name and "\0" in name:
        raise InvalidArgumentError("file name must not contain NUL characters")


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# process umask, read once at import
_UMASK = _current_umask()


def stringify(value: Any) -> str:
    """Return the stored text form of ``value``.

    Strings are kept as-is, JSON values take their JSON spelling
    (``True`` becomes ``"true"``), anything else falls back to ``str()``.
    """

    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


class LoadStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    READ_ERROR = "read_error"


@dataclass(slots=True)
class LoadResult:
    """Outcome of reading one preference file."""

    status: LoadStatus
    document: Document = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def found(self) -> bool:
        return self.status is LoadStatus.FOUND


class PreferenceFileStore:
    """Loads and saves preference documents below ``config.storage_dir``."""

    def __init__(self, config: StoreConfig) -> None:
        self._config = config

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def default_path(self) -> Path:
        return self._config.default_preference_file_path

    def resolve_path(self, name: Optional[str] = None) -> Path:
        """Map a logical file name into the storage directory.

        Anchors are dropped so an absolute name still lands below
        ``storage_dir``; no name (or only an anchor) selects the default file.
        """

        check_file_name(name)
        if not name:
            return self.default_path
        relative = Path(name)
        if relative.anchor:
            relative = relative.relative_to(relative.anchor)
        if not relative.parts:
            return self.default_path
        return self._config.storage_dir / relative

    def load_result(self, name: Optional[str] = None) -> LoadResult:
        """Read the document behind ``name``, creating an empty file if it is missing."""

        path = self.resolve_path(name)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._provision(path)
            return LoadResult(LoadStatus.NOT_FOUND)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read preferences %s: %s", path, exc)
            return LoadResult(LoadStatus.READ_ERROR, error=exc)

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Preferences %s are not valid JSON: %s", path, exc)
            return LoadResult(LoadStatus.READ_ERROR, error=exc)
        if not isinstance(data, dict):
            exc = ValueError(f"expected a JSON object, got {type(data).__name__}")
            logger.warning("Preferences %s are not a JSON object", path)
            return LoadResult(LoadStatus.READ_ERROR, error=exc)
        return LoadResult(LoadStatus.FOUND, {str(key): stringify(value) for key, value in data.items()})

    def load(self, name: Optional[str] = None) -> Document:
        """Return the document behind ``name``, or an empty dict on any failure."""

        return self.load_result(name).document

    def save(self, document: Mapping[str, Any], name: Optional[str] = None) -> bool:
        """Persist ``document``; returns False instead of raising on write errors.

        The payload goes to a temporary sibling of the real file (symlinks are
        followed) which then replaces it, keeping the existing permission bits.
        """

        target = Path(os.path.realpath(self.resolve_path(name)))
        tmp_name: Optional[str] = None
        try:
            payload = json.dumps(dict(document), indent=2, sort_keys=True, ensure_ascii=False)
            target.parent.mkdir(parents=True, exist_ok=True)
            try:
                mode = stat.S_IMODE(target.stat().st_mode)
            except FileNotFoundError:
                mode = 0o666 & ~_UMASK
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
            tmp_name = None
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.error("An error occurred while writing %s: %s", target, exc)
            return False
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_name)

    def _provision(self, path: Path) -> None:
        try:
            self._create_empty(path)
            return
        except FileExistsError:
            return
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.error("Error while creating preference file %s: %s", path, exc)
            return

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Error while creating preference directory %s: %s", path.parent, exc)
            return
        try:
            self._create_empty(path)
        except FileExistsError:
            return
        except OSError as exc:
            logger.error("Error while creating preference file %s: %s", path, exc)

    @staticmethod
    def _create_empty(path: Path) -> None:
        with path.open("x", encoding="utf-8") as fh:
            fh.write("{}")


__all__ = [
    "Document",
    "InvalidArgumentError",
    "LoadResult",
    "LoadStatus",
    "PreferenceFileStore",
    "check_file_name",
    "check_text",
    "stringify",
]
