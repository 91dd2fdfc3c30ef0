"""Key level preference operations in blocking and asyncio flavours.

Each operation is written once as a generator that yields the store calls it
needs (load, save) and returns its result. ``Preferences`` runs those calls
inline; ``AsyncPreferences`` hands each one to a worker thread and awaits it,
so other tasks keep running while the file is read or written.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from functools import partial
from pathlib import Path
from typing import Any, Callable, Generator, List, Optional, Sequence, TypeVar

from .config import StoreConfig
from .store import Document, InvalidArgumentError, PreferenceFileStore, check_file_name, check_text, stringify

logger = logging.getLogger(__name__)

T = TypeVar("T")
Operation = Generator[Callable[[], Any], Any, T]


class _PreferenceCore:
    def __init__(self, store: PreferenceFileStore | StoreConfig) -> None:
        if isinstance(store, StoreConfig):
            store = PreferenceFileStore(store)
        self._store = store

    @property
    def store(self) -> PreferenceFileStore:
        return self._store

    def get_default_preference_file_path(self) -> Path:
        return self._store.default_path

    def _load(self, file_name: Optional[str]) -> Callable[[], Document]:
        return partial(self._store.load, file_name)

    def _save(self, document: Document, file_name: Optional[str]) -> Callable[[], bool]:
        return partial(self._store.save, document, file_name)

    def _get_preferences(self, file_name: Optional[str]) -> Operation[Document]:
        check_file_name(file_name)
        document = yield self._load(file_name)
        return document

    def _has_key(self, key: str, file_name: Optional[str]) -> Operation[bool]:
        check_text(key, "key")
        check_file_name(file_name)
        document = yield self._load(file_name)
        return key in document

    def _get_state(self, key: str, default_value: Any, file_name: Optional[str]) -> Operation[str]:
        check_text(key, "key")
        check_file_name(file_name)
        document = yield self._load(file_name)
        if key in document:
            return document[key]
        return stringify(default_value)

    def _get_states(self, keys: Sequence[str], file_name: Optional[str]) -> Operation[List[Optional[str]]]:
        if not isinstance(keys, (list, tuple)):
            raise InvalidArgumentError(f"keys must be a list or tuple, got {type(keys).__name__}")
        for key in keys:
            check_text(key, "key")
        check_file_name(file_name)
        document = yield self._load(file_name)
        return [document.get(key) for key in keys]

    def _set_state(self, key: str, value: Any, file_name: Optional[str]) -> Operation[bool]:
        check_text(key, "key")
        check_file_name(file_name)
        document = yield self._load(file_name)
        document[key] = stringify(value)
        saved = yield self._save(document, file_name)
        return saved

    def _set_states(self, keys_values: Mapping[str, Any], file_name: Optional[str]) -> Operation[List[str]]:
        if not isinstance(keys_values, Mapping):
            raise InvalidArgumentError(f"keys_values must be a mapping, got {type(keys_values).__name__}")
        for key in keys_values:
            check_text(key, "key")
        check_file_name(file_name)
        document = yield self._load(file_name)
        inserted: List[str] = []
        for key, value in keys_values.items():
            document[key] = stringify(value)
            inserted.append(document[key])
        saved = yield self._save(document, file_name)
        if not saved:
            logger.warning("Batch of %d preferences was not persisted", len(inserted))
        return inserted

    def _delete_key(self, key: str, file_name: Optional[str]) -> Operation[bool]:
        check_text(key, "key")
        check_file_name(file_name)
        document = yield self._load(file_name)
        if key not in document:
            return True
        del document[key]
        saved = yield self._save(document, file_name)
        return saved


class Preferences(_PreferenceCore):
    """Blocking preference API; every call finishes its file I/O before returning."""

    @staticmethod
    def _run(operation: Operation[T]) -> T:
        try:
            call = next(operation)
            while True:
                call = operation.send(call())
        except StopIteration as stop:
            return stop.value

    def get_preferences(self, file_name: Optional[str] = None) -> Document:
        return self._run(self._get_preferences(file_name))

    def has_key(self, key: str, file_name: Optional[str] = None) -> bool:
        return self._run(self._has_key(key, file_name))

    def get_state(self, key: str, default_value: Any, file_name: Optional[str] = None) -> str:
        return self._run(self._get_state(key, default_value, file_name))

    def get_states(self, keys: Sequence[str], file_name: Optional[str] = None) -> List[Optional[str]]:
        return self._run(self._get_states(keys, file_name))

    def set_state(self, key: str, value: Any, file_name: Optional[str] = None) -> bool:
        return self._run(self._set_state(key, value, file_name))

    def set_states(self, keys_values: Mapping[str, Any], file_name: Optional[str] = None) -> List[str]:
        return self._run(self._set_states(keys_values, file_name))

    def delete_key(self, key: str, file_name: Optional[str] = None) -> bool:
        return self._run(self._delete_key(key, file_name))


class AsyncPreferences(_PreferenceCore):
    """asyncio preference API; file I/O runs in worker threads."""

    @staticmethod
    async def _run(operation: Operation[T]) -> T:
        try:
            call = next(operation)
            while True:
                result = await asyncio.to_thread(call)
                call = operation.send(result)
        except StopIteration as stop:
            return stop.value

    async def get_preferences(self, file_name: Optional[str] = None) -> Document:
        return await self._run(self._get_preferences(file_name))

    async def has_key(self, key: str, file_name: Optional[str] = None) -> bool:
        return await self._run(self._has_key(key, file_name))

    async def get_state(self, key: str, default_value: Any, file_name: Optional[str] = None) -> str:
        return await self._run(self._get_state(key, default_value, file_name))

    async def get_states(self, keys: Sequence[str], file_name: Optional[str] = None) -> List[Optional[str]]:
        return await self._run(self._get_states(keys, file_name))

    async def set_state(self, key: str, value: Any, file_name: Optional[str] = None) -> bool:
        return await self._run(self._set_state(key, value, file_name))

    async def set_states(self, keys_values: Mapping[str, Any], file_name: Optional[str] = None) -> List[str]:
        return await self._run(self._set_states(keys_values, file_name))

    async def delete_key(self, key: str, file_name: Optional[str] = None) -> bool:
        return await self._run(self._delete_key(key, file_name))


__all__ = ["AsyncPreferences", "Preferences"]
