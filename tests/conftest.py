"""Pytest configuration."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from prefstore.config import StoreConfig  # noqa: E402
from prefstore.preferences import AsyncPreferences, Preferences  # noqa: E402
from prefstore.store import PreferenceFileStore  # noqa: E402


@pytest.fixture
def store_config(tmp_path: Path) -> StoreConfig:
    """Config rooted in a storage directory that does not exist yet."""

    return StoreConfig.for_directory(tmp_path / "prefs")


@pytest.fixture
def store(store_config: StoreConfig) -> PreferenceFileStore:
    return PreferenceFileStore(store_config)


@pytest.fixture
def prefs(store: PreferenceFileStore) -> Preferences:
    return Preferences(store)


@pytest.fixture
def async_prefs(store: PreferenceFileStore) -> AsyncPreferences:
    return AsyncPreferences(store)
