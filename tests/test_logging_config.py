"""Tests for the root logger setup."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import pytest

from prefstore.app import main
from prefstore.logging_config import setup_logging


@contextmanager
def bare_root() -> Iterator[logging.Logger]:
    """Run with a root logger that has no handlers, restoring it afterwards."""

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    root.handlers = []
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = handlers
        root.setLevel(level)


def test_unknown_level_falls_back_to_warning(capsys) -> None:
    with bare_root() as root:
        setup_logging("foo")
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
    assert "Unknown log level 'FOO'" in capsys.readouterr().err


def test_level_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("PREFSTORE_LOG_LEVEL", "debug")
    with bare_root() as root:
        setup_logging()
        assert root.level == logging.DEBUG


def test_invalid_environment_level_does_not_raise(monkeypatch) -> None:
    monkeypatch.setenv("PREFSTORE_LOG_LEVEL", "loud")
    with bare_root() as root:
        setup_logging()
        assert root.level == logging.WARNING


def test_cli_rejects_unknown_level(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--dir", str(tmp_path), "--log-level", "foo", "path"])
    assert excinfo.value.code == 2


def test_cli_accepts_lowercase_level(tmp_path, capsys) -> None:
    assert main(["--dir", str(tmp_path), "--log-level", "info", "path"]) == 0
    assert capsys.readouterr().out.strip() == str(tmp_path / "Settings.json")
