"""Tests for the command line entry point."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from prefstore.app import main, parse_pairs


def run(tmp_path: Path, *argv: str) -> int:
    return main(["--dir", str(tmp_path / "prefs"), *argv])


def test_set_get_has_delete(tmp_path: Path, capsys) -> None:
    assert run(tmp_path, "set", "name", "Noah") == 0
    assert run(tmp_path, "get", "name") == 0
    assert capsys.readouterr().out.strip() == "Noah"

    assert run(tmp_path, "has", "name") == 0
    assert run(tmp_path, "delete", "name") == 0
    assert run(tmp_path, "has", "name") == 1
    assert capsys.readouterr().out.split() == ["true", "false"]


def test_get_default_and_many(tmp_path: Path, capsys) -> None:
    assert run(tmp_path, "--file", "user.json", "set-many", "a=1", "b=x=y") == 0
    assert json.loads(capsys.readouterr().out) == ["1", "x=y"]

    assert run(tmp_path, "--file", "user.json", "get-many", "a", "b", "c") == 0
    assert json.loads(capsys.readouterr().out) == ["1", "x=y", None]

    assert run(tmp_path, "get", "a", "--default", "fallback") == 0
    assert capsys.readouterr().out.strip() == "fallback"


def test_async_mode_and_dump(tmp_path: Path, capsys) -> None:
    assert run(tmp_path, "--async", "set", "theme", "dark") == 0
    assert run(tmp_path, "--async", "dump") == 0
    assert json.loads(capsys.readouterr().out) == {"theme": "dark"}


def test_path_honours_overrides(tmp_path: Path, capsys) -> None:
    custom = tmp_path / "custom.json"
    assert run(tmp_path, "--default-path", str(custom), "path") == 0
    assert capsys.readouterr().out.strip() == str(custom)

    assert run(tmp_path, "path") == 0
    assert capsys.readouterr().out.strip() == str(tmp_path / "prefs" / "Settings.json")


def test_failed_write_exit_code(tmp_path: Path) -> None:
    (tmp_path / "prefs" / "blocked.json").mkdir(parents=True)
    assert run(tmp_path, "--file", "blocked.json", "set", "a", "1") == 1


def test_config_file(tmp_path: Path, capsys) -> None:
    config = tmp_path / "prefstore.yaml"
    config.write_text(f"storage_dir: {tmp_path / 'from-yaml'}\n", encoding="utf-8")
    assert main(["--config", str(config), "path"]) == 0
    assert capsys.readouterr().out.strip() == str((tmp_path / "from-yaml").resolve() / "Settings.json")


def test_bad_config_exit_code(tmp_path: Path) -> None:
    config = tmp_path / "prefstore.yaml"
    config.write_text("[]\n", encoding="utf-8")
    assert main(["--config", str(config), "path"]) == 2


def test_malformed_pair_is_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run(tmp_path, "set-many", "novalue")
    assert excinfo.value.code == 2


def test_parse_pairs() -> None:
    assert parse_pairs(["a=1", "b="]) == {"a": "1", "b": ""}
    with pytest.raises(ValueError):
        parse_pairs(["=1"])
