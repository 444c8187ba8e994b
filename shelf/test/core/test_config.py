"""Tests for shelf.core.config module."""

from __future__ import annotations

import json
from pathlib import Path

from shelf.core.config import Config, load_config
from shelf.core.result import Err, Ok
from shelf.output.console import MockConsole


def test_missing_file_is_empty_config(tmp_path: Path) -> None:
    result = load_config(tmp_path / "absent.json")
    assert result == Ok(Config())
    assert isinstance(result, Ok)
    assert dict(result.value.env) == {}


def test_env_is_loaded_and_unknown_keys_ignored(tmp_path: Path) -> None:
    path = tmp_path / "shelf.json"
    path.write_text(
        json.dumps({"env": {"NODE_ENV": "production"}, "retries": 3}), encoding="utf-8"
    )

    result = load_config(path)

    assert isinstance(result, Ok)
    assert dict(result.value.env) == {"NODE_ENV": "production"}


def test_invalid_json_is_wrapped_with_path(tmp_path: Path) -> None:
    path = tmp_path / "shelf.json"
    path.write_text("{not json", encoding="utf-8")

    result = load_config(path)

    assert isinstance(result, Err)
    assert result.error.path == path
    assert result.error.message.startswith(f"Error while loading config {path}: ")


def test_env_must_be_string_mapping(tmp_path: Path) -> None:
    path = tmp_path / "shelf.json"
    path.write_text(json.dumps({"env": {"PORT": 8080}}), encoding="utf-8")

    result = load_config(path)

    assert isinstance(result, Err)
    assert "env" in result.error.reason


def test_root_must_be_object(tmp_path: Path) -> None:
    path = tmp_path / "shelf.json"
    path.write_text("[]", encoding="utf-8")

    assert isinstance(load_config(path), Err)


def test_loaded_config_is_logged(tmp_path: Path) -> None:
    path = tmp_path / "shelf.json"
    path.write_text(json.dumps({"env": {"A": "1"}}), encoding="utf-8")
    console = MockConsole()

    load_config(path, console)

    assert console.find("Loaded config from")
    assert '"A": "1"' in console.text
