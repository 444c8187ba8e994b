"""Tests for the shelf command line."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shelf import __version__
from shelf.cli.app import app
from shelf.cli.context import ENV_ACTIVATION, ENV_CONFIG, ENV_DIR, ENV_QUIET
from shelf.platform.process import RecordingExecutor

runner = CliRunner()

OLD = "2024-01-01T00-00-00.000000"
NEW = "2024-02-01T00-00-00.000000"


@pytest.fixture(autouse=True)
def cli_env(store_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store_root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv(ENV_DIR, str(store_root))
    for name in (ENV_CONFIG, ENV_QUIET, ENV_ACTIVATION, "SHELF_AUTH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("shelf.releases.service.SubprocessExecutor", RecordingExecutor)


@pytest.fixture
def releases(make_release: Callable[..., Path], point_to: Callable[[str], None]) -> None:
    make_release(OLD, {"name": "app", "version": "1.0.0"})
    make_release(NEW, {"name": "app", "version": "1.1.0"})
    point_to(OLD)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestList:
    def test_empty(self) -> None:
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No packages installed" in result.output

    def test_marks_current(self, releases: None) -> None:
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.strip()]
        assert lines[0].startswith(f"0:   {NEW}")
        assert lines[1].startswith(f"1: * {OLD}")
        assert "app@1.0.0" in lines[1]


class TestInfo:
    def test_by_index(self, releases: None) -> None:
        result = runner.invoke(app, ["info", "0"])
        assert result.exit_code == 0
        assert NEW in result.output

    def test_unknown(self, releases: None) -> None:
        result = runner.invoke(app, ["info", "7"])
        assert result.exit_code == 1
        assert "Package with index 7 is not found" in result.output

    def test_current(self, releases: None) -> None:
        result = runner.invoke(app, ["current"])
        assert result.exit_code == 0
        assert OLD in result.output

    def test_no_current(self) -> None:
        result = runner.invoke(app, ["current"])
        assert result.exit_code == 0
        assert "No current package" in result.output


class TestUse:
    def test_switch(self, releases: None, store_root: Path) -> None:
        result = runner.invoke(app, ["use", NEW])

        assert result.exit_code == 0
        assert (store_root / "package").resolve().name == NEW

    def test_atomic(self, releases: None, store_root: Path) -> None:
        result = runner.invoke(app, ["--atomic", "use", "0"])

        assert result.exit_code == 0
        assert (store_root / "package").resolve().name == NEW

    def test_bad_hook_name(self, releases: None) -> None:
        result = runner.invoke(app, ["use", NEW, "--disable-hook", "prestart"])
        assert result.exit_code == 1
        assert 'Unknown hook "prestart"' in result.output


class TestUninstall:
    def test_current_is_protected(self, releases: None, store_root: Path) -> None:
        result = runner.invoke(app, ["uninstall", OLD])

        assert result.exit_code == 1
        assert "Cannot uninstall current package" in result.output
        assert (store_root / "packages" / OLD).is_dir()

    def test_inactive(self, releases: None, store_root: Path) -> None:
        result = runner.invoke(app, ["uninstall", "0"])

        assert result.exit_code == 0
        assert not (store_root / "packages" / NEW).exists()


def test_clean(releases: None, store_root: Path) -> None:
    result = runner.invoke(app, ["--quiet", "clean"])

    assert result.exit_code == 0
    assert f"removed {NEW}" in result.output
    assert sorted(p.name for p in (store_root / "packages").iterdir()) == [OLD]


def test_install(store_root: Path, make_tarball: Callable[..., Path]) -> None:
    tarball = make_tarball({"name": "app", "version": "2.0.0"})

    result = runner.invoke(app, ["--quiet", "install", str(tarball), "--use"])

    assert result.exit_code == 0, result.output
    assert "app@2.0.0" in result.output
    assert (store_root / "package").is_symlink()


def test_install_bad_sync_mode(make_tarball: Callable[..., Path]) -> None:
    result = runner.invoke(
        app, ["install", str(make_tarball({"name": "app"})), "--sync-mode", "yarn"]
    )
    assert result.exit_code == 1
    assert "Expect sync mode" in result.output


class TestConfig:
    def test_invalid_config(self, store_root: Path) -> None:
        (store_root / "shelf.json").write_text("{", encoding="utf-8")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 2
        assert "Error while loading config" in result.output

    def test_env_reaches_hooks(
        self,
        tmp_path: Path,
        make_release: Callable[..., Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        executor = RecordingExecutor()
        monkeypatch.setattr("shelf.releases.service.SubprocessExecutor", lambda: executor)
        make_release(OLD, {"shelf": {"hooks": {"postuse": "./start.sh"}}})
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({"env": {"PORT": "8080"}}), encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config), "use", OLD])

        assert result.exit_code == 0, result.output
        (call,) = executor.calls
        assert call.env is not None
        assert call.env["PORT"] == "8080"


def test_dir_must_be_directory(tmp_path: Path) -> None:
    not_dir = tmp_path / "file"
    not_dir.write_text("x")

    result = runner.invoke(app, ["--dir", str(not_dir), "list"])

    assert result.exit_code == 1
