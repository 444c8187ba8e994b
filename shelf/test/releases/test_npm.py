"""Tests for shelf.releases.npm module."""

from __future__ import annotations

import base64
from pathlib import Path

from packaging.version import Version

from shelf.core.result import Err, Ok
from shelf.platform.process import ExecCall, RecordingExecutor
from shelf.releases.npm import NpmClient


def _npm(executor: RecordingExecutor, root: Path) -> NpmClient:
    return NpmClient(executor=executor, root=root, env={"NODE_ENV": "production"})


class TestSync:
    def test_install_flags(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        assert _npm(executor, tmp_path).install(tmp_path / "rel") == Ok(None)

        (call,) = executor.calls
        assert call.command == ("npm", "install", "--production")
        assert call.cwd == tmp_path / "rel"
        assert call.env is not None
        assert call.env["NODE_ENV"] == "production"

    def test_ci_failure_is_io_failure(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        executor.fail(("npm", "ci"), returncode=1, stderr="lock mismatch")

        result = _npm(executor, tmp_path).ci(tmp_path)

        assert isinstance(result, Err)
        assert result.error.action == "npm ci"
        assert "lock mismatch" in result.error.reason


class TestVersion:
    def test_parsed(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        executor.respond(("npm", "--version"), "10.2.4\n")
        assert _npm(executor, tmp_path).version() == Ok(Version("10.2.4"))

    def test_ci_available(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        executor.respond(("npm", "--version"), "5.7.0\n")
        assert _npm(executor, tmp_path).ci_available()

    def test_old_npm_has_no_ci(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        executor.respond(("npm", "--version"), "5.6.0\n")
        assert not _npm(executor, tmp_path).ci_available()

    def test_missing_npm_has_no_ci(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        executor.fail(("npm",), returncode=-1, stderr="No such file")
        assert not _npm(executor, tmp_path).ci_available()


class TestPack:
    def test_returns_reported_tarball(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        def pack(call: ExecCall):
            (call.cwd / "my-app-1.2.0.tgz").write_bytes(b"tgz")
            return Ok("npm notice\nmy-app-1.2.0.tgz\n")

        executor.on(("npm", "pack"), pack)

        result = _npm(executor, tmp_path).pack("my-app@1.2.0", tmp_path)

        assert result == Ok(tmp_path / "my-app-1.2.0.tgz")
        assert executor.calls[0].command == ("npm", "pack", "my-app@1.2.0")

    def test_missing_tarball(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        executor.respond(("npm", "pack"), "ghost.tgz\n")
        assert isinstance(_npm(executor, tmp_path).pack("ghost", tmp_path), Err)

    def test_token_auth(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        _npm(executor, tmp_path).pack("x", tmp_path, auth="t0ken")
        env = executor.calls[0].env
        assert env is not None
        assert env["npm_config__authToken"] == "t0ken"

    def test_basic_auth(self, tmp_path: Path, executor: RecordingExecutor) -> None:
        _npm(executor, tmp_path).pack("x", tmp_path, auth="user:pass")
        env = executor.calls[0].env
        assert env is not None
        assert base64.b64decode(env["npm_config__auth"]) == b"user:pass"
