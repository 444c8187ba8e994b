"""Tests for shelf.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

from shelf.core.result import Err, Ok
from shelf.platform.process import ProcessError, RecordingExecutor, SubprocessExecutor


class TestProcessError:
    def test_str_truncates_long_commands(self) -> None:
        error = ProcessError(
            command=("npm", "install", "--production", "--verbose"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "npm install --production ... failed (exit 1)"


class TestSubprocessExecutor:
    def test_captures_stdout(self, tmp_path: Path) -> None:
        result = SubprocessExecutor().run(
            [sys.executable, "-c", "print('hello')"], cwd=tmp_path
        )
        assert result == Ok("hello\n")

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        result = SubprocessExecutor().run(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert isinstance(result, Ok)
        assert Path(result.value.strip()).resolve() == tmp_path.resolve()

    def test_nonzero_exit_is_err(self, tmp_path: Path) -> None:
        result = SubprocessExecutor().run(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"],
            cwd=tmp_path,
        )
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"

    def test_missing_binary_is_err(self, tmp_path: Path) -> None:
        result = SubprocessExecutor().run(["definitely-not-a-command-xyz"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1


class TestRecordingExecutor:
    def test_unmatched_commands_succeed(self, tmp_path: Path) -> None:
        executor = RecordingExecutor()
        assert executor.run(["npm", "install"], cwd=tmp_path) == Ok("")
        assert executor.commands == [("npm", "install")]

    def test_prefix_match(self, tmp_path: Path) -> None:
        executor = RecordingExecutor()
        executor.respond(("npm", "--version"), "10.2.0\n")
        assert executor.run(["npm", "--version"], cwd=tmp_path) == Ok("10.2.0\n")

    def test_latest_registration_wins(self, tmp_path: Path) -> None:
        executor = RecordingExecutor()
        executor.respond(("npm",), "first")
        executor.fail(("npm",), returncode=4, stderr="nope")
        result = executor.run(["npm", "ci"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 4

    def test_records_env_and_stream(self, tmp_path: Path) -> None:
        executor = RecordingExecutor()
        executor.run(["sh"], cwd=tmp_path, env={"A": "1"}, stream=True)
        (call,) = executor.calls_to("sh")
        assert call.env == {"A": "1"}
        assert call.stream is True
        assert call.cwd == tmp_path
