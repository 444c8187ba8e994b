"""Tests for shelf.releases.hooks module."""

from __future__ import annotations

from pathlib import Path

import pytest

from shelf.core.errors import HookFailure
from shelf.core.result import Err, Ok
from shelf.output.console import MockConsole
from shelf.platform.process import RecordingExecutor
from shelf.releases.hooks import SHELL, HookRunner, build_env
from shelf.releases.model import Descriptor


def _runner(
    executor: RecordingExecutor,
    console: MockConsole,
    root: Path,
    **kwargs: object,
) -> HookRunner:
    return HookRunner(executor=executor, console=console, root=root, env={"A": "cfg"}, **kwargs)  # type: ignore[arg-type]


DESCRIPTOR = Descriptor(hooks={"preuse": "./stop.sh"})


class TestBuildEnv:
    def test_precedence(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("A", "os")
        monkeypatch.setenv("B", "os")
        monkeypatch.setenv("SHELF_ROOT", "/elsewhere")

        env = build_env(tmp_path, {"A": "cfg", "SHELF_ROOT": "/cfg"}, SHELF_HOOK="preuse")

        assert env["A"] == "cfg"
        assert env["B"] == "os"
        assert env["SHELF_ROOT"] == str(tmp_path)
        assert env["SHELF_HOOK"] == "preuse"


class TestHookRunner:
    def test_missing_hook_is_noop(
        self, tmp_path: Path, executor: RecordingExecutor, console: MockConsole
    ) -> None:
        runner = _runner(executor, console, tmp_path)
        assert runner.run("postuse", DESCRIPTOR, cwd=tmp_path) == Ok(None)
        assert executor.calls == []

    def test_runs_through_shell(
        self, tmp_path: Path, executor: RecordingExecutor, console: MockConsole
    ) -> None:
        runner = _runner(executor, console, tmp_path, stream=True)

        assert runner.run("preuse", DESCRIPTOR, cwd=tmp_path / "rel") == Ok(None)

        (call,) = executor.calls
        assert call.command == (SHELL, "-c", "./stop.sh")
        assert call.cwd == tmp_path / "rel"
        assert call.stream is True
        assert call.env is not None
        assert call.env["A"] == "cfg"
        assert call.env["SHELF_HOOK"] == "preuse"
        assert console.find('Exec "preuse" hook "./stop.sh"')

    def test_disabled_hook_warns(
        self, tmp_path: Path, executor: RecordingExecutor, console: MockConsole
    ) -> None:
        runner = _runner(executor, console, tmp_path, disabled_hooks=("preuse",))

        assert runner.run("preuse", DESCRIPTOR, cwd=tmp_path) == Ok(None)

        assert executor.calls == []
        assert console.messages == ['warning: Skipping disabled "preuse" hook "./stop.sh"']

    def test_failure_carries_output(
        self, tmp_path: Path, executor: RecordingExecutor, console: MockConsole
    ) -> None:
        executor.fail((SHELL, "-c", "./stop.sh"), returncode=2, stderr="port busy\n")
        runner = _runner(executor, console, tmp_path)

        result = runner.run("preuse", DESCRIPTOR, cwd=tmp_path)

        assert result == Err(
            HookFailure(hook="preuse", script="./stop.sh", returncode=2, output="port busy")
        )


def test_real_shell_sees_env(tmp_path: Path) -> None:
    from shelf.platform.process import SubprocessExecutor

    runner = HookRunner(
        executor=SubprocessExecutor(),
        console=MockConsole(),
        root=tmp_path,
        env={"GREETING": "hi"},
    )
    descriptor = Descriptor(hooks={"postinstall": 'echo "$GREETING $SHELF_HOOK" > out.txt'})

    assert runner.run("postinstall", descriptor, cwd=tmp_path) == Ok(None)
    assert (tmp_path / "out.txt").read_text().strip() == "hi postinstall"
