"""Process execution behind a single capability interface.

Hooks, npm and ``npm pack`` all run through a ``ProcessExecutor``. The real
implementation wraps ``subprocess.run``; ``RecordingExecutor`` stands in for
it in tests and returns scripted results without spawning anything.

Usage:
    result = executor.run(["npm", "ci"], cwd=release_dir, env=env, stream=True)
    match result:
        case Ok(stdout):
            ...
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from shelf.core.result import Err, Ok, Result

__all__ = [
    "ProcessError",
    "ProcessExecutor",
    "SubprocessExecutor",
    "ExecCall",
    "RecordingExecutor",
]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process could not start.
        stdout: Captured standard output (empty when streamed).
        stderr: Captured standard error, or the OS error text.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


class ProcessExecutor(Protocol):
    """Runs a command to completion.

    ``stream=True`` lets the child write straight to the terminal; otherwise
    output is captured and returned (stdout) or attached to the error.
    """

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> Result[str, ProcessError]: ...


class SubprocessExecutor:
    """``ProcessExecutor`` backed by ``subprocess.run``. Blocks until exit."""

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> Result[str, ProcessError]:
        command = tuple(cmd)
        try:
            proc = subprocess.run(
                list(command),
                cwd=str(cwd),
                env=dict(env) if env is not None else None,
                capture_output=not stream,
                text=True,
                check=False,
            )
        except OSError as e:
            return Err(ProcessError(command=command, returncode=-1, stdout="", stderr=str(e)))

        stdout = proc.stdout or ""
        if proc.returncode != 0:
            return Err(
                ProcessError(
                    command=command,
                    returncode=proc.returncode,
                    stdout=stdout,
                    stderr=proc.stderr or "",
                )
            )
        return Ok(stdout)


@dataclass(frozen=True, slots=True)
class ExecCall:
    """One recorded invocation."""

    command: tuple[str, ...]
    cwd: Path
    env: dict[str, str] | None
    stream: bool


Responder = Callable[[ExecCall], Result[str, ProcessError]]


def _empty_calls() -> list[ExecCall]:
    return []


def _empty_responders() -> list[tuple[tuple[str, ...], Responder]]:
    return []


@dataclass
class RecordingExecutor:
    """Fake executor for tests.

    Commands are matched by prefix against registered responders, most recent
    registration first. Unmatched commands succeed with empty output.

    Usage:
        executor = RecordingExecutor()
        executor.respond(("npm", "--version"), "10.2.0\\n")
        executor.fail(("/bin/sh", "-c", "./pre.sh"), returncode=2)
    """

    calls: list[ExecCall] = field(default_factory=_empty_calls)
    _responders: list[tuple[tuple[str, ...], Responder]] = field(
        default_factory=_empty_responders
    )

    def on(self, prefix: Sequence[str], responder: Responder) -> None:
        """Register a callable producing the result for matching commands."""
        self._responders.insert(0, (tuple(prefix), responder))

    def respond(self, prefix: Sequence[str], stdout: str) -> None:
        self.on(prefix, lambda _call: Ok(stdout))

    def fail(self, prefix: Sequence[str], *, returncode: int = 1, stderr: str = "") -> None:
        def responder(call: ExecCall) -> Result[str, ProcessError]:
            return Err(
                ProcessError(
                    command=call.command, returncode=returncode, stdout="", stderr=stderr
                )
            )

        self.on(prefix, responder)

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> Result[str, ProcessError]:
        call = ExecCall(
            command=tuple(cmd),
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stream=stream,
        )
        self.calls.append(call)
        for prefix, responder in self._responders:
            if call.command[: len(prefix)] == prefix:
                return responder(call)
        return Ok("")

    # Test helper methods

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [c.command for c in self.calls]

    def calls_to(self, *prefix: str) -> list[ExecCall]:
        """Recorded calls whose command starts with ``prefix``."""
        return [c for c in self.calls if c.command[: len(prefix)] == prefix]
