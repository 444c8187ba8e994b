"""Lifecycle hook runner.

Hooks are declared per release and run through ``/bin/sh -c`` so a value can
be a script path or a short command line. The child sees the caller's
environment, then the configured ``env``, then ``SHELF_ROOT`` and
``SHELF_HOOK``.
"""

from __future__ import annotations

import os
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from pathlib import Path

from shelf.core.errors import HookFailure
from shelf.core.options import HookName
from shelf.core.result import Err, Ok, Result
from shelf.output.console import ConsoleProtocol
from shelf.platform.process import ProcessExecutor

from .model import Descriptor

__all__ = ["HookRunner", "SHELL", "build_env"]

SHELL = "/bin/sh"


def build_env(root: Path, env: Mapping[str, str], **extra: str) -> dict[str, str]:
    """Environment for child processes run on behalf of the store."""
    merged = dict(os.environ)
    merged.update(env)
    merged["SHELF_ROOT"] = str(root)
    merged.update(extra)
    return merged


@dataclass(frozen=True, slots=True)
class HookRunner:
    """Runs hooks for one operation.

    Attributes:
        executor: Runs the hook process
        console: Progress and warnings
        root: Store root, exported as SHELF_ROOT
        env: Extra environment from config and options
        disabled_hooks: Hooks to skip with a warning
        stream: Let hook output reach the terminal
    """

    executor: ProcessExecutor
    console: ConsoleProtocol
    root: Path
    env: Mapping[str, str]
    disabled_hooks: Collection[str] = ()
    stream: bool = False

    def run(self, hook: HookName, descriptor: Descriptor, *, cwd: Path) -> Result[None, HookFailure]:
        """Run ``hook`` if the descriptor declares it and it is enabled.

        A missing hook is a no-op. A disabled hook is skipped with a warning.
        """
        script = descriptor.hook(hook)
        if script is None:
            return Ok(None)

        if hook in self.disabled_hooks:
            self.console.warning(f'Skipping disabled "{hook}" hook "{script}"')
            return Ok(None)

        self.console.info(f'Exec "{hook}" hook "{script}"')
        result = self.executor.run(
            [SHELL, "-c", script],
            cwd=cwd,
            env=build_env(self.root, self.env, SHELF_HOOK=hook),
            stream=self.stream,
        )
        if isinstance(result, Err):
            error = result.error
            return Err(
                HookFailure(
                    hook=hook,
                    script=script,
                    returncode=error.returncode,
                    output=(error.stderr or error.stdout).strip(),
                )
            )
        return Ok(None)
