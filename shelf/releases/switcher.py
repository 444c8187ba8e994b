"""Switcher: makes an installed release current.

| Step | Effect |
|---|---|
| load release | none |
| compatibility gate | none |
| short-circuit if already current | none |
| preuse hook | none |
| activate pointer | durable |
| postuse hook | durable |

Switching is idempotent: an already current release is returned unchanged
and no hook runs.
"""

from __future__ import annotations

from dataclasses import dataclass

from shelf.core.errors import ShelfError
from shelf.core.result import Err, Ok, Result
from shelf.output.console import ConsoleProtocol

from .activation import ActivationStrategy
from .compat import check_compatibility
from .hooks import HookRunner
from .model import Release
from .pipeline import CONTINUE, FINISH, Effect, Step, StepOutcome, run_steps
from .store import Store

__all__ = ["Switcher"]


@dataclass(slots=True)
class _UseRun:
    name: str
    release: Release | None = None

    @property
    def loaded(self) -> Release:
        if self.release is None:
            raise AssertionError("release is not loaded yet")
        return self.release


@dataclass(frozen=True, slots=True)
class Switcher:
    store: Store
    hooks: HookRunner
    console: ConsoleProtocol
    activation: ActivationStrategy
    tool_version: str

    def use(self, name: str) -> Result[Release, ShelfError]:
        """Make ``name`` the current release and return it."""
        self.console.info(f'Set package "{name}" as current')

        run = _UseRun(name=name)
        steps: tuple[Step[_UseRun], ...] = (
            Step("load", self._load),
            Step("compatibility", self._check_compatibility),
            Step("short-circuit", self._short_circuit),
            Step("preuse", self._preuse),
            Step("activate", self._activate, Effect.DURABLE),
            Step("postuse", self._postuse, Effect.DURABLE),
        )
        result = run_steps(steps, run)
        if isinstance(result, Err):
            return result

        release = run.loaded
        if release.is_current:
            return Ok(release)

        self.console.success("Package successfully set as current")
        return Ok(release.with_current(True))

    def _load(self, run: _UseRun) -> Result[StepOutcome, ShelfError]:
        release = self.store.get(run.name)
        if isinstance(release, Err):
            return release
        run.release = release.value
        return Ok(CONTINUE)

    def _check_compatibility(self, run: _UseRun) -> Result[StepOutcome, ShelfError]:
        return check_compatibility(run.loaded, self.tool_version).map(lambda _: CONTINUE)

    def _short_circuit(self, run: _UseRun) -> Result[StepOutcome, ShelfError]:
        if run.loaded.is_current:
            self.console.info("Package is already current, exit")
            return Ok(FINISH)
        return Ok(CONTINUE)

    def _preuse(self, run: _UseRun) -> Result[StepOutcome, ShelfError]:
        release = run.loaded
        return self.hooks.run("preuse", release.descriptor, cwd=release.path).map(
            lambda _: CONTINUE
        )

    def _activate(self, run: _UseRun) -> Result[StepOutcome, ShelfError]:
        self.console.info("Remove and create new symlink")
        return self.activation.activate(self.store.pointer, run.loaded.path).map(
            lambda _: CONTINUE
        )

    def _postuse(self, run: _UseRun) -> Result[StepOutcome, ShelfError]:
        release = run.loaded
        return self.hooks.run("postuse", release.descriptor, cwd=release.path).map(
            lambda _: CONTINUE
        )
