"""Uninstaller: removes an inactive release.

| Step | Effect |
|---|---|
| load release | none |
| compatibility gate | none |
| refuse the current release | none |
| preuninstall hook (cwd = release) | none |
| remove release directory | durable |
| postuninstall hook (cwd = store root) | durable |
"""

from __future__ import annotations

from dataclasses import dataclass

from shelf.core.errors import CurrentReleaseProtected, ShelfError
from shelf.core.result import Err, Ok, Result
from shelf.output.console import ConsoleProtocol
from shelf.platform.files import remove_path

from .compat import check_compatibility
from .hooks import HookRunner
from .model import Release
from .pipeline import CONTINUE, Effect, Step, StepOutcome, run_steps
from .store import Store

__all__ = ["Uninstaller"]


@dataclass(slots=True)
class _UninstallRun:
    name: str
    release: Release | None = None

    @property
    def loaded(self) -> Release:
        if self.release is None:
            raise AssertionError("release is not loaded yet")
        return self.release


@dataclass(frozen=True, slots=True)
class Uninstaller:
    store: Store
    hooks: HookRunner
    console: ConsoleProtocol
    tool_version: str

    def uninstall(self, name: str) -> Result[None, ShelfError]:
        self.console.info(f'Uninstall package "{name}"')

        run = _UninstallRun(name=name)
        steps: tuple[Step[_UninstallRun], ...] = (
            Step("load", self._load),
            Step("compatibility", self._check_compatibility),
            Step("current", self._refuse_current),
            Step("preuninstall", self._preuninstall),
            Step("remove", self._remove, Effect.DURABLE),
            Step("postuninstall", self._postuninstall, Effect.DURABLE),
        )
        result = run_steps(steps, run)
        if isinstance(result, Err):
            return result

        self.console.success("Package successfully uninstalled")
        return Ok(None)

    def _load(self, run: _UninstallRun) -> Result[StepOutcome, ShelfError]:
        release = self.store.get(run.name)
        if isinstance(release, Err):
            return release
        run.release = release.value
        return Ok(CONTINUE)

    def _check_compatibility(self, run: _UninstallRun) -> Result[StepOutcome, ShelfError]:
        return check_compatibility(run.loaded, self.tool_version).map(lambda _: CONTINUE)

    def _refuse_current(self, run: _UninstallRun) -> Result[StepOutcome, ShelfError]:
        if run.loaded.is_current:
            return Err(CurrentReleaseProtected(name=run.name))
        return Ok(CONTINUE)

    def _preuninstall(self, run: _UninstallRun) -> Result[StepOutcome, ShelfError]:
        release = run.loaded
        return self.hooks.run("preuninstall", release.descriptor, cwd=release.path).map(
            lambda _: CONTINUE
        )

    def _remove(self, run: _UninstallRun) -> Result[StepOutcome, ShelfError]:
        self.console.info(f'Remove package folder "{run.loaded.path}"')
        return remove_path(run.loaded.path).map(lambda _: CONTINUE)

    def _postuninstall(self, run: _UninstallRun) -> Result[StepOutcome, ShelfError]:
        # the release directory is gone, run from the store root
        return self.hooks.run("postuninstall", run.loaded.descriptor, cwd=self.store.root).map(
            lambda _: CONTINUE
        )
