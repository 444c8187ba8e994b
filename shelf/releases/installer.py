"""Installer: acquires a tarball and turns it into a stored release.

| # | Step | Effect | On failure |
|---|---|---|---|
| 1 | validate options | none | nothing to undo |
| 2 | clean scratch paths | scratch | scratch removed |
| 3 | acquire tarball | scratch | scratch removed |
| 4 | extract | scratch | scratch removed |
| 5 | read descriptor, list releases | none | scratch removed |
| 6 | compatibility gate | none | scratch removed |
| 7 | duplicate gate (unless forced) | none | scratch removed |
| 8 | sync dependencies | scratch | scratch removed |
| 9 | preinstall hook | scratch | scratch removed |
| 10 | move into packages/ | durable | release kept |
| 11 | switch (if requested) | durable | release kept |
| 12 | postinstall hook | durable | release kept |
| 13 | reload release | none | release kept |

A failure from step 10 on leaves a new, non-current release in the store for
inspection. It has to be uninstalled by hand.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from shelf.core.errors import DuplicateRelease, InvalidOption, IoFailure, ShelfError
from shelf.core.options import InstallOptions
from shelf.core.result import Err, Ok, Result
from shelf.output.console import ConsoleProtocol
from shelf.platform.files import move_path, remove_path

from .acquire import TarballFetcher, extract_tarball
from .compat import check_compatibility
from .descriptor import read_descriptor
from .hooks import HookRunner
from .model import Release
from .pipeline import CONTINUE, Effect, Step, StepOutcome, run_steps
from .store import Store
from .switcher import Switcher
from .sync import SyncResolver

__all__ = ["Installer", "timestamp_name", "NAME_FACTORIES", "SCRATCH_TARBALL", "SCRATCH_DIR"]

SCRATCH_TARBALL = "tmp_package.tar.gz"
SCRATCH_DIR = "tmp_package"
# npm tarballs keep everything under a single "package/" directory
TARBALL_ROOT = "package"


def timestamp_name() -> str:
    """Release name from the UTC clock; lexical order is creation order."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S.%f")


NAME_FACTORIES: dict[str, Callable[[], str]] = {"timestamp": timestamp_name}


def _no_releases() -> list[Release]:
    return []


@dataclass(slots=True)
class _InstallRun:
    src: str
    tarball: Path
    scratch_dir: Path
    name: str = ""
    candidate: Release | None = None
    existing: list[Release] = field(default_factory=_no_releases)
    release: Release | None = None

    @property
    def release_dir(self) -> Path:
        return self.scratch_dir / TARBALL_ROOT

    @property
    def loaded(self) -> Release:
        if self.candidate is None:
            raise AssertionError("descriptor is not loaded yet")
        return self.candidate


@dataclass(frozen=True, slots=True)
class Installer:
    """Installs one release per ``install`` call.

    Attributes:
        store: Store receiving the release
        hooks: Runs preinstall/postinstall
        console: Progress output
        fetcher: Acquires the tarball
        sync: Dependency sync strategies
        switcher: Used when ``options.use`` is set
        options: Install options
        tool_version: Version checked against compatibility ranges
        name_factory: Overrides the name format's generator
    """

    store: Store
    hooks: HookRunner
    console: ConsoleProtocol
    fetcher: TarballFetcher
    sync: SyncResolver
    switcher: Switcher
    options: InstallOptions
    tool_version: str
    name_factory: Callable[[], str] | None = None

    def install(self, src: str) -> Result[Release, ShelfError]:
        run = _InstallRun(
            src=src,
            tarball=self.store.root / SCRATCH_TARBALL,
            scratch_dir=self.store.root / SCRATCH_DIR,
        )
        steps: tuple[Step[_InstallRun], ...] = (
            Step("validate", self._validate),
            Step("clean", self._clean_scratch, Effect.SCRATCH),
            Step("acquire", self._acquire, Effect.SCRATCH),
            Step("extract", self._extract, Effect.SCRATCH),
            Step("describe", self._describe),
            Step("compatibility", self._check_compatibility),
            Step("duplicate", self._check_duplicate),
            Step("sync", self._sync, Effect.SCRATCH),
            Step("preinstall", self._preinstall, Effect.SCRATCH),
            Step("store", self._store, Effect.DURABLE),
            Step("switch", self._switch, Effect.DURABLE),
            Step("postinstall", self._postinstall, Effect.DURABLE),
            Step("reload", self._reload),
        )
        result = run_steps(steps, run, on_abort=self._discard_scratch)
        if isinstance(result, Err):
            return result
        if run.release is None:
            raise AssertionError("install finished without a release")

        self.console.success("Package successfully installed")
        return Ok(run.release)

    # -- steps -------------------------------------------------------------

    def _validate(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        if not run.src:
            return Err(InvalidOption('Option "src" is required'))
        checked = self.options.validate()
        if isinstance(checked, Err):
            return checked

        factory = self.name_factory or NAME_FACTORIES[self.options.name_format]
        run.name = factory()
        if self.store.release_path(run.name).exists():
            return Err(InvalidOption(f'Package "{run.name}" already exists'))

        self.console.info(f'Install new package from "{run.src}"')
        return Ok(CONTINUE)

    def _clean_scratch(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        self.console.info("Clean temporary files and directories")
        try:
            self.store.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(IoFailure(action="Create store", reason=str(e), path=self.store.root))

        for path in (run.tarball, run.scratch_dir):
            removed = remove_path(path)
            if isinstance(removed, Err):
                return removed
        return Ok(CONTINUE)

    def _acquire(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        self.console.info(f'Download tarball "{run.src}"')
        return self.fetcher.fetch(run.src, run.tarball, auth=self.options.auth).map(
            lambda _: CONTINUE
        )

    def _extract(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        self.console.info("Extract tarball")
        extracted = extract_tarball(run.tarball, run.scratch_dir)
        if isinstance(extracted, Err):
            return extracted
        if not run.release_dir.is_dir():
            return Err(
                IoFailure(
                    action="Extract",
                    reason=f'tarball has no top-level "{TARBALL_ROOT}" directory',
                    path=run.tarball,
                )
            )
        return Ok(CONTINUE)

    def _describe(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        self.console.info(f'Read package info from "{run.release_dir}"')
        with ThreadPoolExecutor(max_workers=2) as pool:
            descriptor_future = pool.submit(read_descriptor, run.release_dir)
            listing_future = None if self.options.force else pool.submit(self.store.list)
            descriptor = descriptor_future.result()
            listing = listing_future.result() if listing_future is not None else Ok([])

        if isinstance(descriptor, Err):
            return descriptor
        if isinstance(listing, Err):
            return listing

        run.existing = listing.value
        run.candidate = Release(name=run.name, path=run.release_dir, descriptor=descriptor.value)
        return Ok(CONTINUE)

    def _check_compatibility(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        return check_compatibility(run.loaded, self.tool_version).map(lambda _: CONTINUE)

    def _check_duplicate(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        identity = run.loaded.descriptor.identity
        if self.options.force or identity is None:
            return Ok(CONTINUE)

        for release in run.existing:
            if release.descriptor.identity == identity:
                return Err(
                    DuplicateRelease(
                        package=identity.name,
                        version=identity.version,
                        installed_as=release.name,
                    )
                )
        return Ok(CONTINUE)

    def _sync(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        self.console.info("Sync temp package npm dependencies")
        synced = self.sync.sync(self.options.sync_mode, run.release_dir)
        if isinstance(synced, Err):
            return synced
        return remove_path(run.tarball).map(lambda _: CONTINUE)

    def _preinstall(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        return self.hooks.run("preinstall", run.loaded.descriptor, cwd=run.release_dir).map(
            lambda _: CONTINUE
        )

    def _store(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        final_path = self.store.release_path(run.name)
        self.console.info(f'Move package to "{final_path}"')
        moved = move_path(run.release_dir, final_path)
        if isinstance(moved, Err):
            return moved
        return remove_path(run.scratch_dir).map(lambda _: CONTINUE)

    def _switch(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        if not self.options.use:
            return Ok(CONTINUE)
        self.console.info(f'Switch to new package "{run.name}"')
        return self.switcher.use(run.name).map(lambda _: CONTINUE)

    def _postinstall(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        return self.hooks.run(
            "postinstall",
            run.loaded.descriptor,
            cwd=self.store.release_path(run.name),
        ).map(lambda _: CONTINUE)

    def _reload(self, run: _InstallRun) -> Result[StepOutcome, ShelfError]:
        release = self.store.get(run.name)
        if isinstance(release, Err):
            return release
        run.release = release.value
        return Ok(CONTINUE)

    # -- abort -------------------------------------------------------------

    def _discard_scratch(self, run: _InstallRun) -> None:
        """Best-effort removal of scratch paths after an early failure."""
        for path in (run.tarball, run.scratch_dir):
            removed = remove_path(path)
            if isinstance(removed, Err):
                self.console.warning(f"Could not remove {path}: {removed.error.reason}")
