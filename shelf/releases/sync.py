"""Dependency sync strategies.

- install: copy the current release's node_modules forward when the new
  release has none, then ``npm install``
- ci: require ``npm-shrinkwrap.json`` and run ``npm ci``
- preferCi: ci when a lock file exists and npm supports it, else install
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from shelf.core.errors import IoFailure, MissingLockFile
from shelf.core.result import Err, Result
from shelf.output.console import ConsoleProtocol
from shelf.platform.files import copy_tree

from .npm import NpmClient

__all__ = ["SyncResolver", "LOCK_FILE", "DEPENDENCY_DIR"]

LOCK_FILE = "npm-shrinkwrap.json"
DEPENDENCY_DIR = "node_modules"


@dataclass(frozen=True, slots=True)
class SyncResolver:
    """Materializes a release's dependency tree.

    Attributes:
        npm: Dependency manager
        console: Progress output
        current_release_dir: Path of the current release, through the store
            pointer; may not exist
    """

    npm: NpmClient
    console: ConsoleProtocol
    current_release_dir: Path

    def sync(self, mode: str, release_dir: Path) -> Result[None, IoFailure | MissingLockFile]:
        match mode:
            case "install":
                return self.by_install(release_dir)
            case "ci":
                return self.by_ci(release_dir)
            case "preferCi":
                return self.by_prefer_ci(release_dir)
            case _:
                raise AssertionError(f"unexpected sync mode: {mode}")

    def by_install(self, release_dir: Path) -> Result[None, IoFailure]:
        current_modules = self.current_release_dir / DEPENDENCY_DIR
        new_modules = release_dir / DEPENDENCY_DIR

        if current_modules.is_dir() and not new_modules.exists():
            self.console.info("Copy current package node_modules to temp package")
            copied = copy_tree(current_modules, new_modules)
            if isinstance(copied, Err):
                return copied

        return self.npm.install(release_dir)

    def by_ci(self, release_dir: Path) -> Result[None, IoFailure | MissingLockFile]:
        lock_file = release_dir / LOCK_FILE
        if not lock_file.is_file():
            return Err(MissingLockFile(path=lock_file))
        return self.npm.ci(release_dir)

    def by_prefer_ci(self, release_dir: Path) -> Result[None, IoFailure | MissingLockFile]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            has_lock = pool.submit((release_dir / LOCK_FILE).is_file)
            ci_available = pool.submit(self.npm.ci_available)
            lock_found = has_lock.result()
            ci_found = ci_available.result()

        if lock_found and ci_found:
            return self.by_ci(release_dir)
        if not lock_found:
            self.console.info(f"No {LOCK_FILE} found, falling back to npm install")
        else:
            self.console.info("npm ci is not available, falling back to npm install")
        return self.by_install(release_dir)
