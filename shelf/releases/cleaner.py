"""Cleaner: uninstalls every release except the current one."""

from __future__ import annotations

from dataclasses import dataclass

from shelf.core.errors import ShelfError
from shelf.core.result import Err, Ok, Result
from shelf.output.console import ConsoleProtocol

from .store import Store
from .uninstaller import Uninstaller

__all__ = ["Cleaner"]


@dataclass(frozen=True, slots=True)
class Cleaner:
    store: Store
    uninstaller: Uninstaller
    console: ConsoleProtocol

    def clean(self) -> Result[list[str], ShelfError]:
        """Uninstall inactive releases one at a time, most recent first.

        The first failure stops the run; releases already removed stay
        removed.

        Returns:
            Ok with the removed names, or the first uninstall error
        """
        self.console.info("Clean inactive packages")

        releases = self.store.list()
        if isinstance(releases, Err):
            return releases

        inactive = [release for release in releases.value if not release.is_current]
        if not inactive:
            self.console.info("Nothing to clean, exit")
            return Ok([])

        removed: list[str] = []
        for release in inactive:
            result = self.uninstaller.uninstall(release.name)
            if isinstance(result, Err):
                return result
            removed.append(release.name)

        self.console.success("Packages successfully cleaned")
        return Ok(removed)
