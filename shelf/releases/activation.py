"""Pointer activation strategies.

The Switcher points ``<root>/package`` at a release through one of these.
Links are written relative to the store root so the store can be moved.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from shelf.core.errors import IoFailure
from shelf.core.result import Err, Ok, Result
from shelf.platform.files import remove_path

__all__ = ["ActivationStrategy", "RemoveThenLink", "AtomicRename", "ACTIVATION_STRATEGIES"]


def _relative_target(pointer: Path, target: Path) -> str:
    return os.path.relpath(target, pointer.parent)


class ActivationStrategy(Protocol):
    def activate(self, pointer: Path, target: Path) -> Result[None, IoFailure]:
        """Make ``pointer`` reference ``target``, replacing any old pointer."""
        ...


class RemoveThenLink:
    """Remove the pointer, then create the new symlink.

    Two separate filesystem operations: a crash between them leaves the store
    with no current release.
    """

    def activate(self, pointer: Path, target: Path) -> Result[None, IoFailure]:
        removed = remove_path(pointer)
        if isinstance(removed, Err):
            return removed

        try:
            pointer.symlink_to(_relative_target(pointer, target), target_is_directory=True)
        except OSError as e:
            return Err(IoFailure(action="Create symlink", reason=str(e), path=pointer))
        return Ok(None)


class AtomicRename:
    """Create a temporary symlink next to the pointer and rename it over it.

    ``os.replace`` is atomic on POSIX, so readers see either the old or the
    new release.
    """

    def activate(self, pointer: Path, target: Path) -> Result[None, IoFailure]:
        temp_link = pointer.with_name(f".{pointer.name}.tmp")
        removed = remove_path(temp_link)
        if isinstance(removed, Err):
            return removed

        try:
            temp_link.symlink_to(_relative_target(pointer, target), target_is_directory=True)
            os.replace(temp_link, pointer)
        except OSError as e:
            remove_path(temp_link)
            return Err(IoFailure(action="Replace symlink", reason=str(e), path=pointer))
        return Ok(None)


ACTIVATION_STRATEGIES: dict[str, type[RemoveThenLink] | type[AtomicRename]] = {
    "remove-then-link": RemoveThenLink,
    "atomic-rename": AtomicRename,
}
