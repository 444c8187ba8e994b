"""Release store: enumerates releases and resolves the current one.

Layout under the store root:

    package              -> packages/<name>   (absent = no current release)
    packages/<name>/...  one directory per installed release

The store only reads. The pointer is written by the Switcher through an
activation strategy, release directories by the Installer and Uninstaller.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from shelf.core.errors import DescriptorInvalid, NotFound, StoreCorrupted
from shelf.core.result import Err, Ok, Result
from shelf.platform.files import link_exists

from .descriptor import read_descriptor
from .model import PACKAGES_DIR, POINTER_NAME, Release

__all__ = ["Store", "StoreReadError"]

StoreReadError = NotFound | DescriptorInvalid | StoreCorrupted

_INDEX_RE = re.compile(r"^\d+$")


@dataclass(frozen=True, slots=True)
class Store:
    """Read access to one store root. Holds no state besides the root."""

    root: Path

    @property
    def packages_dir(self) -> Path:
        return self.root / PACKAGES_DIR

    @property
    def pointer(self) -> Path:
        return self.root / POINTER_NAME

    def release_path(self, name: str) -> Path:
        return self.packages_dir / name

    def _is_valid_name(self, name: str) -> bool:
        return bool(name) and name not in {".", ".."} and "/" not in name and os.sep not in name

    def _current_name(self) -> Result[str | None, StoreCorrupted]:
        pointer = self.pointer
        if not link_exists(pointer):
            return Ok(None)

        try:
            link = Path(os.readlink(pointer))
        except OSError as e:
            return Err(StoreCorrupted(pointer=pointer, reason=str(e)))

        target = link if link.is_absolute() else self.root / link
        if target.parent.resolve() != self.packages_dir.resolve():
            return Err(
                StoreCorrupted(pointer=pointer, reason=f"points outside {PACKAGES_DIR}/: {link}")
            )
        if not target.is_dir():
            return Err(StoreCorrupted(pointer=pointer, reason=f"dangling pointer to {link}"))
        return Ok(target.name)

    def _load(self, name: str, current: str | None) -> Result[Release, StoreReadError]:
        path = self.release_path(name)
        if not self._is_valid_name(name) or not path.is_dir():
            return Err(NotFound(target=name))

        descriptor = read_descriptor(path)
        if isinstance(descriptor, Err):
            return descriptor

        return Ok(
            Release(
                name=name,
                path=path,
                descriptor=descriptor.value,
                is_current=name == current,
            )
        )

    def list(self) -> Result[list[Release], StoreReadError]:
        """All releases, most recent first.

        Names are timestamps, so descending name order is reverse creation
        order. An uninitialized store yields an empty list.
        """
        if not self.packages_dir.is_dir():
            return Ok([])

        current = self._current_name()
        if isinstance(current, Err):
            return current

        names = sorted(
            (entry.name for entry in self.packages_dir.iterdir() if entry.is_dir()),
            reverse=True,
        )

        releases: list[Release] = []
        for name in names:
            release = self._load(name, current.value)
            if isinstance(release, Err):
                return release
            releases.append(release.value)
        return Ok(releases)

    def get(self, name: str) -> Result[Release, StoreReadError]:
        current = self._current_name()
        if isinstance(current, Err):
            return current
        return self._load(name, current.value)

    def get_current(self) -> Result[Release | None, StoreReadError]:
        """The release the pointer names, or None without a pointer."""
        current = self._current_name()
        if isinstance(current, Err):
            return current
        if current.value is None:
            return Ok(None)
        return self._load(current.value, current.value)

    def resolve_target(self, target: str) -> Result[str, StoreReadError]:
        """Resolve an exact release name or a zero-based index into ``list()``."""
        releases = self.list()
        if isinstance(releases, Err):
            return releases

        for release in releases.value:
            if release.name == target:
                return Ok(release.name)

        if _INDEX_RE.match(target):
            index = int(target)
            if index >= len(releases.value):
                return Err(NotFound(target=target, index=index))
            return Ok(releases.value[index].name)

        return Err(NotFound(target=target))
