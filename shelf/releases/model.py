"""Release and descriptor types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from shelf.core.options import HookName

__all__ = ["DependencyIdentity", "Descriptor", "Release", "PACKAGES_DIR", "POINTER_NAME"]

PACKAGES_DIR = "packages"
POINTER_NAME = "package"


@dataclass(frozen=True, slots=True)
class DependencyIdentity:
    """The package's own npm name and version, used for duplicate detection."""

    name: str
    version: str


def _no_hooks() -> dict[HookName, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Descriptor:
    """Metadata read from a release's ``package.json``.

    Attributes:
        hooks: Hook name to script; a missing hook is a no-op
        compatibility: Version range the running tool must satisfy
        identity: npm name and version, if both are declared
    """

    hooks: Mapping[HookName, str] = field(default_factory=_no_hooks)
    compatibility: str | None = None
    identity: DependencyIdentity | None = None

    def hook(self, name: HookName) -> str | None:
        return self.hooks.get(name)


@dataclass(frozen=True, slots=True)
class Release:
    """One installed (or about to be installed) package directory.

    ``is_current`` is derived from the store pointer when the release is read;
    it is never persisted.
    """

    name: str
    path: Path
    descriptor: Descriptor
    is_current: bool = False

    def with_current(self, is_current: bool) -> Release:
        return replace(self, is_current=is_current)
