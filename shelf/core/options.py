"""Typed options for each store operation.

Defaults are applied at construction. ``validate`` checks the values that a
dataclass cannot (enumerations). Orchestrators call it before touching the
store.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, get_args

from .errors import InvalidOption
from .result import Err, Ok, Result

__all__ = [
    "HookName",
    "SyncMode",
    "NameFormat",
    "HOOK_NAMES",
    "SYNC_MODES",
    "NAME_FORMATS",
    "InstallOptions",
    "UseOptions",
    "UninstallOptions",
    "CleanOptions",
]

HookName = Literal[
    "preinstall",
    "postinstall",
    "preuse",
    "postuse",
    "preuninstall",
    "postuninstall",
]
SyncMode = Literal["install", "ci", "preferCi"]
NameFormat = Literal["timestamp"]

HOOK_NAMES: tuple[str, ...] = get_args(HookName)
SYNC_MODES: tuple[str, ...] = get_args(SyncMode)
NAME_FORMATS: tuple[str, ...] = get_args(NameFormat)


def _empty_env() -> dict[str, str]:
    return {}


def _check_hooks(disabled_hooks: tuple[str, ...]) -> Result[None, InvalidOption]:
    for hook in disabled_hooks:
        if hook not in HOOK_NAMES:
            return Err(
                InvalidOption(
                    f'Unknown hook "{hook}"',
                    hint=f"Expected one of: {', '.join(HOOK_NAMES)}",
                )
            )
    return Ok(None)


@dataclass(frozen=True, slots=True)
class InstallOptions:
    name_format: str = "timestamp"
    sync_mode: str = "install"
    force: bool = False
    use: bool = False
    disabled_hooks: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=_empty_env)
    auth: str | None = None
    log: bool = False

    def validate(self) -> Result[None, InvalidOption]:
        if self.sync_mode not in SYNC_MODES:
            expected = '", "'.join(SYNC_MODES)
            return Err(
                InvalidOption(f'Expect sync mode "{self.sync_mode}" to be one of "{expected}"')
            )
        if self.name_format not in NAME_FORMATS:
            return Err(InvalidOption(f'Unknown name format "{self.name_format}"'))
        return _check_hooks(self.disabled_hooks)


@dataclass(frozen=True, slots=True)
class UseOptions:
    disabled_hooks: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=_empty_env)
    log: bool = False

    def validate(self) -> Result[None, InvalidOption]:
        return _check_hooks(self.disabled_hooks)


@dataclass(frozen=True, slots=True)
class UninstallOptions:
    disabled_hooks: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=_empty_env)
    log: bool = False

    def validate(self) -> Result[None, InvalidOption]:
        return _check_hooks(self.disabled_hooks)


@dataclass(frozen=True, slots=True)
class CleanOptions:
    disabled_hooks: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=_empty_env)
    log: bool = False

    def validate(self) -> Result[None, InvalidOption]:
        return _check_hooks(self.disabled_hooks)
