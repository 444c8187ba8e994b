"""Error kinds and CLI exit codes.

Each failure an operation can report is a small frozen dataclass. They all
expose ``message`` (one line for the operator) and ``hint`` (optional next
step), which is what the CLI prints.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

__all__ = [
    "ErrorCode",
    "InvalidOption",
    "NotFound",
    "IncompatibleVersion",
    "DuplicateRelease",
    "MissingLockFile",
    "HookFailure",
    "CurrentReleaseProtected",
    "DescriptorInvalid",
    "StoreCorrupted",
    "ConfigError",
    "IoFailure",
    "ShelfError",
    "exit_code_for",
]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad option, unknown release, protected release)
    - 2: Environment error (incompatible tool, corrupted store, bad config)
    - 3: Hook error (a lifecycle script failed)
    - 5: I/O error (download, extraction, npm, filesystem)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    HOOK_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK


@dataclass(frozen=True, slots=True)
class InvalidOption:
    reason: str
    hint: str | None = None

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class NotFound:
    target: str
    index: int | None = None
    hint: str | None = "Run: shelf list"

    @property
    def message(self) -> str:
        if self.index is not None:
            return f'Package with index {self.index} is not found'
        return f'Package "{self.target}" is not found'


@dataclass(frozen=True, slots=True)
class IncompatibleVersion:
    tool_version: str
    required: str
    hint: str | None = None

    @property
    def message(self) -> str:
        return (
            f'Current shelf version "{self.tool_version}" '
            f'doesn\'t satisfy version required by package: "{self.required}"'
        )


@dataclass(frozen=True, slots=True)
class DuplicateRelease:
    package: str
    version: str
    installed_as: str
    hint: str | None = "Pass --force to install it anyway"

    @property
    def message(self) -> str:
        return (
            f'Package with npm name "{self.package}" and version "{self.version}" '
            f"already installed"
        )


@dataclass(frozen=True, slots=True)
class MissingLockFile:
    path: Path
    hint: str | None = "Use --sync-mode install or preferCi"

    @property
    def message(self) -> str:
        return f"{self.path.name} file is not found"


@dataclass(frozen=True, slots=True)
class HookFailure:
    hook: str
    script: str
    returncode: int
    output: str = ""
    hint: str | None = None

    @property
    def message(self) -> str:
        return f'Hook "{self.hook}" ({self.script}) failed (exit {self.returncode})'


@dataclass(frozen=True, slots=True)
class CurrentReleaseProtected:
    name: str
    hint: str | None = "Switch to another package first"

    @property
    def message(self) -> str:
        return f'Cannot uninstall current package "{self.name}"'


@dataclass(frozen=True, slots=True)
class DescriptorInvalid:
    path: Path
    reason: str
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"Invalid package descriptor {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class StoreCorrupted:
    pointer: Path
    reason: str
    hint: str | None = "Fix or remove the pointer manually, then run: shelf use <name>"

    @property
    def message(self) -> str:
        return f"Store is corrupted ({self.pointer}): {self.reason}"


@dataclass(frozen=True, slots=True)
class ConfigError:
    path: Path
    reason: str
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"Error while loading config {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class IoFailure:
    action: str
    reason: str
    path: Path | None = None
    hint: str | None = None

    @property
    def message(self) -> str:
        if self.path is not None:
            return f"{self.action} failed ({self.path}): {self.reason}"
        return f"{self.action} failed: {self.reason}"


ShelfError = (
    InvalidOption
    | NotFound
    | IncompatibleVersion
    | DuplicateRelease
    | MissingLockFile
    | HookFailure
    | CurrentReleaseProtected
    | DescriptorInvalid
    | StoreCorrupted
    | ConfigError
    | IoFailure
)


def exit_code_for(error: ShelfError) -> int:
    """Map an error kind to its CLI exit code."""
    match error:
        case InvalidOption() | NotFound() | DuplicateRelease() | CurrentReleaseProtected():
            return int(ErrorCode.USER_ERROR)
        case IncompatibleVersion() | StoreCorrupted() | ConfigError() | MissingLockFile():
            return int(ErrorCode.ENV_ERROR)
        case DescriptorInvalid():
            return int(ErrorCode.ENV_ERROR)
        case HookFailure():
            return int(ErrorCode.HOOK_ERROR)
        case IoFailure():
            return int(ErrorCode.IO_ERROR)
