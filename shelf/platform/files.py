"""Filesystem primitives returning Results.

OSError is converted to ``IoFailure`` here so orchestrators never handle
exceptions from the filesystem.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from shelf.core.errors import IoFailure
from shelf.core.result import Err, Ok, Result

__all__ = ["link_exists", "remove_path", "copy_tree", "move_path"]


def link_exists(path: Path) -> bool:
    """True if ``path`` is a symlink, whether or not its target exists."""
    return path.is_symlink()


def remove_path(path: Path) -> Result[None, IoFailure]:
    """Remove a file, symlink or directory tree. Missing paths are fine.

    Symlinks are unlinked, never followed.
    """
    try:
        if path.is_symlink() or path.is_file():
            path.unlink(missing_ok=True)
        elif path.is_dir():
            shutil.rmtree(path)
    except OSError as e:
        return Err(IoFailure(action="Remove", reason=str(e), path=path))
    return Ok(None)


def copy_tree(src: Path, dst: Path) -> Result[None, IoFailure]:
    """Copy a directory tree, keeping symlinks as symlinks."""
    try:
        shutil.copytree(src, dst, symlinks=True)
    except (OSError, shutil.Error) as e:
        return Err(IoFailure(action="Copy", reason=str(e), path=src))
    return Ok(None)


def move_path(src: Path, dst: Path) -> Result[None, IoFailure]:
    """Move ``src`` to ``dst``, creating parents. ``dst`` must not exist."""
    if dst.exists() or dst.is_symlink():
        return Err(IoFailure(action="Move", reason="destination already exists", path=dst))
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(os.fspath(src), os.fspath(dst))
    except OSError as e:
        return Err(IoFailure(action="Move", reason=str(e), path=src))
    return Ok(None)
