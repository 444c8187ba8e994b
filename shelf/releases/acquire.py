"""Tarball acquisition and extraction.

A source is one of:
- an ``http://`` or ``https://`` URL, downloaded with the HTTP client
- a local path or ``file://`` URL, copied
- anything else, handed to ``npm pack`` as a package spec
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from shelf.core.errors import IoFailure
from shelf.core.result import Err, Ok, Result
from shelf.platform.files import move_path
from shelf.platform.http import HttpClient, auth_headers

from .npm import NpmClient

__all__ = ["TarballFetcher", "extract_tarball", "safe_member_path"]


def _local_path(src: str) -> Path | None:
    parsed = urlparse(src)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if not parsed.scheme:
        candidate = Path(src).expanduser()
        if candidate.is_file():
            return candidate
    return None


@dataclass(frozen=True, slots=True)
class TarballFetcher:
    http: HttpClient
    npm: NpmClient

    def fetch(self, src: str, dest: Path, *, auth: str | None = None) -> Result[Path, IoFailure]:
        """Place the tarball for ``src`` at ``dest``."""
        scheme = urlparse(src).scheme
        if scheme in {"http", "https"}:
            downloaded = self.http.download(src, dest, headers=auth_headers(auth))
            if isinstance(downloaded, Err):
                return Err(IoFailure(action="Download", reason=str(downloaded.error)))
            return Ok(dest)

        local = _local_path(src)
        if local is not None:
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(local, dest)
            except OSError as e:
                return Err(IoFailure(action="Copy tarball", reason=str(e), path=local))
            return Ok(dest)

        packed = self.npm.pack(src, dest.parent, auth=auth)
        if isinstance(packed, Err):
            return packed
        moved = move_path(packed.value, dest)
        if isinstance(moved, Err):
            return moved
        return Ok(dest)


def safe_member_path(member_name: str) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = [p for p in PurePosixPath(normalized).parts if p not in {"", "."}]
    if not parts or ".." in parts:
        return None
    return Path(*parts)


def extract_tarball(archive: Path, dest: Path) -> Result[int, IoFailure]:
    """Extract regular files and directories of ``archive`` into ``dest``.

    Links, devices and members escaping ``dest`` are skipped.

    Returns:
        Ok with the number of files extracted, or Err(IoFailure)
    """
    try:
        dest.mkdir(parents=True, exist_ok=True)
        root = dest.resolve()
        files_count = 0

        with tarfile.open(archive, "r:*") as tar:
            for member in tar.getmembers():
                if not (member.isdir() or member.isreg()):
                    continue

                rel_path = safe_member_path(member.name)
                if rel_path is None:
                    continue

                full_path = dest / rel_path
                if not full_path.resolve().is_relative_to(root):
                    continue

                if member.isdir():
                    full_path.mkdir(parents=True, exist_ok=True)
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                with src, open(full_path, "wb") as out:
                    shutil.copyfileobj(src, out)

                mode = member.mode & 0o777
                if mode:
                    with contextlib.suppress(OSError):
                        os.chmod(full_path, mode)

                files_count += 1

        return Ok(files_count)

    except tarfile.TarError as e:
        return Err(IoFailure(action="Extract", reason=f"tar extraction failed: {e}", path=archive))
    except OSError as e:
        return Err(IoFailure(action="Extract", reason=str(e), path=archive))
