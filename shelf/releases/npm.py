"""npm invocations used to acquire releases and sync their dependencies."""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from packaging.version import InvalidVersion, Version

from shelf.core.errors import IoFailure
from shelf.core.result import Err, Ok, Result
from shelf.platform.process import ProcessExecutor

from .hooks import build_env

__all__ = ["NpmClient", "NPM", "CI_MIN_VERSION"]

NPM = "npm"

# `npm ci` first shipped in npm 5.7.0
CI_MIN_VERSION = Version("5.7.0")


def _auth_env(auth: str | None) -> dict[str, str] | None:
    if not auth:
        return None
    if ":" in auth:
        return {"npm_config__auth": base64.b64encode(auth.encode("utf-8")).decode("ascii")}
    return {"npm_config__authToken": auth}


@dataclass(frozen=True, slots=True)
class NpmClient:
    executor: ProcessExecutor
    root: Path
    env: Mapping[str, str]
    stream: bool = False

    def _run(
        self,
        args: list[str],
        cwd: Path,
        *,
        stream: bool,
        extra_env: Mapping[str, str] | None = None,
    ) -> Result[str, IoFailure]:
        env = build_env(self.root, {**self.env, **(extra_env or {})})
        result = self.executor.run([NPM, *args], cwd=cwd, env=env, stream=stream)
        if isinstance(result, Err):
            error = result.error
            detail = (error.stderr or error.stdout).strip()
            reason = f"{error}: {detail}" if detail else str(error)
            return Err(IoFailure(action=f"npm {args[0]}", reason=reason, path=cwd))
        return Ok(result.value)

    def install(self, cwd: Path) -> Result[None, IoFailure]:
        """Install production dependencies, reusing an existing node_modules."""
        return self._run(["install", "--production"], cwd, stream=self.stream).map(lambda _: None)

    def ci(self, cwd: Path) -> Result[None, IoFailure]:
        """Clean install exactly what the lock file lists."""
        return self._run(["ci", "--production"], cwd, stream=self.stream).map(lambda _: None)

    def version(self) -> Result[Version, IoFailure]:
        result = self._run(["--version"], self.root, stream=False)
        if isinstance(result, Err):
            return result
        raw = result.value.strip()
        try:
            return Ok(Version(raw))
        except InvalidVersion:
            return Err(IoFailure(action="npm --version", reason=f"unexpected output {raw!r}"))

    def ci_available(self) -> bool:
        """True if the installed npm supports ``npm ci``."""
        version = self.version()
        if isinstance(version, Err):
            return False
        return version.value >= CI_MIN_VERSION

    def pack(self, spec: str, dest_dir: Path, auth: str | None = None) -> Result[Path, IoFailure]:
        """Fetch ``spec`` from the registry as a tarball in ``dest_dir``.

        Returns:
            Ok with the tarball path npm reported, or Err(IoFailure)
        """
        extra_env = _auth_env(auth)
        result = self._run(["pack", spec], dest_dir, stream=False, extra_env=extra_env)
        if isinstance(result, Err):
            return result

        lines = [line.strip() for line in result.value.splitlines() if line.strip()]
        if not lines:
            return Err(IoFailure(action="npm pack", reason="no tarball reported", path=dest_dir))

        tarball = dest_dir / lines[-1]
        if not tarball.is_file():
            return Err(IoFailure(action="npm pack", reason="tarball not found", path=tarball))
        return Ok(tarball)
