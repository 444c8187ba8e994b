"""Shared fixtures: fake collaborators and on-disk stores."""

from __future__ import annotations

import io
import json
import tarfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from shelf.output.console import MockConsole
from shelf.platform.http import MockHttpClient
from shelf.platform.process import RecordingExecutor
from shelf.releases.service import Shelf

TarballFactory = Callable[..., Path]
ReleaseFactory = Callable[..., Path]


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def http() -> MockHttpClient:
    return MockHttpClient()


@pytest.fixture
def names() -> Callable[[], str]:
    """Increasing timestamp-like names, one per call."""

    def counter() -> Iterator[str]:
        n = 0
        while True:
            n += 1
            yield f"2024-01-01T00-00-00.{n:06d}"

    it = counter()
    return lambda: next(it)


@pytest.fixture
def shelf(
    store_root: Path,
    executor: RecordingExecutor,
    console: MockConsole,
    http: MockHttpClient,
    names: Callable[[], str],
) -> Shelf:
    return Shelf(
        store_root,
        console=console,
        executor=executor,
        http=http,
        tool_version="1.0.0",
        name_factory=names,
    )


@pytest.fixture
def make_tarball(tmp_path: Path) -> TarballFactory:
    """Build an npm-style tarball (everything under ``package/``)."""
    counter = iter(range(1_000_000))

    def build(
        package_json: dict[str, object] | None = None,
        files: dict[str, bytes] | None = None,
        *,
        prefix: str = "package",
    ) -> Path:
        path = tmp_path / f"release-{next(counter)}.tgz"
        entries = dict(files or {})
        if package_json is not None:
            entries["package.json"] = json.dumps(package_json).encode("utf-8")
        with tarfile.open(path, "w:gz") as tar:
            for name, content in entries.items():
                info = tarfile.TarInfo(name=f"{prefix}/{name}" if prefix else name)
                info.size = len(content)
                tar.addfile(info, io.BytesIO(content))
        return path

    return build


@pytest.fixture
def make_release(store_root: Path) -> ReleaseFactory:
    """Create ``packages/<name>`` directly, optionally with a package.json."""

    def create(name: str, package_json: dict[str, object] | None = None) -> Path:
        path = store_root / "packages" / name
        path.mkdir(parents=True)
        if package_json is not None:
            (path / "package.json").write_text(json.dumps(package_json), encoding="utf-8")
        return path

    return create


@pytest.fixture
def point_to(store_root: Path) -> Callable[[str], None]:
    """Point the store's current pointer at ``packages/<name>``."""

    def link(name: str) -> None:
        pointer = store_root / "package"
        if pointer.is_symlink():
            pointer.unlink()
        pointer.symlink_to(Path("packages") / name, target_is_directory=True)

    return link
