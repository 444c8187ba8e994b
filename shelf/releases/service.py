"""Service facade over one store root.

``Shelf`` wires the store, hook runner, npm client and orchestrators for each
operation from that operation's options. Instances share no state, so several
can work on different roots side by side.

Usage:
    shelf = Shelf(Path("/srv/app"), console=RichConsole())
    result = shelf.install("https://example.com/app-1.2.0.tgz", InstallOptions(use=True))
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from pathlib import Path

from shelf import __version__
from shelf.core.errors import ShelfError
from shelf.core.options import CleanOptions, InstallOptions, UninstallOptions, UseOptions
from shelf.core.result import Err, Result
from shelf.output.console import ConsoleProtocol, NullConsole
from shelf.platform.http import HttpClient, RealHttpClient
from shelf.platform.process import ProcessExecutor, SubprocessExecutor

from .acquire import TarballFetcher
from .activation import ActivationStrategy, RemoveThenLink
from .cleaner import Cleaner
from .hooks import HookRunner
from .installer import Installer
from .model import Release
from .npm import NpmClient
from .store import Store
from .switcher import Switcher
from .sync import SyncResolver
from .uninstaller import Uninstaller

__all__ = ["Shelf"]


class Shelf:
    """All store operations for the store at ``root``."""

    def __init__(
        self,
        root: Path,
        *,
        console: ConsoleProtocol | None = None,
        executor: ProcessExecutor | None = None,
        http: HttpClient | None = None,
        activation: ActivationStrategy | None = None,
        tool_version: str = __version__,
        name_factory: Callable[[], str] | None = None,
    ) -> None:
        self._store = Store(root)
        self._console = console or NullConsole()
        self._executor = executor or SubprocessExecutor()
        self._http = http or RealHttpClient()
        self._activation = activation or RemoveThenLink()
        self._tool_version = tool_version
        self._name_factory = name_factory

    @property
    def root(self) -> Path:
        return self._store.root

    @property
    def store(self) -> Store:
        return self._store

    # -- wiring ------------------------------------------------------------

    def _console_for(self, log: bool) -> ConsoleProtocol:
        return self._console if log else NullConsole()

    def _hooks(
        self,
        console: ConsoleProtocol,
        env: Mapping[str, str],
        disabled_hooks: Collection[str],
        log: bool,
    ) -> HookRunner:
        return HookRunner(
            executor=self._executor,
            console=console,
            root=self.root,
            env=env,
            disabled_hooks=tuple(disabled_hooks),
            stream=log,
        )

    def _switcher(self, console: ConsoleProtocol, hooks: HookRunner) -> Switcher:
        return Switcher(
            store=self._store,
            hooks=hooks,
            console=console,
            activation=self._activation,
            tool_version=self._tool_version,
        )

    def _uninstaller(self, console: ConsoleProtocol, hooks: HookRunner) -> Uninstaller:
        return Uninstaller(
            store=self._store,
            hooks=hooks,
            console=console,
            tool_version=self._tool_version,
        )

    # -- operations --------------------------------------------------------

    def install(self, src: str, options: InstallOptions) -> Result[Release, ShelfError]:
        """Install a new release from ``src`` and optionally switch to it."""
        console = self._console_for(options.log)
        hooks = self._hooks(console, options.env, options.disabled_hooks, options.log)
        npm = NpmClient(
            executor=self._executor,
            root=self.root,
            env=options.env,
            stream=options.log,
        )
        installer = Installer(
            store=self._store,
            hooks=hooks,
            console=console,
            fetcher=TarballFetcher(http=self._http, npm=npm),
            sync=SyncResolver(
                npm=npm,
                console=console,
                current_release_dir=self._store.pointer,
            ),
            switcher=self._switcher(console, hooks),
            options=options,
            tool_version=self._tool_version,
            name_factory=self._name_factory,
        )
        return installer.install(src)

    def use(self, name: str, options: UseOptions) -> Result[Release, ShelfError]:
        """Make ``name`` the current release."""
        checked = options.validate()
        if isinstance(checked, Err):
            return checked
        console = self._console_for(options.log)
        hooks = self._hooks(console, options.env, options.disabled_hooks, options.log)
        return self._switcher(console, hooks).use(name)

    def uninstall(self, name: str, options: UninstallOptions) -> Result[None, ShelfError]:
        """Remove the inactive release ``name``."""
        checked = options.validate()
        if isinstance(checked, Err):
            return checked
        console = self._console_for(options.log)
        hooks = self._hooks(console, options.env, options.disabled_hooks, options.log)
        return self._uninstaller(console, hooks).uninstall(name)

    def list(self) -> Result[list[Release], ShelfError]:
        return self._store.list()

    def get_info(self, name: str) -> Result[Release, ShelfError]:
        return self._store.get(name)

    def get_current_info(self) -> Result[Release | None, ShelfError]:
        return self._store.get_current()

    def resolve_target_package(self, target: str) -> Result[str, ShelfError]:
        """Resolve a release name or a zero-based index into ``list()``."""
        return self._store.resolve_target(target)

    def clean(self, options: CleanOptions) -> Result[list[str], ShelfError]:
        """Uninstall every release except the current one."""
        checked = options.validate()
        if isinstance(checked, Err):
            return checked
        console = self._console_for(options.log)
        hooks = self._hooks(console, options.env, options.disabled_hooks, options.log)
        cleaner = Cleaner(
            store=self._store,
            uninstaller=self._uninstaller(console, hooks),
            console=console,
        )
        return cleaner.clean()
