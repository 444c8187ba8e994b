from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from shelf.core.config import DEFAULT_CONFIG_NAME, Config, load_config
from shelf.core.errors import ErrorCode
from shelf.core.result import Err
from shelf.output.console import ConsoleProtocol, RichConsole
from shelf.releases.activation import ACTIVATION_STRATEGIES
from shelf.releases.service import Shelf

ENV_DIR = "SHELF_DIR"
ENV_CONFIG = "SHELF_CONFIG"
ENV_QUIET = "SHELF_QUIET"
ENV_ACTIVATION = "SHELF_ACTIVATION"


@dataclass(frozen=True, slots=True)
class CLIContext:
    shelf: Shelf
    config: Config
    console: ConsoleProtocol
    log: bool


def store_root() -> Path:
    return Path(os.environ.get(ENV_DIR) or ".").expanduser().resolve()


def build_context() -> CLIContext:
    console = RichConsole()
    root = store_root()
    log = os.environ.get(ENV_QUIET) != "1"

    config_path = Path(os.environ.get(ENV_CONFIG) or root / DEFAULT_CONFIG_NAME)
    config_result = load_config(config_path, console if log else None)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    activation_name = os.environ.get(ENV_ACTIVATION) or "remove-then-link"
    strategy = ACTIVATION_STRATEGIES.get(activation_name)
    if strategy is None:
        console.error(f'Unknown activation strategy "{activation_name}"')
        console.print(f"hint: expected one of: {', '.join(ACTIVATION_STRATEGIES)}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        shelf=Shelf(root, console=console, activation=strategy()),
        config=config_result.value,
        console=console,
        log=log,
    )
