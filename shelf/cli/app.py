from __future__ import annotations

import os
from pathlib import Path

import typer

from shelf import __version__
from shelf.cli.commands.clean import clean
from shelf.cli.commands.info import current, info, list_releases
from shelf.cli.commands.install import install
from shelf.cli.commands.uninstall import uninstall
from shelf.cli.commands.use_cmd import use
from shelf.cli.context import ENV_ACTIVATION, ENV_CONFIG, ENV_DIR, ENV_QUIET
from shelf.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(install)
app.command()(use)
app.command()(uninstall)
app.command("list")(list_releases)
app.command()(info)
app.command()(current)
app.command()(clean)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    dir_: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Store root (default: $SHELF_DIR or the current directory)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="JSON config file (default: <store root>/shelf.json)",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results and errors."),
    atomic: bool = typer.Option(
        False,
        "--atomic",
        help="Swap the current pointer with a rename instead of remove + create.",
    ),
) -> None:
    if dir_ is not None:
        try:
            root = dir_.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --dir: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        if root.exists() and not root.is_dir():
            typer.echo(f"error: --dir '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[ENV_DIR] = str(root)

    if config is not None:
        os.environ[ENV_CONFIG] = str(config.expanduser())
    if quiet:
        os.environ[ENV_QUIET] = "1"
    if atomic:
        os.environ[ENV_ACTIVATION] = "atomic-rename"


def main() -> None:
    app()
