"""Install command - add a release from a tarball."""

from __future__ import annotations

import typer

from shelf.cli.commands._helpers import unwrap_or_exit
from shelf.cli.commands.info import print_release
from shelf.cli.context import build_context
from shelf.core.options import InstallOptions


def install(
    src: str = typer.Argument(..., help="Tarball URL, local path or npm package spec"),
    use: bool = typer.Option(False, "--use", help="Make the new release current"),
    force: bool = typer.Option(False, "--force", help="Skip the already-installed check"),
    sync_mode: str = typer.Option(
        "install", "--sync-mode", help="Dependency sync: install, ci or preferCi"
    ),
    name_format: str = typer.Option("timestamp", "--name-format", help="Release name format"),
    disable_hook: list[str] = typer.Option(
        [], "--disable-hook", help="Skip a hook (repeatable)"
    ),
    auth: str | None = typer.Option(
        None, "--auth", envvar="SHELF_AUTH", help="user:password or token for downloads"
    ),
) -> None:
    """Install a new release; add --use to switch to it."""
    ctx = build_context()
    options = InstallOptions(
        name_format=name_format,
        sync_mode=sync_mode,
        force=force,
        use=use,
        disabled_hooks=tuple(disable_hook),
        env=ctx.config.env,
        auth=auth,
        log=ctx.log,
    )
    release = unwrap_or_exit(ctx.shelf.install(src, options), ctx)
    print_release(release, ctx)
