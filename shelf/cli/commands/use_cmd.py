"""Use command - switch the current release."""

from __future__ import annotations

import typer

from shelf.cli.commands._helpers import resolve_target, unwrap_or_exit
from shelf.cli.commands.info import print_release
from shelf.cli.context import build_context
from shelf.core.options import UseOptions


def use(
    target: str = typer.Argument(..., help="Release name or index from `shelf list`"),
    disable_hook: list[str] = typer.Option(
        [], "--disable-hook", help="Skip a hook (repeatable)"
    ),
) -> None:
    """Make a release current."""
    ctx = build_context()
    name = resolve_target(target, ctx)
    options = UseOptions(disabled_hooks=tuple(disable_hook), env=ctx.config.env, log=ctx.log)
    release = unwrap_or_exit(ctx.shelf.use(name, options), ctx)
    print_release(release, ctx)
