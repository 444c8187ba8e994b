"""Uninstall command - remove an inactive release."""

from __future__ import annotations

import typer

from shelf.cli.commands._helpers import resolve_target, unwrap_or_exit
from shelf.cli.context import build_context
from shelf.core.options import UninstallOptions


def uninstall(
    target: str = typer.Argument(..., help="Release name or index from `shelf list`"),
    disable_hook: list[str] = typer.Option(
        [], "--disable-hook", help="Skip a hook (repeatable)"
    ),
) -> None:
    """Remove a release. The current release cannot be removed."""
    ctx = build_context()
    name = resolve_target(target, ctx)
    options = UninstallOptions(
        disabled_hooks=tuple(disable_hook), env=ctx.config.env, log=ctx.log
    )
    unwrap_or_exit(ctx.shelf.uninstall(name, options), ctx)
