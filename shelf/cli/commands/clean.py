"""Clean command - remove every inactive release."""

from __future__ import annotations

import typer

from shelf.cli.commands._helpers import unwrap_or_exit
from shelf.cli.context import build_context
from shelf.core.options import CleanOptions
from shelf.output.console import Style


def clean(
    disable_hook: list[str] = typer.Option(
        [], "--disable-hook", help="Skip a hook (repeatable)"
    ),
) -> None:
    """Uninstall all releases except the current one."""
    ctx = build_context()
    options = CleanOptions(disabled_hooks=tuple(disable_hook), env=ctx.config.env, log=ctx.log)
    removed = unwrap_or_exit(ctx.shelf.clean(options), ctx)
    for name in removed:
        ctx.console.print(f"  removed {name}", Style.DIM)
