"""Read-only commands: list, info, current."""

from __future__ import annotations

import typer

from shelf.cli.commands._helpers import resolve_target, unwrap_or_exit
from shelf.cli.context import CLIContext, build_context
from shelf.output.console import Style
from shelf.releases.model import Release


def _label(release: Release) -> str:
    identity = release.descriptor.identity
    suffix = f"  {identity.name}@{identity.version}" if identity else ""
    marker = "*" if release.is_current else " "
    return f"{marker} {release.name}{suffix}"


def print_release(release: Release, ctx: CLIContext) -> None:
    ctx.console.print(_label(release), Style.BOLD if release.is_current else Style.DEFAULT)
    ctx.console.print(f"  path: {release.path}", Style.DIM)
    if release.descriptor.compatibility:
        ctx.console.print(f"  compatibility: {release.descriptor.compatibility}", Style.DIM)
    for hook, script in release.descriptor.hooks.items():
        ctx.console.print(f"  {hook}: {script}", Style.DIM)


def list_releases() -> None:
    """List releases, most recent first (* marks the current one)."""
    ctx = build_context()
    releases = unwrap_or_exit(ctx.shelf.list(), ctx)
    if not releases:
        ctx.console.print("No packages installed", Style.DIM)
        return
    for index, release in enumerate(releases):
        ctx.console.print(
            f"{index}: {_label(release)}",
            Style.BOLD if release.is_current else Style.DEFAULT,
        )


def info(
    target: str = typer.Argument(..., help="Release name or index from `shelf list`"),
) -> None:
    """Show one release."""
    ctx = build_context()
    name = resolve_target(target, ctx)
    print_release(unwrap_or_exit(ctx.shelf.get_info(name), ctx), ctx)


def current() -> None:
    """Show the current release."""
    ctx = build_context()
    release = unwrap_or_exit(ctx.shelf.get_current_info(), ctx)
    if release is None:
        ctx.console.print("No current package", Style.DIM)
        return
    print_release(release, ctx)
