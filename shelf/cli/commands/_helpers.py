"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from shelf.core.errors import ShelfError, exit_code_for
from shelf.core.result import Err, Result
from shelf.output.console import Style

if TYPE_CHECKING:
    from shelf.cli.context import CLIContext


T = TypeVar("T")


def fail(error: ShelfError, ctx: CLIContext) -> NoReturn:
    """Print ``error`` (and its hint) and exit with its code."""
    ctx.console.error(error.message)
    if error.hint:
        ctx.console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=exit_code_for(error))


def unwrap_or_exit(result: Result[T, ShelfError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit.

    This helper reduces boilerplate for the common pattern:
        match result:
            case Err(e):
                ctx.console.error(e.message)
                raise typer.Exit(code=exit_code_for(e))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        fail(result.error, ctx)
    return result.value


def resolve_target(target: str, ctx: CLIContext) -> str:
    """Accept a release name or its index in ``shelf list``."""
    return unwrap_or_exit(ctx.shelf.resolve_target_package(target), ctx)
