"""CLI error handling helpers."""

import asyncio
from typing import Any, Coroutine

import click

from bizdash.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def run_or_exit(ctx: click.Context, operation: Coroutine[Any, Any, Any]) -> Any:
    """Run a store coroutine to completion, exiting on domain errors."""
    try:
        return asyncio.run(operation)
    except DomainError as e:
        handle_domain_error(ctx, e)
