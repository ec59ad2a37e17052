"""CLI helpers for the signed-in owner and input parsing.

Each helper either returns a parsed value or prints an error and exits, so
error messaging and exit behavior stay consistent across commands.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import click

from bizdash.config import Settings
from bizdash.cli.error_handling import handle_domain_error
from bizdash.domain.errors import DomainError
from bizdash.domain.money import from_user_input, to_display
from bizdash.domain.store import EntryStore
from bizdash.utils.amount_parser import parse_amount
from bizdash.utils.date_parser import parse_date, parse_datetime, parse_month, parse_time


def get_store(ctx: click.Context) -> EntryStore:
    return ctx.obj["store"]


def get_settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def require_owner_or_exit(ctx: click.Context) -> str:
    """Return the configured owner identifier, or exit if nobody is signed in."""
    owner_id = get_settings(ctx).owner_id
    if not owner_id:
        click.echo("Error: No owner account set. Use --owner or BIZDASH_OWNER.", err=True)
        ctx.exit(1)
    return owner_id


def today(ctx: click.Context) -> date:
    """Current date in the business timezone."""
    return datetime.now(get_settings(ctx).zone).date()


def parse_amount_or_exit(ctx: click.Context, text: str) -> Decimal:
    """Parse an amount typed on the command line (e.g. 12.50)."""
    try:
        return parse_amount(text)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, text: str | None) -> date:
    """Parse a date option, defaulting to today in the business timezone."""
    if text is None:
        return today(ctx)
    try:
        return parse_date(text, today=today(ctx))
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)


def parse_month_or_exit(ctx: click.Context, text: str | None) -> date:
    if text is None:
        return today(ctx).replace(day=1)
    try:
        return parse_month(text, today=today(ctx))
    except ValueError as e:
        click.echo(f"Error: Invalid month: {e}", err=True)
        ctx.exit(1)


def parse_datetime_or_exit(ctx: click.Context, text: str) -> datetime:
    """Parse a date and time in the business timezone."""
    try:
        return parse_datetime(text, get_settings(ctx).zone)
    except ValueError as e:
        click.echo(f"Error: Invalid date and time: {e}", err=True)
        ctx.exit(1)


def parse_time_or_exit(ctx: click.Context, text: str | None) -> time | None:
    if text is None:
        return None
    try:
        return parse_time(text)
    except ValueError as e:
        click.echo(f"Error: Invalid time: {e}", err=True)
        ctx.exit(1)


def money(ctx: click.Context, minor_units: int) -> str:
    """Format minor units with the configured currency."""
    return to_display(minor_units, get_settings(ctx).currency)


def parse_minor_units_or_exit(ctx: click.Context, text: str) -> int:
    """Parse an amount typed on the command line straight into minor units."""
    amount = parse_amount_or_exit(ctx, text)
    try:
        return from_user_input(amount, fmt=get_settings(ctx).currency)
    except DomainError as e:
        handle_domain_error(ctx, e)
