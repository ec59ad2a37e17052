"""Opening hours and business exception commands."""

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import (
    get_store,
    parse_date_or_exit,
    parse_time_or_exit,
    require_owner_or_exit,
)
from bizdash.domain.entities import BusinessHours
from bizdash.domain.schedule import DAY_NAMES, BusinessHoursService, opening_hours_for
from bizdash.gateway.base import BUSINESS_EXCEPTIONS


def _day_index_or_exit(ctx: click.Context, text: str) -> int:
    """Accept a weekday name (or prefix, e.g. 'mon') or a number, 0 = Sunday."""
    if text.isdigit() and 0 <= int(text) <= 6:
        return int(text)
    lowered = text.strip().lower()
    if len(lowered) >= 3:
        for index, name in enumerate(DAY_NAMES):
            if name.lower().startswith(lowered):
                return index
    click.echo(f"Error: Unknown weekday '{text}'. Use a name or 0 (Sunday) to 6.", err=True)
    ctx.exit(1)


def _format_span(start, end) -> str:
    if start is None:
        return "closed"
    return f"{start:%H:%M} - {end:%H:%M}"


@click.group()
def hours_group():
    """Manage opening hours."""
    pass


@hours_group.command("show")
@click.pass_context
def show_hours(ctx):
    """Show the opening hours for each weekday."""
    owner_id = require_owner_or_exit(ctx)
    service = BusinessHoursService(ctx.obj["gateway"])

    week = run_or_exit(ctx, service.fetch_week(owner_id))
    click.echo("\nOpening hours:")
    click.echo("-" * 30)
    for entry in week:
        span = _format_span(entry.start_time, entry.end_time)
        click.echo(f"{DAY_NAMES[entry.day_of_week]:10s} {span}")


@hours_group.command("set")
@click.argument("day", metavar="DAY")
@click.option("--start", help="Opening time (e.g., 09:00)")
@click.option("--end", help="Closing time (e.g., 18:30)")
@click.option("--closed", is_flag=True, help="Closed all day")
@click.pass_context
def set_hours(ctx, day: str, start: str | None, end: str | None, closed: bool):
    """Set the opening hours of one weekday.

    Examples:
        bizdash hours set monday --start 09:00 --end 18:00
        bizdash hours set sun --closed
    """
    owner_id = require_owner_or_exit(ctx)
    index = _day_index_or_exit(ctx, day)
    if closed and (start or end):
        click.echo("Error: --closed cannot be combined with --start/--end", err=True)
        ctx.exit(1)
    if not closed and not (start and end):
        click.echo("Error: Give both --start and --end, or --closed", err=True)
        ctx.exit(1)

    hours = BusinessHours(
        owner_id=owner_id,
        day_of_week=index,
        start_time=parse_time_or_exit(ctx, start),
        end_time=parse_time_or_exit(ctx, end),
    )
    service = BusinessHoursService(ctx.obj["gateway"])
    run_or_exit(ctx, service.save_week(owner_id, [hours]))
    click.echo(f"{DAY_NAMES[index]}: {_format_span(hours.start_time, hours.end_time)}")


@hours_group.command("on")
@click.argument("day", metavar="DATE", required=False)
@click.pass_context
def hours_on(ctx, day: str | None):
    """Show the opening hours of a calendar date, exceptions included."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    target = parse_date_or_exit(ctx, day)
    service = BusinessHoursService(ctx.obj["gateway"])

    async def load():
        await store.fetch_all(owner_id, BUSINESS_EXCEPTIONS)
        return await service.fetch_week(owner_id)

    week = run_or_exit(ctx, load())
    span = opening_hours_for(target, week, store.business_exceptions.items)
    if span is None:
        click.echo(f"{target:%A %Y-%m-%d}: closed")
    else:
        click.echo(f"{target:%A %Y-%m-%d}: {_format_span(*span)}")


@hours_group.group("exception")
def exception_group():
    """Manage one-off closures and special opening hours."""
    pass


@exception_group.command("add")
@click.argument("day", metavar="DATE")
@click.option("--description", "-d", required=True, help="Reason (e.g., 'Public holiday')")
@click.option("--start", help="Special opening time; omit for closed all day")
@click.option("--end", help="Special closing time; omit for closed all day")
@click.pass_context
def add_exception(ctx, day: str, description: str, start: str | None, end: str | None):
    """Add a business exception for one date.

    Examples:
        bizdash hours exception add 2024-12-25 -d Christmas
        bizdash hours exception add 2024-12-24 -d "Christmas Eve" --start 09:00 --end 13:00
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    payload = {
        "exception_date": parse_date_or_exit(ctx, day),
        "description": description,
        "start_time": parse_time_or_exit(ctx, start),
        "end_time": parse_time_or_exit(ctx, end),
    }

    created = run_or_exit(ctx, store.business_exceptions.add(owner_id, payload))
    click.echo(
        f"Added exception {created.id} on {created.exception_date}: "
        f"{created.description} ({_format_span(created.start_time, created.end_time)})"
    )


@exception_group.command("list")
@click.pass_context
def list_exceptions(ctx):
    """List business exceptions by date."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    exceptions = run_or_exit(ctx, store.business_exceptions.fetch_all(owner_id))
    if not exceptions:
        click.echo("No business exceptions found.")
        return

    click.echo("\nBusiness exceptions:")
    click.echo("-" * 60)
    for e in exceptions:
        click.echo(
            f"ID: {e.id:3d} | {e.exception_date} | {e.description:25s} | "
            f"{_format_span(e.start_time, e.end_time)}"
        )


@exception_group.command("delete")
@click.argument("exception_id", type=int, metavar="ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_exception(ctx, exception_id: int, yes: bool):
    """Delete a business exception."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    run_or_exit(ctx, store.business_exceptions.fetch_all(owner_id))
    current = store.business_exceptions.get(exception_id)
    if current is None:
        click.echo(f"Error: Business exception {exception_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete exception '{current.description}'?"):
        click.echo("Deletion cancelled.")
        return

    run_or_exit(ctx, store.business_exceptions.remove(exception_id))
    click.echo(f"Deleted business exception {exception_id}")


def register_commands(cli):
    """Register opening hours commands with main CLI."""
    cli.add_command(hours_group, name="hours")
