"""Appointment scheduling commands."""

from dataclasses import replace

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import (
    get_settings,
    get_store,
    money,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_datetime_or_exit,
    parse_minor_units_or_exit,
    require_owner_or_exit,
)
from bizdash.domain.metrics import appointments_on
from bizdash.gateway.base import APPOINTMENTS, CLIENTS, PROFESSIONALS


@click.group()
def appointment_group():
    """Manage appointments."""
    pass


@appointment_group.command("add")
@click.option("--client", "client_id", type=int, required=True, help="Client ID")
@click.option("--service", required=True, help="Service label (e.g., 'Haircut')")
@click.option("--price", required=True, help="Service price (e.g., 25.00)")
@click.option("--professional", "professional_id", type=int, required=True, help="Professional ID")
@click.option(
    "--at",
    "scheduled_at",
    required=True,
    help="Date and time in the business timezone (e.g., '2024-03-01 14:30')",
)
@click.option("--confirmed", is_flag=True, help="Mark the appointment as confirmed")
@click.pass_context
def add_appointment(
    ctx,
    client_id: int,
    service: str,
    price: str,
    professional_id: int,
    scheduled_at: str,
    confirmed: bool,
):
    """Book an appointment.

    Examples:
        bizdash appointment add --client 1 --service Haircut --price 25 --professional 2 --at "2024-03-01 14:30"
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    payload = {
        "client_id": client_id,
        "service": service,
        "price": parse_amount_or_exit(ctx, price),
        "professional_id": professional_id,
        "scheduled_at": parse_datetime_or_exit(ctx, scheduled_at),
        "is_confirmed": confirmed,
    }

    async def book():
        await store.fetch_all(owner_id, CLIENTS, PROFESSIONALS)
        store.clients.require(client_id)
        store.professionals.require(professional_id)
        return await store.appointments.add(owner_id, payload)

    created = run_or_exit(ctx, book())
    local = created.scheduled_at.astimezone(get_settings(ctx).zone)
    click.echo(f"Booked appointment {created.id}")
    click.echo(f"  When: {local:%Y-%m-%d %H:%M}")
    click.echo(f"  Service: {created.service} ({money(ctx, created.price)})")


@appointment_group.command("list")
@click.option("--date", "day", help="Only appointments on this date (e.g., 'today', '2024-03-01')")
@click.pass_context
def list_appointments(ctx, day: str | None):
    """List appointments in time order."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    zone = get_settings(ctx).zone

    run_or_exit(ctx, store.fetch_all(owner_id, APPOINTMENTS, CLIENTS, PROFESSIONALS))
    appointments = list(store.appointments)
    if day is not None:
        appointments = appointments_on(appointments, parse_date_or_exit(ctx, day), zone)
    if not appointments:
        click.echo("No appointments found.")
        return

    click.echo("\nAppointments:")
    click.echo("-" * 90)
    for a in appointments:
        client = store.clients.get(a.client_id)
        professional = store.professionals.get(a.professional_id)
        status = "confirmed" if a.is_confirmed else "pending"
        click.echo(
            f"ID: {a.id:3d} | {a.scheduled_at.astimezone(zone):%Y-%m-%d %H:%M} | "
            f"{client.name if client else '(deleted client)':20s} | {a.service:15s} | "
            f"{professional.name if professional else '(deleted)':12s} | "
            f"{money(ctx, a.price):>10s} | {status}"
        )


@appointment_group.command("confirm")
@click.argument("appointment_id", type=int, metavar="ID")
@click.pass_context
def confirm_appointment(ctx, appointment_id: int):
    """Mark an appointment as confirmed."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    async def confirm():
        await store.appointments.fetch_all(owner_id)
        current = store.appointments.require(appointment_id)
        return await store.appointments.update(replace(current, is_confirmed=True))

    run_or_exit(ctx, confirm())
    click.echo(f"Confirmed appointment {appointment_id}")


@appointment_group.command("edit")
@click.argument("appointment_id", type=int, metavar="ID")
@click.option("--client", "client_id", type=int, help="New client ID")
@click.option("--service", help="New service label")
@click.option("--price", help="New service price (e.g., 25.00)")
@click.option("--professional", "professional_id", type=int, help="New professional ID")
@click.option("--at", "scheduled_at", help="Reschedule to this date and time")
@click.option("--confirmed/--pending", default=None, help="Change the confirmation status")
@click.pass_context
def edit_appointment(
    ctx,
    appointment_id: int,
    client_id: int | None,
    service: str | None,
    price: str | None,
    professional_id: int | None,
    scheduled_at: str | None,
    confirmed: bool | None,
):
    """Edit or reschedule an appointment.

    Examples:
        bizdash appointment edit 4 --at "2024-03-02 10:00"
        bizdash appointment edit 4 --service Coloring --price 45 --professional 3
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    changes = {
        key: value
        for key, value in {
            "client_id": client_id,
            "service": service,
            "professional_id": professional_id,
            "is_confirmed": confirmed,
        }.items()
        if value is not None
    }
    if price is not None:
        changes["price"] = parse_minor_units_or_exit(ctx, price)
    if scheduled_at is not None:
        changes["scheduled_at"] = parse_datetime_or_exit(ctx, scheduled_at)
    if not changes:
        click.echo("Nothing to change.")
        return

    async def edit():
        await store.fetch_all(owner_id, APPOINTMENTS, CLIENTS, PROFESSIONALS)
        current = store.appointments.require(appointment_id)
        if client_id is not None:
            store.clients.require(client_id)
        if professional_id is not None:
            store.professionals.require(professional_id)
        return await store.appointments.update(replace(current, **changes))

    updated = run_or_exit(ctx, edit())
    local = updated.scheduled_at.astimezone(get_settings(ctx).zone)
    click.echo(f"Updated appointment {updated.id}")
    click.echo(f"  When: {local:%Y-%m-%d %H:%M}")
    click.echo(f"  Service: {updated.service} ({money(ctx, updated.price)})")


@appointment_group.command("delete")
@click.argument("appointment_id", type=int, metavar="ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_appointment(ctx, appointment_id: int, yes: bool):
    """Cancel and delete an appointment."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    run_or_exit(ctx, store.appointments.fetch_all(owner_id))
    if store.appointments.get(appointment_id) is None:
        click.echo(f"Error: Appointment {appointment_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete appointment {appointment_id}?"):
        click.echo("Deletion cancelled.")
        return

    run_or_exit(ctx, store.appointments.remove(appointment_id))
    click.echo(f"Deleted appointment {appointment_id}")


def register_commands(cli):
    """Register appointment commands with main CLI."""
    cli.add_command(appointment_group, name="appointment")
