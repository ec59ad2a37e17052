"""Dashboard overview command."""

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import (
    get_settings,
    get_store,
    money,
    parse_date_or_exit,
    require_owner_or_exit,
)
from bizdash.domain.catalog import low_stock_products
from bizdash.domain.metrics import (
    appointments_on,
    daily_kpis,
    popular_services,
    professional_performance,
    weekly_earnings,
)


@click.command("dashboard")
@click.option("--date", "day", help="Reference date (default: today)")
@click.option("--window", type=int, default=30, show_default=True, help="Days covered by rankings")
@click.option("--top", type=int, default=5, show_default=True, help="Number of services to rank")
@click.pass_context
def dashboard(ctx, day: str | None, window: int, top: int):
    """Show today's KPIs, schedule, earnings and rankings.

    Examples:
        bizdash dashboard
        bizdash dashboard --date yesterday
    """
    store = get_store(ctx)
    settings = get_settings(ctx)
    owner_id = require_owner_or_exit(ctx)
    reference = parse_date_or_exit(ctx, day)
    zone = settings.zone

    run_or_exit(ctx, store.fetch_all(owner_id))
    appointments = store.appointments.items

    kpis = daily_kpis(appointments, reference, zone)
    click.echo(f"\nDashboard for {reference}")
    click.echo("=" * 60)
    click.echo(f"Earnings:       {money(ctx, kpis.earnings_minor)}")
    click.echo(f"Appointments:   {kpis.appointment_count}")
    click.echo(f"Average ticket: {money(ctx, kpis.avg_ticket_minor)}")

    click.echo("\nSchedule:")
    todays = appointments_on(appointments, reference, zone)
    if not todays:
        click.echo("  No appointments.")
    for a in todays:
        client = store.clients.get(a.client_id)
        status = "confirmed" if a.is_confirmed else "pending"
        click.echo(
            f"  {a.scheduled_at.astimezone(zone):%H:%M} | "
            f"{client.name if client else '(deleted client)':20s} | {a.service} | {status}"
        )

    click.echo("\nEarnings, last 7 days:")
    earnings = weekly_earnings(store.financial_entries.items, reference)
    if not earnings:
        click.echo("  No revenue recorded.")
    for row in earnings:
        click.echo(f"  {row.date:%a %Y-%m-%d} | {money(ctx, row.earnings_minor):>12s}")

    click.echo(f"\nPopular services, last {window} days:")
    ranking = popular_services(appointments, reference, window, top, zone)
    if not ranking:
        click.echo("  No appointments.")
    for position, row in enumerate(ranking, start=1):
        click.echo(f"  {position}. {row.service} ({row.count})")

    click.echo(f"\nProfessionals, last {window} days:")
    performance = professional_performance(
        appointments, reference, window, zone, professionals=store.professionals.items
    )
    if not performance:
        click.echo("  No appointments.")
    for row in performance:
        click.echo(f"  {row.name or f'(professional {row.professional_id})':20s} | {row.count}")

    low = low_stock_products(store.products.items, settings.low_stock_threshold)
    if low:
        click.echo("\nLow stock:")
        for p in low:
            click.echo(f"  {p.name} ({p.quantity} left)")


def register_commands(cli):
    """Register the dashboard command with main CLI."""
    cli.add_command(dashboard)
