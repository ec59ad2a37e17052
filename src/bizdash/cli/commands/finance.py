"""Financial entry commands (revenue and expenses)."""

from dataclasses import replace

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import (
    get_store,
    money,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_minor_units_or_exit,
    parse_month_or_exit,
    require_owner_or_exit,
)
from bizdash.domain.entities import EntryType, Recurrence
from bizdash.domain.metrics import monthly_financial_kpis


@click.group()
def finance_group():
    """Manage revenue and expense entries."""
    pass


@finance_group.command("add")
@click.option("--description", "-d", required=True, help="What the entry is for")
@click.option("--amount", required=True, help="Amount (e.g., 120.00)")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice([t.value for t in EntryType]),
    required=True,
    help="Revenue or expense",
)
@click.option("--fixed", is_flag=True, help="Recurring fixed entry (rent, salaries, ...)")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.pass_context
def add_entry(
    ctx,
    description: str,
    amount: str,
    entry_type: str,
    fixed: bool,
    entry_date: str | None,
):
    """Record a revenue or expense entry.

    Examples:
        bizdash finance add -d "Haircuts" --amount 180 --type revenue
        bizdash finance add -d "Rent" --amount 650 --type expense --fixed --date 2024-03-01
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    payload = {
        "description": description,
        "amount": parse_amount_or_exit(ctx, amount),
        "entry_type": entry_type,
        "recurrence": Recurrence.FIXED if fixed else Recurrence.ONE_OFF,
        "entry_date": parse_date_or_exit(ctx, entry_date),
    }

    created = run_or_exit(ctx, store.financial_entries.add(owner_id, payload))
    click.echo(
        f"Recorded {created.entry_type.value} {created.id}: "
        f"{created.description} ({money(ctx, created.amount)})"
    )


@finance_group.command("list")
@click.option("--month", help="Only entries in this month (e.g., '2024-03')")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice([t.value for t in EntryType]),
    help="Only revenue or only expenses",
)
@click.pass_context
def list_entries(ctx, month: str | None, entry_type: str | None):
    """List financial entries, newest first."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    entries = run_or_exit(ctx, store.financial_entries.fetch_all(owner_id))
    if month is not None:
        first = parse_month_or_exit(ctx, month)
        entries = [
            e
            for e in entries
            if (e.entry_date.year, e.entry_date.month) == (first.year, first.month)
        ]
    if entry_type is not None:
        entries = [e for e in entries if e.entry_type.value == entry_type]
    if not entries:
        click.echo("No financial entries found.")
        return

    click.echo("\nFinancial entries:")
    click.echo("-" * 80)
    for e in entries:
        sign = "-" if e.entry_type is EntryType.EXPENSE else "+"
        fixed = " (fixed)" if e.recurrence is Recurrence.FIXED else ""
        click.echo(
            f"ID: {e.id:3d} | {e.entry_date} | {e.description:30s} | "
            f"{sign}{money(ctx, e.amount):>12s}{fixed}"
        )


@finance_group.command("edit")
@click.argument("entry_id", type=int, metavar="ID")
@click.option("--description", "-d", help="New description")
@click.option("--amount", help="New amount (e.g., 120.00)")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice([t.value for t in EntryType]),
    help="Change to revenue or expense",
)
@click.option("--fixed/--one-off", default=None, help="Mark as recurring or one-off")
@click.option("--date", "entry_date", help="New entry date")
@click.pass_context
def edit_entry(
    ctx,
    entry_id: int,
    description: str | None,
    amount: str | None,
    entry_type: str | None,
    fixed: bool | None,
    entry_date: str | None,
):
    """Edit a financial entry.

    Examples:
        bizdash finance edit 3 --amount 95.50
        bizdash finance edit 3 --type expense --fixed
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    changes = {}
    if description is not None:
        changes["description"] = description
    if amount is not None:
        changes["amount"] = parse_minor_units_or_exit(ctx, amount)
    if entry_type is not None:
        changes["entry_type"] = EntryType(entry_type)
    if fixed is not None:
        changes["recurrence"] = Recurrence.FIXED if fixed else Recurrence.ONE_OFF
    if entry_date is not None:
        changes["entry_date"] = parse_date_or_exit(ctx, entry_date)
    if not changes:
        click.echo("Nothing to change.")
        return

    async def edit():
        await store.financial_entries.fetch_all(owner_id)
        current = store.financial_entries.require(entry_id)
        return await store.financial_entries.update(replace(current, **changes))

    updated = run_or_exit(ctx, edit())
    click.echo(
        f"Updated {updated.entry_type.value} {updated.id}: "
        f"{updated.description} ({money(ctx, updated.amount)})"
    )


@finance_group.command("delete")
@click.argument("entry_id", type=int, metavar="ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a financial entry."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    run_or_exit(ctx, store.financial_entries.fetch_all(owner_id))
    current = store.financial_entries.get(entry_id)
    if current is None:
        click.echo(f"Error: Financial entry {entry_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete '{current.description}' (ID: {entry_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    run_or_exit(ctx, store.financial_entries.remove(entry_id))
    click.echo(f"Deleted financial entry {entry_id}")


@finance_group.command("summary")
@click.option("--month", help="Month to summarize (default: current month)")
@click.pass_context
def monthly_summary(ctx, month: str | None):
    """Show revenue, expenses and net profit for a month."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    first = parse_month_or_exit(ctx, month)

    entries = run_or_exit(ctx, store.financial_entries.fetch_all(owner_id))
    kpis = monthly_financial_kpis(entries, first)

    click.echo(f"\nSummary for {first:%B %Y}")
    click.echo("=" * 40)
    click.echo(f"Revenue:    {money(ctx, kpis.revenue_minor):>15s}")
    click.echo(f"Expenses:   {money(ctx, kpis.expenses_minor):>15s}")
    click.echo("-" * 40)
    click.echo(f"Net profit: {money(ctx, kpis.net_profit_minor):>15s}")


def register_commands(cli):
    """Register finance commands with main CLI."""
    cli.add_command(finance_group, name="finance")
