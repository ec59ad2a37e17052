"""Client management commands."""

from dataclasses import replace

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import get_store, require_owner_or_exit


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--phone", help="Phone number")
@click.option("--email", help="Email address")
@click.option("--notes", help="Free-text notes")
@click.pass_context
def add_client(ctx, name: str, phone: str | None, email: str | None, notes: str | None):
    """Add a client.

    Examples:
        bizdash client add "Ana Silva" --phone "+351 912 345 678"
        bizdash client add "Rui Costa" --email rui@example.com
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    payload = {"name": name, "phone": phone, "email": email, "notes": notes}

    created = run_or_exit(ctx, store.clients.add(owner_id, payload))
    click.echo(f"Created client '{created.name}' (ID: {created.id})")


@client_group.command("list")
@click.pass_context
def list_clients(ctx):
    """List all clients."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    clients = run_or_exit(ctx, store.clients.fetch_all(owner_id))
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 70)
    for c in clients:
        contact = " / ".join(part for part in (c.phone, c.email) if part)
        click.echo(f"ID: {c.id:3d} | {c.name:25s} | {contact}")


@client_group.command("edit")
@click.argument("client_id", type=int, metavar="ID")
@click.option("--name", help="New name")
@click.option("--phone", help="New phone number (empty string clears it)")
@click.option("--email", help="New email address (empty string clears it)")
@click.option("--notes", help="New notes (empty string clears them)")
@click.pass_context
def edit_client(
    ctx,
    client_id: int,
    name: str | None,
    phone: str | None,
    email: str | None,
    notes: str | None,
):
    """Edit a client's details.

    Examples:
        bizdash client edit 3 --phone "+351 913 000 000"
        bizdash client edit 3 --email ""
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    changes = {
        key: value
        for key, value in {"name": name, "phone": phone, "email": email, "notes": notes}.items()
        if value is not None
    }
    if not changes:
        click.echo("Nothing to change.")
        return

    async def edit():
        await store.clients.fetch_all(owner_id)
        current = store.clients.require(client_id)
        return await store.clients.update(replace(current, **changes))

    updated = run_or_exit(ctx, edit())
    click.echo(f"Updated client '{updated.name}' (ID: {updated.id})")


@client_group.command("delete")
@click.argument("client_id", type=int, metavar="ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client_id: int, yes: bool):
    """Delete a client.

    Appointments that reference the client are kept.
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    run_or_exit(ctx, store.clients.fetch_all(owner_id))
    current = store.clients.get(client_id)
    if current is None:
        click.echo(f"Error: Client {client_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete client '{current.name}' (ID: {client_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    run_or_exit(ctx, store.clients.remove(client_id))
    click.echo(f"Deleted client '{current.name}'")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
