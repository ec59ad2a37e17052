"""Professional (staff) commands."""

from dataclasses import replace

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import get_store, require_owner_or_exit


@click.group()
def professional_group():
    """Manage professionals."""
    pass


@professional_group.command("add")
@click.argument("name", metavar="NAME")
@click.pass_context
def add_professional(ctx, name: str):
    """Add a professional."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    created = run_or_exit(ctx, store.professionals.add(owner_id, {"name": name}))
    click.echo(f"Created professional '{created.name}' (ID: {created.id})")


@professional_group.command("list")
@click.pass_context
def list_professionals(ctx):
    """List all professionals."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    professionals = run_or_exit(ctx, store.professionals.fetch_all(owner_id))
    if not professionals:
        click.echo("No professionals found.")
        return

    click.echo("\nProfessionals:")
    click.echo("-" * 40)
    for p in professionals:
        click.echo(f"ID: {p.id:3d} | {p.name}")


@professional_group.command("rename")
@click.argument("professional_id", type=int, metavar="ID")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_professional(ctx, professional_id: int, new_name: str):
    """Rename a professional.

    Appointments keep pointing at the same professional.
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    async def rename():
        await store.professionals.fetch_all(owner_id)
        current = store.professionals.require(professional_id)
        return await store.professionals.update(replace(current, name=new_name))

    updated = run_or_exit(ctx, rename())
    click.echo(f"Renamed professional to '{updated.name}'")


@professional_group.command("delete")
@click.argument("professional_id", type=int, metavar="ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_professional(ctx, professional_id: int, yes: bool):
    """Delete a professional."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    run_or_exit(ctx, store.professionals.fetch_all(owner_id))
    current = store.professionals.get(professional_id)
    if current is None:
        click.echo(f"Error: Professional {professional_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete professional '{current.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    run_or_exit(ctx, store.professionals.remove(professional_id))
    click.echo(f"Deleted professional '{current.name}'")


def register_commands(cli):
    """Register professional commands with main CLI."""
    cli.add_command(professional_group, name="professional")
