"""Main CLI entry point."""

import logging

import click

from bizdash.cli.error_handling import handle_domain_error
from bizdash.config import load_settings
from bizdash.domain.errors import DomainError
from bizdash.domain.store import EntryStore
from bizdash.gateway.factories import create_sqlite_gateway

# Import and register all commands at module level
from bizdash.cli.commands import (
    appointment,
    client,
    dashboard,
    finance,
    hours,
    product,
    professional,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BIZDASH_DB_PATH environment variable)",
    envvar="BIZDASH_DB_PATH",
)
@click.option(
    "--owner",
    help="Owner account whose records are shown (overrides BIZDASH_OWNER)",
    envvar="BIZDASH_OWNER",
)
@click.option(
    "--timezone",
    "timezone_name",
    help="Business timezone, e.g. Europe/Lisbon (overrides BIZDASH_TIMEZONE, default UTC)",
    envvar="BIZDASH_TIMEZONE",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, owner: str | None, timezone_name: str | None, verbose: bool):
    """Bizdash - Business dashboard for service businesses.

    Keep clients, appointments, products, professionals, finances and
    opening hours for one owner account, and see daily and monthly KPIs.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize the gateway only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings(
                database_path=db_path, owner_id=owner, timezone=timezone_name
            )
            settings.zone  # fail early on an unknown timezone name
        except DomainError as e:
            handle_domain_error(ctx, e)

        gateway = create_sqlite_gateway(database_path=settings.database_path)
        gateway.connect()
        ctx.call_on_close(gateway.disconnect)
        ctx.obj["settings"] = settings
        ctx.obj["gateway"] = gateway
        ctx.obj["store"] = EntryStore(gateway, currency=settings.currency)


# Register all commands
client.register_commands(cli)
product.register_commands(cli)
professional.register_commands(cli)
appointment.register_commands(cli)
finance.register_commands(cli)
dashboard.register_commands(cli)
hours.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
