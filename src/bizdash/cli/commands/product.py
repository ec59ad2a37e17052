"""Product inventory commands."""

from dataclasses import replace

import click

from bizdash.cli.error_handling import run_or_exit
from bizdash.cli.session import (
    get_settings,
    get_store,
    money,
    parse_amount_or_exit,
    parse_minor_units_or_exit,
    require_owner_or_exit,
)
from bizdash.domain.catalog import low_stock_products, search_products


@click.group()
def product_group():
    """Manage products and stock."""
    pass


@product_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--price", required=True, help="Unit price (e.g., 12.50)")
@click.option("--quantity", type=int, default=0, show_default=True, help="Units in stock")
@click.option("--description", help="Product description")
@click.option("--image-url", help="Link to a product picture")
@click.pass_context
def add_product(
    ctx,
    name: str,
    price: str,
    quantity: int,
    description: str | None,
    image_url: str | None,
):
    """Add a product.

    Examples:
        bizdash product add "Argan oil shampoo" --price 14.90 --quantity 12
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    payload = {
        "name": name,
        "price": parse_amount_or_exit(ctx, price),
        "quantity": quantity,
        "description": description,
        "image_url": image_url,
    }

    created = run_or_exit(ctx, store.products.add(owner_id, payload))
    click.echo(f"Created product '{created.name}' (ID: {created.id})")
    click.echo(f"  Price: {money(ctx, created.price)}")
    click.echo(f"  Stock: {created.quantity}")


@product_group.command("list")
@click.option("--search", "term", help="Only products whose name or description matches")
@click.option("--low-stock", is_flag=True, help="Only products running low")
@click.pass_context
def list_products(ctx, term: str | None, low_stock: bool):
    """List products, flagging those with low stock."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    threshold = get_settings(ctx).low_stock_threshold

    products = search_products(run_or_exit(ctx, store.products.fetch_all(owner_id)), term)
    low = low_stock_products(products, threshold)
    if low_stock:
        products = low
    if not products:
        click.echo("No products found.")
        return

    low_ids = {p.id for p in low}
    click.echo("\nProducts:")
    click.echo("-" * 70)
    for p in products:
        flag = "  LOW STOCK" if p.id in low_ids else ""
        click.echo(
            f"ID: {p.id:3d} | {p.name:25s} | {money(ctx, p.price):>12s} | "
            f"Stock: {p.quantity}{flag}"
        )


@product_group.command("edit")
@click.argument("product_id", type=int, metavar="ID")
@click.option("--name", help="New name")
@click.option("--price", help="New unit price (e.g., 12.50)")
@click.option("--quantity", type=int, help="New stock quantity")
@click.option("--description", help="New description (empty string clears it)")
@click.option("--image-url", help="New picture link (empty string clears it)")
@click.pass_context
def edit_product(
    ctx,
    product_id: int,
    name: str | None,
    price: str | None,
    quantity: int | None,
    description: str | None,
    image_url: str | None,
):
    """Edit a product.

    Examples:
        bizdash product edit 2 --quantity 30
        bizdash product edit 2 --price 15.50
    """
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)
    changes = {
        key: value
        for key, value in {
            "name": name,
            "quantity": quantity,
            "description": description,
            "image_url": image_url,
        }.items()
        if value is not None
    }
    if price is not None:
        changes["price"] = parse_minor_units_or_exit(ctx, price)
    if not changes:
        click.echo("Nothing to change.")
        return

    async def edit():
        await store.products.fetch_all(owner_id)
        current = store.products.require(product_id)
        return await store.products.update(replace(current, **changes))

    updated = run_or_exit(ctx, edit())
    click.echo(f"Updated product '{updated.name}' (ID: {updated.id})")


@product_group.command("delete")
@click.argument("product_id", type=int, metavar="ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_product(ctx, product_id: int, yes: bool):
    """Delete a product."""
    store = get_store(ctx)
    owner_id = require_owner_or_exit(ctx)

    run_or_exit(ctx, store.products.fetch_all(owner_id))
    current = store.products.get(product_id)
    if current is None:
        click.echo(f"Error: Product {product_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete product '{current.name}' (ID: {product_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    run_or_exit(ctx, store.products.remove(product_id))
    click.echo(f"Deleted product '{current.name}'")


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
