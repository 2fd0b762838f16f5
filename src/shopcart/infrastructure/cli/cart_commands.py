"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from shopcart.application.dto import CartDTO
from shopcart.domain.exceptions import DomainException, EntityNotFoundError
from shopcart.domain.model.product import Product
from shopcart.infrastructure.bootstrap import cart_manager, product_repository


def _get_product(product_id: str) -> Product:
    product = product_repository().get_by_id(product_id)
    if product is None:
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
    return product


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying the cart."""
    if not dto.items:
        click.echo("Your cart is empty.")
        return

    click.echo(f"Cart ({dto.item_count} item{'s' if dto.item_count != 1 else ''})")
    click.echo()
    click.echo(f"  {'ID':<6} {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<6} {item.product_name:<24} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Subtotal':<36} {dto.subtotal:>21}")
    if dto.coupon_code:
        click.echo(f"  {'Coupon ' + dto.coupon_code:<36} {'-' + dto.discount:>21}")
    click.echo(f"  {'Total':<36} {dto.total:>21}")


@click.command("show")
def cart_show() -> None:
    """Show the contents and totals of the cart."""
    _display_cart(cart_manager().snapshot())


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="How many to add.")
def cart_add(product_id: str, quantity: int) -> None:
    """Add a product to the cart."""
    try:
        product = _get_product(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    manager = cart_manager()
    if not manager.add_item(product, quantity):
        raise click.ClickException(manager.last_error)

    click.echo(manager.last_notice)
    _display_cart(manager.snapshot())


@click.command("remove")
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_remove(product_id: str) -> None:
    """Remove a product from the cart."""
    manager = cart_manager()
    manager.remove_item(product_id)
    _display_cart(manager.snapshot())


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes).")
def cart_set(product_id: str, quantity: int) -> None:
    """Change how many of a product are in the cart."""
    manager = cart_manager()
    if not manager.set_quantity(product_id, quantity):
        raise click.ClickException(manager.last_error)

    _display_cart(manager.snapshot())


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart and drop any coupon."""
    manager = cart_manager()
    manager.clear()
    click.echo("Cart cleared.")
