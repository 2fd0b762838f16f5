"""CLI commands for the discount coupon."""

from __future__ import annotations

import click

from shopcart.infrastructure.bootstrap import cart_manager


@click.command("apply")
@click.argument("code")
def coupon_apply(code: str) -> None:
    """Apply a coupon code to the cart."""
    code = code.strip()
    if not code:
        raise click.ClickException("Enter a coupon code")

    manager = cart_manager()
    if not manager.apply_coupon(code):
        raise click.ClickException(manager.last_error)

    snapshot = manager.snapshot()
    click.echo(manager.last_notice)
    click.echo(f"Discount: -{snapshot.discount}  Total: {snapshot.total}")


@click.command("remove")
def coupon_remove() -> None:
    """Remove the active coupon."""
    manager = cart_manager()
    if manager.cart.coupon_code is None:
        click.echo("No coupon applied.")
        return

    manager.remove_coupon()
    click.echo(f"Coupon removed. Total: {manager.snapshot().total}")
