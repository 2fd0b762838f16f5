import logging

import click

from shopcart.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_set,
    cart_show,
)
from shopcart.infrastructure.cli.coupon_commands import coupon_apply, coupon_remove
from shopcart.infrastructure.cli.product_commands import product_list


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """shopcart: shopping cart demo"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def products() -> None:
    """Browse the product catalog."""


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def coupon() -> None:
    """Apply or remove a discount coupon."""


# Register subcommands
products.add_command(product_list)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_set)
cart.add_command(cart_show)
coupon.add_command(coupon_apply)
coupon.add_command(coupon_remove)
