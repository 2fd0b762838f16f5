"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from shopcart.infrastructure.bootstrap import product_repository


@click.command("list")
@click.option("--category", default=None, help="Only show products in this category.")
def product_list(category: str | None) -> None:
    """List the products in the catalog."""
    repo = product_repository()
    items = repo.list_by_category(category) if category else repo.list_all()

    if not items:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<14} {'Price':>10}")
    click.echo("-" * 57)
    for p in items:
        click.echo(f"{p.id:<6} {p.name:<24} {p.category:<14} {str(p.price):>10}")
