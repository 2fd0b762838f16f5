"""Data Transfer Objects: plain containers that cross layer boundaries.

Subscribers and the CLI receive these frozen snapshots, never the live
Cart aggregate, so nothing outside the CartManager can mutate cart
state behind its back.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartItemDTO:
    """Output: a single cart line as displayed to the user."""

    product_id: str
    product_name: str
    category: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    """Output: the whole cart as displayed to the user."""

    items: tuple[CartItemDTO, ...]
    coupon_code: str | None
    item_count: int
    subtotal: str
    discount: str
    total: str

    @property
    def has_discount(self) -> bool:
        return self.discount != "$0.00"
