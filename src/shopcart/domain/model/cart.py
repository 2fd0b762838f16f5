"""Cart aggregate: the core of the domain.

The Cart owns its line items and the active coupon. ``subtotal``,
``discount`` and ``total`` are derived from those two things and are
rewritten by ``recalculate()`` after every mutation; nothing else
assigns them.

Every mutating method validates its arguments before touching state,
so a rejected call leaves the cart exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shopcart.domain.exceptions import (
    InvalidCoupon,
    InvalidQuantity,
    NegativeQuantity,
)
from shopcart.domain.model.coupon import CouponDefinition
from shopcart.domain.model.product import Product
from shopcart.domain.model.value_objects import Money, Quantity
from shopcart.domain.service.coupon_validator import validate_coupon_code


@dataclass
class CartItem:
    """A product reference paired with how many of it are in the cart."""

    product: Product
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.product.price * self.quantity.value


@dataclass
class Cart:
    """Aggregate root for one shopping session.

    Invariants:
    - at most one ``CartItem`` per product id
    - ``subtotal`` is the sum of ``line_total`` over ``items``
    - ``discount`` is ``subtotal * rate`` for a coupon that still
      validates, otherwise zero
    - ``total == subtotal - discount`` and is never negative

    The ``__init__`` accepts stored totals as-is so a repository can
    reconstitute a persisted snapshot without recomputing it.
    """

    items: list[CartItem] = field(default_factory=list)
    coupon_code: str | None = None
    subtotal: Money = field(default_factory=Money.zero)
    discount: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> None:
        """Add *quantity* of *product*, merging with an existing line."""
        if quantity <= 0:
            raise InvalidQuantity("Quantity must be greater than 0")
        added = Quantity(quantity)

        existing = self._find_item(product.id)
        if existing is not None:
            existing.quantity = existing.quantity + added
        else:
            self.items.append(CartItem(product=product, quantity=added))

        self.recalculate()

    def remove_item(self, product_id: str) -> None:
        """Drop the line for *product_id*. Absent ids are ignored."""
        self.items = [item for item in self.items if item.product.id != product_id]
        self.recalculate()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Overwrite a line's quantity; zero removes the line.

        Setting the quantity of a product that is not in the cart does
        nothing.
        """
        if quantity < 0:
            raise NegativeQuantity("Quantity cannot be negative")
        if quantity == 0:
            self.remove_item(product_id)
            return

        new_quantity = Quantity(quantity)
        item = self._find_item(product_id)
        if item is not None:
            item.quantity = new_quantity
        self.recalculate()

    def apply_coupon(self, code: str) -> CouponDefinition:
        """Activate *code*, replacing any coupon already applied."""
        coupon = validate_coupon_code(code)
        if coupon is None:
            raise InvalidCoupon("Invalid coupon code. Please check and try again.")
        self.coupon_code = coupon.code
        self.recalculate()
        return coupon

    def remove_coupon(self) -> None:
        self.coupon_code = None
        self.recalculate()

    def clear(self) -> None:
        self.items = []
        self.coupon_code = None
        self.recalculate()

    # --- Derived totals -------------------------------------------------------

    def recalculate(self) -> None:
        """Recompute subtotal, discount and total from items and coupon.

        The coupon code is validated again on every call; a code that
        no longer resolves simply stops discounting.
        """
        subtotal = Money.zero()
        for item in self.items:
            subtotal = subtotal + item.line_total

        discount = Money.zero()
        if self.coupon_code:
            coupon = validate_coupon_code(self.coupon_code)
            if coupon is not None:
                discount = subtotal * coupon.discount_rate

        self.subtotal = subtotal
        self.discount = discount
        self.total = subtotal - discount

    # --- Queries --------------------------------------------------------------

    @property
    def item_count(self) -> int:
        """Total units across all lines (the number on the cart badge)."""
        return sum(item.quantity.value for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def quantity_of(self, product_id: str) -> int:
        item = self._find_item(product_id)
        return item.quantity.value if item is not None else 0

    # --- Internal helpers -----------------------------------------------------

    def _find_item(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.product.id == product_id:
                return item
        return None
