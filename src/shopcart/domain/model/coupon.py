"""Coupon definitions.

A coupon is a static rule: an exact-match code and the fraction of the
subtotal it takes off. Coupons are defined once at import time and never
mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shopcart.domain.exceptions import ValidationError


@dataclass(frozen=True)
class CouponDefinition:
    """Invariant: ``0 <= discount_rate < 1``, so a discount can never
    exceed the subtotal it is taken from."""

    code: str
    discount_rate: Decimal
    description: str

    def __post_init__(self) -> None:
        if not isinstance(self.discount_rate, Decimal):
            raise ValidationError(
                f"Discount rate must be a Decimal, got {type(self.discount_rate).__name__}"
            )
        if not Decimal("0") <= self.discount_rate < Decimal("1"):
            raise ValidationError(
                f"Discount rate must be in [0, 1), got {self.discount_rate}"
            )

    @property
    def percent_off(self) -> int:
        return int(self.discount_rate * 100)


VALID_COUPONS: tuple[CouponDefinition, ...] = (
    CouponDefinition(
        code="WEB3BRIDGECOHORTx",
        discount_rate=Decimal("0.1"),
        description="10% off your entire order",
    ),
)
