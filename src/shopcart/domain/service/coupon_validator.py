"""Domain service: Coupon validation.

A pure lookup. Codes are checked for shape first, so junk input
never reaches the table, and then matched exactly (case-sensitive).
"""

from __future__ import annotations

import re

from shopcart.domain.model.coupon import VALID_COUPONS, CouponDefinition

_COUPON_PATTERN = re.compile(r"[A-Za-z0-9]+")


def validate_coupon_code(
    code: str,
    coupons: tuple[CouponDefinition, ...] = VALID_COUPONS,
) -> CouponDefinition | None:
    """Return the coupon matching *code*, or None.

    None is returned for non-strings, empty strings and anything with a
    character outside ASCII letters and digits.
    """
    if not isinstance(code, str) or not _COUPON_PATTERN.fullmatch(code):
        return None

    for coupon in coupons:
        if coupon.code == code:
            return coupon
    return None
