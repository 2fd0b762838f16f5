"""Domain-level exceptions.

Every cart rule violation is a subclass of DomainException so the
CartManager can catch them at one boundary and turn them into a
user-facing message instead of a crash.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidQuantity(ValidationError):
    """An item was added with a quantity of zero or less."""


class NegativeQuantity(ValidationError):
    """An item quantity was set below zero."""


class InvalidCoupon(ValidationError):
    """A coupon code is malformed or matches no known coupon."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""
