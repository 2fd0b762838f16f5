"""Product: a read-only catalog entry.

Products are owned by the catalog. The cart holds references to them
and never copies or changes their fields.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.value_objects import Money


@dataclass(frozen=True)
class Product:
    """A catalog entry; the cart only reads its id, name and price."""

    id: str
    name: str
    price: Money
    image: str = ""
    description: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Product id is required")
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")
