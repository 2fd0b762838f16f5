"""Abstract repository for the Cart aggregate.

There is only ever one cart per session, so the repository loads and
saves a single snapshot rather than looking carts up by id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcart.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def load(self) -> Cart | None:
        """Return the stored cart, or None if nothing usable is stored."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist the full cart snapshot, replacing any previous one."""
