"""CartRepository that stores the cart as one JSON snapshot in a
key-value store."""

from __future__ import annotations

import json
import logging

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.cart import Cart, CartItem
from shopcart.domain.model.product import Product
from shopcart.domain.model.value_objects import Money, Quantity
from shopcart.domain.repository.cart_repository import CartRepository
from shopcart.infrastructure.persistence.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "shopping-cart"


class KeyValueCartRepository(CartRepository):

    def __init__(self, store: KeyValueStore, key: str = CART_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    # --- CartRepository interface ---------------------------------------------

    def load(self) -> Cart | None:
        payload = self._store.get(self._key)
        if payload is None:
            return None

        raw = json.loads(payload.decode("utf-8"))
        # Only the items list is checked; readable totals are adopted as stored.
        if not isinstance(raw, dict) or not isinstance(raw.get("items"), list):
            logger.warning("Ignoring stored cart under %r: no items list", self._key)
            return None
        return self._to_domain(raw)

    def save(self, cart: Cart) -> None:
        payload = json.dumps(self._to_raw(cart), indent=2) + "\n"
        self._store.set(self._key, payload.encode("utf-8"))
        logger.debug("Saved cart with %d item(s) under %r", len(cart.items), self._key)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        raw: dict = {
            "items": [
                {
                    "product": {
                        "id": item.product.id,
                        "name": item.product.name,
                        "price": str(item.product.price.amount),
                        "image": item.product.image,
                        "description": item.product.description,
                        "category": item.product.category,
                    },
                    "quantity": item.quantity.value,
                }
                for item in cart.items
            ],
            "subtotal": str(cart.subtotal.amount),
            "discount": str(cart.discount.amount),
            "total": str(cart.total.amount),
        }
        if cart.coupon_code:
            raw["couponCode"] = cart.coupon_code
        return raw

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        items = [
            CartItem(
                product=Product(
                    id=i["product"]["id"],
                    name=i["product"]["name"],
                    price=Money.of(i["product"]["price"]),
                    image=i["product"].get("image", ""),
                    description=i["product"].get("description", ""),
                    category=i["product"].get("category", ""),
                ),
                quantity=Quantity(i["quantity"]),
            )
            for i in raw["items"]
        ]
        cart = Cart(items=items, coupon_code=raw.get("couponCode") or None)
        try:
            subtotal = Money.of(raw["subtotal"])
            discount = Money.of(raw["discount"])
            total = Money.of(raw["total"])
        except (KeyError, ValidationError):
            logger.warning("Stored cart totals unreadable, recomputing from items")
            cart.recalculate()
        else:
            cart.subtotal = subtotal
            cart.discount = discount
            cart.total = total
        return cart
