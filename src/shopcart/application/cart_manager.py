"""Application service: the cart state container.

CartManager owns the session's Cart and is the only thing that mutates
it. Each operation delegates the business rule to the Cart aggregate,
then persists the new snapshot and notifies subscribers.

Domain errors never escape: they are caught here and turned into the
``last_error`` message. Storage errors are logged and dropped, so the
worst a broken store can do is leave the cart unpersisted.

Lifecycle (wired by ``shopcart.infrastructure.bootstrap``)::

    manager = CartManager(cart_repo, scheduler)   # empty, not ready
    manager.restore()                             # adopt stored cart, ready
"""

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import Callable

from shopcart.application.dto import CartDTO, CartItemDTO
from shopcart.application.scheduler import ScheduledTask, Scheduler
from shopcart.domain.exceptions import DomainException
from shopcart.domain.model.cart import Cart
from shopcart.domain.model.product import Product
from shopcart.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)

NOTICE_TTL_SECONDS = 3.0

CartListener = Callable[[CartDTO], None]


class CartManager:
    """Owns the session cart and the transient error and notice messages."""

    def __init__(
        self,
        cart_repo: CartRepository,
        scheduler: Scheduler | None = None,
        notice_ttl: float = NOTICE_TTL_SECONDS,
    ) -> None:
        self._cart_repo = cart_repo
        self._scheduler = scheduler
        self._notice_ttl = notice_ttl
        self._cart = Cart()
        self._ready = False
        self._listeners: list[CartListener] = []
        self._notice_task: ScheduledTask | None = None
        # Expiry callbacks run on timer threads; the lock and generation keep
        # a superseded timer from clearing a newer notice.
        self._notice_lock = threading.Lock()
        self._notice_generation = 0
        self.last_error = ""
        self.last_notice = ""

    @property
    def cart(self) -> Cart:
        """The live aggregate. Read it; mutate only through the manager."""
        return self._cart

    @property
    def ready(self) -> bool:
        return self._ready

    # --- Startup --------------------------------------------------------------

    def restore(self) -> None:
        """Adopt the stored cart, if any, and mark the manager ready.

        Runs once. Any failure while reading falls back to the empty cart.
        Writes are suppressed until this has run, so an empty cart can
        never overwrite a stored one that has not been read yet.
        """
        if self._ready:
            logger.debug("Cart already restored; ignoring repeated restore()")
            return

        try:
            restored = self._cart_repo.load()
        except Exception:
            logger.warning("Could not restore cart, starting empty", exc_info=True)
        else:
            if restored is not None:
                self._cart = restored
                logger.debug("Restored cart with %d item(s)", len(restored.items))
        finally:
            self._ready = True

        self._notify()

    # --- Cart operations ------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> bool:
        try:
            self._cart.add_item(product, quantity)
        except DomainException as exc:
            self._fail(exc)
            return False

        self.last_error = ""
        self._set_notice(f"{product.name} added to cart!")
        self._commit()
        return True

    def remove_item(self, product_id: str) -> None:
        self._cart.remove_item(product_id)
        self._commit()

    def set_quantity(self, product_id: str, quantity: int) -> bool:
        """Set a line's quantity. Zero removes it; unknown ids are ignored."""
        try:
            self._cart.set_quantity(product_id, quantity)
        except DomainException as exc:
            self._fail(exc)
            return False

        if quantity > 0:
            self.last_error = ""
        self._commit()
        return True

    def apply_coupon(self, code: str) -> bool:
        try:
            self._cart.apply_coupon(code)
        except DomainException as exc:
            self._fail(exc)
            return False

        self.last_error = ""
        self._set_notice("Coupon applied successfully!")
        self._commit()
        return True

    def remove_coupon(self) -> None:
        self._cart.remove_coupon()
        self._commit()

    def clear(self) -> None:
        self._cart.clear()
        self._commit()

    # --- Messages -------------------------------------------------------------

    def clear_error(self) -> None:
        self.last_error = ""

    def clear_notice(self) -> None:
        with self._notice_lock:
            self._cancel_notice_task()
            self._notice_generation += 1
            self.last_notice = ""

    # --- Observation ----------------------------------------------------------

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Call *listener* with a fresh snapshot after every change.

        Returns a function that removes the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> CartDTO:
        return self._to_dto(self._cart)

    # --- Internal helpers -----------------------------------------------------

    def _fail(self, exc: DomainException) -> None:
        logger.debug("Cart operation rejected: %s", exc)
        self.last_error = str(exc)

    def _commit(self) -> None:
        self._persist()
        self._notify()

    def _persist(self) -> None:
        if not self._ready:
            logger.debug("Skipping cart save until restore has completed")
            return
        try:
            self._cart_repo.save(self._cart)
        except Exception:
            logger.warning("Could not save cart", exc_info=True)

    def _notify(self) -> None:
        if not self._listeners:
            return
        dto = self.snapshot()
        for listener in list(self._listeners):
            listener(dto)

    def _set_notice(self, message: str) -> None:
        with self._notice_lock:
            self._cancel_notice_task()
            self._notice_generation += 1
            self.last_notice = message
            if self._scheduler is not None:
                self._notice_task = self._scheduler.call_later(
                    self._notice_ttl,
                    partial(self._expire_notice, self._notice_generation),
                )

    def _expire_notice(self, generation: int) -> None:
        with self._notice_lock:
            if generation != self._notice_generation:
                return
            self._notice_task = None
            self.last_notice = ""

    def _cancel_notice_task(self) -> None:
        if self._notice_task is not None:
            self._notice_task.cancel()
            self._notice_task = None

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(cart: Cart) -> CartDTO:
        return CartDTO(
            items=tuple(
                CartItemDTO(
                    product_id=item.product.id,
                    product_name=item.product.name,
                    category=item.product.category,
                    quantity=item.quantity.value,
                    unit_price=str(item.product.price),
                    line_total=str(item.line_total),
                )
                for item in cart.items
            ),
            coupon_code=cart.coupon_code,
            item_count=cart.item_count,
            subtotal=str(cart.subtotal),
            discount=str(cart.discount),
            total=str(cart.total),
        )
