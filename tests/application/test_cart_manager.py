"""Integration tests for the CartManager state container.

Uses the real snapshot repository over an in-memory key-value store,
and a fake scheduler, so nothing touches the disk or spawns threads.
"""

import json

import pytest

from shopcart.application.cart_manager import NOTICE_TTL_SECONDS, CartManager
from shopcart.domain.model.product import Product
from shopcart.domain.model.value_objects import Money
from shopcart.infrastructure.persistence.key_value_cart_repository import (
    CART_STORAGE_KEY,
    KeyValueCartRepository,
)
from tests.fakes import FakeKeyValueStore, FakeScheduler

COUPON = "WEB3BRIDGECOHORTx"
P1 = Product(id="p1", name="Widget", price=Money.of("10"), category="Misc")
P2 = Product(id="p2", name="Gadget", price=Money.of("2.50"), category="Misc")


def _setup(
    store: FakeKeyValueStore | None = None,
    restore: bool = True,
) -> tuple[CartManager, FakeKeyValueStore, FakeScheduler]:
    """Build a manager over fakes, restored (and so ready) by default."""
    store = store if store is not None else FakeKeyValueStore()
    scheduler = FakeScheduler()
    manager = CartManager(KeyValueCartRepository(store), scheduler)
    if restore:
        manager.restore()
    return manager, store, scheduler


def _stored(store: FakeKeyValueStore) -> dict:
    return json.loads(store.data[CART_STORAGE_KEY].decode("utf-8"))


class TestScenarios:

    def test_a_add_to_empty_cart(self):
        manager, _, _ = _setup()
        assert manager.add_item(P1, 2) is True
        cart = manager.cart
        assert [(i.product.id, i.quantity.value) for i in cart.items] == [("p1", 2)]
        assert cart.subtotal == Money.of("20")
        assert cart.discount == Money.zero()
        assert cart.total == Money.of("20")

    def test_b_add_same_product_merges(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 2)
        manager.add_item(P1, 1)
        assert manager.cart.quantity_of("p1") == 3
        assert len(manager.cart.items) == 1
        assert manager.cart.subtotal == Money.of("30")

    def test_c_apply_coupon(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 3)
        assert manager.apply_coupon(COUPON) is True
        assert manager.cart.discount == Money.of("3.0")
        assert manager.cart.total == Money.of("27.0")

    def test_d_malformed_coupon_rejected(self):
        manager, store, _ = _setup()
        manager.add_item(P1, 3)
        writes_before = len(store.writes)
        assert manager.apply_coupon("bad-code!") is False
        assert manager.last_error == "Invalid coupon code. Please check and try again."
        assert manager.cart.coupon_code is None
        assert manager.cart.total == Money.of("30")
        assert len(store.writes) == writes_before

    def test_e_zero_quantity_removes_item(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 3)
        manager.apply_coupon(COUPON)
        manager.set_quantity("p1", 0)
        cart = manager.cart
        assert cart.items == []
        assert cart.subtotal == Money.zero()
        assert cart.discount == Money.zero()
        assert cart.total == Money.zero()

    def test_f_remove_missing_item_on_empty_cart(self):
        manager, _, _ = _setup()
        manager.remove_item("nonexistent")
        assert manager.last_error == ""
        assert manager.cart.is_empty


class TestErrors:

    def test_add_zero_quantity(self):
        manager, store, _ = _setup()
        assert manager.add_item(P1, 0) is False
        assert manager.last_error == "Quantity must be greater than 0"
        assert manager.cart.is_empty
        assert store.writes == []

    def test_set_negative_quantity(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 2)
        assert manager.set_quantity("p1", -3) is False
        assert manager.last_error == "Quantity cannot be negative"
        assert manager.cart.quantity_of("p1") == 2

    def test_successful_add_clears_error(self):
        manager, _, _ = _setup()
        manager.add_item(P1, -1)
        manager.add_item(P1, 1)
        assert manager.last_error == ""

    def test_successful_set_clears_error(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 1)
        manager.apply_coupon("nope")
        manager.set_quantity("p1", 4)
        assert manager.last_error == ""

    def test_clear_error(self):
        manager, _, _ = _setup()
        manager.apply_coupon("nope")
        manager.clear_error()
        assert manager.last_error == ""

    def test_set_quantity_on_absent_item_is_noop(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 1)
        assert manager.set_quantity("ghost", 5) is True
        assert [i.product.id for i in manager.cart.items] == ["p1"]


class TestNotices:

    def test_add_sets_notice(self):
        manager, _, _ = _setup()
        manager.add_item(P1)
        assert manager.last_notice == "Widget added to cart!"

    def test_coupon_sets_notice(self):
        manager, _, _ = _setup()
        manager.apply_coupon(COUPON)
        assert manager.last_notice == "Coupon applied successfully!"

    def test_notice_expires_after_ttl(self):
        manager, _, scheduler = _setup()
        manager.add_item(P1)
        [task] = scheduler.pending
        assert task.delay == NOTICE_TTL_SECONDS
        scheduler.fire(task)
        assert manager.last_notice == ""

    def test_newer_notice_cancels_older_expiry(self):
        manager, _, scheduler = _setup()
        manager.add_item(P1)
        first = scheduler.tasks[0]
        manager.add_item(P2)
        assert first.cancelled
        assert len(scheduler.pending) == 1
        assert manager.last_notice == "Gadget added to cart!"

    def test_superseded_expiry_leaves_newer_notice(self):
        """A timer that was already running when it got cancelled must
        not clear the notice that replaced it."""
        manager, _, scheduler = _setup()
        manager.add_item(P1)
        first = scheduler.tasks[0]
        manager.add_item(P2)
        scheduler.fire(first)
        assert manager.last_notice == "Gadget added to cart!"

        manager.clear_notice()
        assert scheduler.tasks[1].cancelled

    def test_expiry_after_clear_notice_is_ignored(self):
        manager, _, scheduler = _setup()
        manager.add_item(P1)
        first = scheduler.tasks[0]
        manager.clear_notice()
        manager.apply_coupon(COUPON)
        scheduler.fire(first)
        assert manager.last_notice == "Coupon applied successfully!"

    def test_clear_notice_cancels_expiry(self):
        manager, _, scheduler = _setup()
        manager.add_item(P1)
        manager.clear_notice()
        assert manager.last_notice == ""
        assert scheduler.pending == []

    def test_failed_operation_sets_no_notice(self):
        manager, _, scheduler = _setup()
        manager.add_item(P1, 0)
        assert manager.last_notice == ""
        assert scheduler.tasks == []

    def test_without_scheduler_notice_stays(self):
        manager = CartManager(KeyValueCartRepository(FakeKeyValueStore()))
        manager.restore()
        manager.add_item(P1)
        assert manager.last_notice == "Widget added to cart!"


class TestSubscriptions:

    def test_listener_gets_snapshot_after_mutation(self):
        manager, _, _ = _setup()
        seen = []
        manager.subscribe(seen.append)
        manager.add_item(P1, 2)
        assert len(seen) == 1
        assert seen[0].total == "$20.00"
        assert seen[0].items[0].quantity == 2

    def test_rejected_operation_does_not_notify(self):
        manager, _, _ = _setup()
        seen = []
        manager.subscribe(seen.append)
        manager.add_item(P1, 0)
        manager.apply_coupon("bad-code!")
        assert seen == []

    def test_unsubscribe(self):
        manager, _, _ = _setup()
        seen = []
        unsubscribe = manager.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        manager.add_item(P1)
        assert seen == []

    def test_restore_notifies(self):
        manager, _, _ = _setup(restore=False)
        seen = []
        manager.subscribe(seen.append)
        manager.restore()
        assert len(seen) == 1
        assert seen[0].items == ()

    def test_snapshot_reflects_coupon(self):
        manager, _, _ = _setup()
        manager.add_item(P1, 3)
        manager.apply_coupon(COUPON)
        dto = manager.snapshot()
        assert dto.coupon_code == COUPON
        assert dto.item_count == 3
        assert (dto.subtotal, dto.discount, dto.total) == ("$30.00", "$3.00", "$27.00")
        assert dto.has_discount


class TestPersistence:

    def test_every_mutation_is_saved(self):
        manager, store, _ = _setup()
        manager.add_item(P1, 2)
        manager.add_item(P2, 1)
        manager.apply_coupon(COUPON)
        manager.set_quantity("p2", 4)
        manager.remove_item("p2")
        manager.remove_coupon()
        manager.clear()
        assert len(store.writes) == 7
        assert _stored(store)["items"] == []

    def test_saved_snapshot_format(self):
        manager, store, _ = _setup()
        manager.add_item(P1, 3)
        manager.apply_coupon(COUPON)
        raw = _stored(store)
        assert raw["couponCode"] == COUPON
        assert raw["items"][0]["product"]["id"] == "p1"
        assert raw["items"][0]["quantity"] == 3
        assert raw["subtotal"] == "30"
        assert raw["total"] == "27.0"

    def test_no_writes_before_restore(self):
        manager, store, _ = _setup(restore=False)
        manager.add_item(P1)
        assert store.writes == []
        assert manager.cart.quantity_of("p1") == 1

    def test_write_failure_is_swallowed(self):
        manager, store, _ = _setup()
        store.fail_writes = True
        assert manager.add_item(P1, 2) is True
        assert manager.cart.subtotal == Money.of("20")
        assert manager.last_error == ""

    def test_round_trip_through_new_manager(self):
        manager, store, _ = _setup()
        manager.add_item(P1, 3)
        manager.add_item(P2, 2)
        manager.apply_coupon(COUPON)

        reloaded, _, _ = _setup(store=store)
        assert reloaded.cart == manager.cart


class TestRestore:

    def test_empty_store_gives_empty_cart(self):
        manager, _, _ = _setup()
        assert manager.ready
        assert manager.cart.is_empty

    def test_read_failure_falls_back_to_empty(self):
        manager, store, _ = _setup(store=FakeKeyValueStore(fail_reads=True))
        assert manager.ready
        assert manager.cart.is_empty
        manager.add_item(P1)
        assert store.writes == [CART_STORAGE_KEY]

    @pytest.mark.parametrize(
        "payload",
        [
            b"not json",
            b"[]",
            b'{"items": "p1"}',
            b'{"total": 10}',
            b'{"items": [{"product": {"id": "p1"}, "quantity": 1}]}',
            b'{"items": [{"product": {"id": "p1", "name": "W", "price": "-5"}, "quantity": 1}]}',
            b'{"items": [{"product": {"id": "p1", "name": "W", "price": "5"}, "quantity": 0}]}',
            b"\xff\xfe",
        ],
    )
    def test_malformed_snapshot_falls_back_to_empty(self, payload):
        store = FakeKeyValueStore({CART_STORAGE_KEY: payload})
        manager, _, _ = _setup(store=store)
        assert manager.ready
        assert manager.cart.is_empty

    def test_stored_totals_are_adopted_as_is(self):
        payload = {
            "items": [
                {"product": {"id": "p1", "name": "W", "price": 10}, "quantity": 2}
            ],
            "subtotal": 20,
            "discount": 0,
            "total": 99,
        }
        store = FakeKeyValueStore({CART_STORAGE_KEY: json.dumps(payload).encode()})
        manager, _, _ = _setup(store=store)
        assert manager.cart.total == Money.of("99")

        manager.add_item(P2, 0)
        assert manager.cart.total == Money.of("99")
        manager.remove_item("ghost")
        assert manager.cart.total == Money.of("20")

    @pytest.mark.parametrize(
        "totals",
        [
            {"subtotal": 20, "discount": 0, "total": None},
            {"subtotal": "abc", "discount": 0, "total": 20},
            {"subtotal": 20, "discount": "-1", "total": 21},
            {},
        ],
    )
    def test_unreadable_totals_are_recomputed(self, totals):
        payload = {
            "items": [
                {"product": {"id": "p1", "name": "W", "price": "10"}, "quantity": 2}
            ],
            "couponCode": COUPON,
            **totals,
        }
        store = FakeKeyValueStore({CART_STORAGE_KEY: json.dumps(payload).encode()})
        manager, _, _ = _setup(store=store)
        assert manager.cart.quantity_of("p1") == 2
        assert manager.cart.coupon_code == COUPON
        assert manager.cart.subtotal == Money.of("20")
        assert manager.cart.discount == Money.of("2")
        assert manager.cart.total == Money.of("18")

    def test_restore_runs_once(self):
        store = FakeKeyValueStore()
        manager, _, _ = _setup(store=store)
        manager.add_item(P1)
        store.data[CART_STORAGE_KEY] = b'{"items": []}'
        manager.restore()
        assert manager.cart.quantity_of("p1") == 1
