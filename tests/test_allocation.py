"""Tests for box capacity accounting and the BoxStore.

Covers the capacity engine, every store mutation, the capacity
invariant under random operation sequences, and the per-box locks.
"""

from __future__ import annotations

import random
import threading

import pytest
from pydantic import ValidationError

from switchbox.allocation import capacity
from switchbox.allocation.locking import BoxLockRegistry
from switchbox.allocation.store import BoxStore
from switchbox.exceptions import BoxNotFoundError, IncompatibleProductError
from switchbox.models.box import Box, BoxProductLine
from switchbox.models.product import Product


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _product(sku: str, module_size: int | None = 1, price: float = 10.0, **attrs) -> Product:
    attributes = dict(attrs)
    if module_size is not None:
        attributes["moduleSize"] = module_size
    return Product(sku=sku, name=f"Product {sku}", regular_price=price, attributes=attributes)


def _make_store_with_box(capacity_: int = 4, box_type: str = "Rectangular Box", **kw) -> tuple[BoxStore, Box]:
    store = BoxStore(**kw)
    box = store.create_box(name="Hall", area="Entrance", box_type=box_type, module_capacity=capacity_)
    return store, box


# ---------------------------------------------------------------------------
# Capacity engine
# ---------------------------------------------------------------------------


class TestCapacityEngine:
    def test_empty_box(self):
        box = Box(name="B", area="A", box_type="Rectangular Box", module_capacity=4)
        assert capacity.used_modules(box) == 0
        assert capacity.remaining_modules(box) == 4

    def test_used_modules_sums_size_times_quantity(self):
        box = Box(
            name="B", area="A", box_type="Rectangular Box", module_capacity=6,
            products=[
                BoxProductLine(product=_product("S1", 2), quantity=2),
                BoxProductLine(product=_product("S2", 1), quantity=1),
            ],
        )
        assert capacity.used_modules(box) == 5
        assert capacity.remaining_modules(box) == 1

    def test_can_add(self):
        box = Box(name="B", area="A", box_type="Rectangular Box", module_capacity=3)
        assert capacity.can_add(box, _product("S1", 1), 3)
        assert not capacity.can_add(box, _product("S1", 1), 4)
        assert not capacity.can_add(box, _product("S2", 2), 2)

    def test_missing_module_size_is_hard_error(self):
        box = Box(name="B", area="A", box_type="55 Box", module_capacity=2)
        with pytest.raises(IncompatibleProductError):
            capacity.can_add(box, _product("CBL", None), 1)

    def test_quantity_delta(self):
        line = BoxProductLine(product=_product("S1", 2), quantity=1)
        assert capacity.quantity_delta(line, 3) == 4
        assert capacity.quantity_delta(line, 0) == -2

    def test_capacity_message(self):
        box = Box(name="B", area="A", box_type="55 Box", module_capacity=2)
        assert capacity.capacity_message(box) == "Not enough module space. Only 2 modules available."


# ---------------------------------------------------------------------------
# Box lifecycle
# ---------------------------------------------------------------------------


class TestBoxLifecycle:
    def test_create_box(self):
        store, box = _make_store_with_box()
        assert store.get_box(box.id) is box
        assert box.products == []
        assert len(store) == 1

    def test_creation_order_preserved(self):
        store = BoxStore()
        ids = [
            store.create_box(name=f"B{i}", area="A", box_type="55 Box", module_capacity=1).id
            for i in range(5)
        ]
        assert [b.id for b in store.boxes] == ids

    def test_create_rejects_mismatched_capacity(self):
        store = BoxStore()
        with pytest.raises(ValidationError):
            store.create_box(name="B", area="A", box_type="55 Box", module_capacity=4)
        assert len(store) == 0

    def test_create_ignores_supplied_products(self):
        store = BoxStore()
        box = store.create_box({
            "name": "B", "area": "A", "boxType": "55 Box", "moduleCapacity": 2,
            "products": [{"product": {"sku": "S1"}, "quantity": 9}],
        })
        assert box.products == []

    def test_update_box_merges_fields(self):
        store, box = _make_store_with_box()
        store.add_product(box.id, _product("S1", 1), 2)
        updated = store.update_box(box.id, name="Hallway", color="White")
        assert updated is box
        assert box.name == "Hallway"
        assert box.color == "White"
        assert box.area == "Entrance"
        assert box.find_line("S1").quantity == 2

    def test_update_box_accepts_aliases(self):
        store, box = _make_store_with_box(capacity_=2)
        store.update_box(box.id, boxType="55 Box", moduleCapacity=1)
        assert box.box_type.value == "55 Box"
        assert box.module_capacity == 1

    def test_update_box_invalid_pair_leaves_box_unchanged(self):
        store, box = _make_store_with_box(capacity_=6)
        with pytest.raises(ValidationError):
            store.update_box(box.id, box_type="55 Box")
        assert box.box_type.value == "Rectangular Box"
        assert box.module_capacity == 6

    def test_update_box_refuses_capacity_below_usage(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 1), 3)
        assert store.update_box(box.id, module_capacity=2) is None
        assert box.module_capacity == 4
        assert store.update_box(box.id, module_capacity=3) is box

    def test_update_unknown_box(self):
        store = BoxStore()
        assert store.update_box("missing", name="X") is None

    def test_delete_box(self):
        store, box = _make_store_with_box()
        store.add_product(box.id, _product("S1"), 1)
        assert store.delete_box(box.id) is True
        assert store.get_box(box.id) is None
        assert len(store) == 0

    def test_delete_is_idempotent(self):
        store, box = _make_store_with_box()
        assert store.delete_box(box.id) is True
        assert store.delete_box(box.id) is False
        assert store.delete_box("never-existed") is False

    def test_empty_box_persists(self):
        store, box = _make_store_with_box()
        store.add_product(box.id, _product("S1"), 1)
        store.remove_product(box.id, "S1")
        assert store.get_box(box.id) is box
        assert box.is_empty


# ---------------------------------------------------------------------------
# Product lines
# ---------------------------------------------------------------------------


class TestAddProduct:
    def test_scenario_a_merge_and_fill(self):
        store, box = _make_store_with_box(capacity_=4)
        s1 = _product("S1", 2)

        assert store.add_product(box.id, s1, 1)
        assert store.used_modules(box.id) == 2
        assert store.remaining_modules(box.id) == 2

        assert store.add_product(box.id, s1, 1)
        assert len(box.products) == 1
        assert box.products[0].quantity == 2
        assert store.used_modules(box.id) == 4
        assert store.remaining_modules(box.id) == 0

        before = box.model_dump()
        assert not store.add_product(box.id, _product("S3", 1), 1)
        assert not store.add_product(box.id, s1, 1)
        assert box.model_dump() == before

    def test_scenario_b_rejects_oversized_quantity(self):
        store, box = _make_store_with_box(capacity_=3)
        assert not store.add_product(box.id, _product("S2", 1), 5)
        assert box.is_empty
        assert store.used_modules(box.id) == 0

    def test_merge_on_re_add(self):
        store, box = _make_store_with_box(capacity_=6)
        p = _product("S1", 1)
        store.add_product(box.id, p, 2)
        store.add_product(box.id, p, 3)
        assert [(l.sku, l.quantity) for l in box.products] == [("S1", 5)]

    def test_re_add_checks_only_added_amount(self):
        store, box = _make_store_with_box(capacity_=3)
        p = _product("S1", 1)
        store.add_product(box.id, p, 2)
        assert store.add_product(box.id, p, 1)
        assert box.products[0].quantity == 3

    def test_lines_keep_insertion_order(self):
        store, box = _make_store_with_box(capacity_=6)
        for sku in ("C", "A", "B"):
            store.add_product(box.id, _product(sku), 1)
        store.add_product(box.id, _product("A"), 1)
        assert [l.sku for l in box.products] == ["C", "A", "B"]

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity_rejected(self, qty):
        store, box = _make_store_with_box()
        assert not store.add_product(box.id, _product("S1"), qty)
        assert box.is_empty

    def test_unknown_box_is_no_op(self):
        store = BoxStore()
        assert store.add_product("missing", _product("S1"), 1) is False

    def test_product_without_module_size_raises(self):
        store, box = _make_store_with_box()
        with pytest.raises(IncompatibleProductError):
            store.add_product(box.id, _product("CBL", None), 1)
        assert box.is_empty


class TestUpdateProductQuantity:
    def test_increase_within_capacity(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 1), 1)
        assert store.update_product_quantity(box.id, "S1", 4)
        assert store.remaining_modules(box.id) == 0

    def test_increase_checks_delta_only(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 2), 1)
        # delta of 2 modules fits the 2 free modules
        assert store.update_product_quantity(box.id, "S1", 2)
        assert not store.update_product_quantity(box.id, "S1", 3)
        assert box.find_line("S1").quantity == 2

    def test_decrease_always_succeeds(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 1), 4)
        assert store.update_product_quantity(box.id, "S1", 1)
        assert store.remaining_modules(box.id) == 3

    def test_scenario_d_zero_removes_line(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 2), 2)
        assert store.update_product_quantity(box.id, "S1", 0)
        assert box.find_line("S1") is None
        assert store.remaining_modules(box.id) == 4

    def test_negative_quantity_rejected(self):
        store, box = _make_store_with_box()
        store.add_product(box.id, _product("S1"), 1)
        assert not store.update_product_quantity(box.id, "S1", -2)
        assert box.find_line("S1").quantity == 1

    def test_unknown_sku(self):
        store, box = _make_store_with_box()
        assert not store.update_product_quantity(box.id, "nope", 1)

    def test_unknown_box(self):
        assert not BoxStore().update_product_quantity("missing", "S1", 1)


class TestRemoveProduct:
    def test_remove_reclaims_modules(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 2), 2)
        assert store.remove_product(box.id, "S1")
        assert store.remaining_modules(box.id) == 4

    def test_remove_twice_is_no_op(self):
        store, box = _make_store_with_box(capacity_=4)
        store.add_product(box.id, _product("S1", 1), 1)
        store.add_product(box.id, _product("S2", 1), 1)
        store.remove_product(box.id, "S1")
        after_first = box.model_dump()
        assert store.remove_product(box.id, "S1") is False
        assert box.model_dump() == after_first

    def test_remove_from_unknown_box(self):
        assert BoxStore().remove_product("missing", "S1") is False


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


class TestInvariants:
    def test_capacity_never_exceeded(self):
        rng = random.Random(42)
        store = BoxStore()
        boxes = [
            store.create_box(name="R", area="A", box_type="Rectangular Box", module_capacity=c)
            for c in (1, 3, 6)
        ] + [store.create_box(name="F", area="A", box_type="55 Box", module_capacity=2)]
        products = [_product(f"S{i}", size) for i, size in enumerate((1, 1, 2, 3))]

        for _ in range(500):
            box = rng.choice(boxes)
            product = rng.choice(products)
            if rng.random() < 0.6:
                store.add_product(box.id, product, rng.randint(1, 4))
            else:
                store.update_product_quantity(box.id, product.sku, rng.randint(0, 5))

            for b in boxes:
                used = store.used_modules(b.id)
                assert used <= b.module_capacity
                assert store.remaining_modules(b.id) == b.module_capacity - used
                skus = [l.sku for l in b.products]
                assert len(skus) == len(set(skus))
                assert all(l.quantity >= 1 for l in b.products)


# ---------------------------------------------------------------------------
# Strict mode
# ---------------------------------------------------------------------------


class TestStrictStore:
    def test_unknown_box_raises(self):
        store = BoxStore(strict=True)
        with pytest.raises(BoxNotFoundError):
            store.add_product("missing", _product("S1"), 1)
        with pytest.raises(BoxNotFoundError):
            store.update_box("missing", name="X")
        with pytest.raises(BoxNotFoundError):
            store.remaining_modules("missing")

    def test_delete_stays_idempotent(self):
        store = BoxStore(strict=True)
        assert store.delete_box("missing") is False

    def test_known_box_still_works(self):
        store, box = _make_store_with_box(strict=True)
        assert store.add_product(box.id, _product("S1"), 1)


# ---------------------------------------------------------------------------
# Locking
# ---------------------------------------------------------------------------


class TestBoxLocks:
    def test_same_lock_per_box(self):
        registry = BoxLockRegistry()
        assert registry.lock_for("a") is registry.lock_for("a")
        assert registry.lock_for("a") is not registry.lock_for("b")

    def test_discard(self):
        registry = BoxLockRegistry()
        registry.lock_for("a")
        registry.discard("a")
        assert "a" not in registry

    def test_concurrent_adds_respect_capacity(self):
        store, box = _make_store_with_box(capacity_=6)
        product = _product("S1", 1)
        results: list[bool] = []

        def worker() -> None:
            for _ in range(10):
                results.append(store.add_product(box.id, product, 1))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(results) == 6
        assert store.used_modules(box.id) == 6

    @pytest.mark.parametrize("mutate, expected", [
        (lambda store, box_id, p: store.add_product(box_id, p, 1), False),
        (lambda store, box_id, p: store.update_product_quantity(box_id, p.sku, 2), False),
        (lambda store, box_id, p: store.remove_product(box_id, p.sku), False),
        (lambda store, box_id, p: store.update_box(box_id, name="Renamed"), None),
    ])
    def test_mutation_racing_delete_changes_nothing(self, mutate, expected):
        store, box = _make_store_with_box(capacity_=4)
        product = _product("S1", 1)
        assert store.add_product(box.id, product, 1)

        looked_up = threading.Event()
        find = store._find

        def find_then_signal(box_id):
            found = find(box_id)
            looked_up.set()
            return found

        store._find = find_then_signal
        result: dict = {}

        def worker() -> None:
            result["value"] = mutate(store, box.id, product)

        with store._locks.hold(box.id):
            thread = threading.Thread(target=worker)
            thread.start()
            assert looked_up.wait(timeout=5)
            assert store.delete_box(box.id)
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert result["value"] is expected
        assert box.id not in store
        assert [line.quantity for line in box.products] == [1]
        assert box.name != "Renamed"
