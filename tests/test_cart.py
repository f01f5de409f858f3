from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest
from kungfu import Ok, Error

from doorstep import cart as C
from doorstep import catalog as Cat
from doorstep.testing import InMemoryBackend


def messages(notices: list[C.Notice]) -> list[str]:
    return [n.message for n in notices]


# ═══════════════════════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


async def test_starts_uninitialized(store: C.CartStore):
    assert store.phase is C.CartPhase.UNINITIALIZED
    assert store.items == ()
    assert not store.syncing


async def test_identify_loads_server_cart(store, backend, gas_refill):
    backend.cart_rows.append(gas_refill.to_payload())
    await store.identify("user-1")
    assert store.phase is C.CartPhase.READY
    assert store.items == (gas_refill,)


async def test_sign_out_resets(store, backend, gas_refill):
    backend.cart_rows.append(gas_refill.to_payload())
    await store.identify("user-1")
    await store.identify(None)
    assert store.phase is C.CartPhase.UNINITIALIZED
    assert store.items == ()


async def test_loading_phase_while_fetching(store, backend):
    backend.latency = 0.02
    pending = asyncio.ensure_future(store.identify("user-1"))
    await asyncio.sleep(0.005)
    assert store.phase is C.CartPhase.LOADING
    assert store.syncing
    await pending
    assert store.phase is C.CartPhase.READY


async def test_concurrent_loads_share_one_fetch(store, backend):
    await store.identify("user-1")
    backend.calls.clear()
    backend.latency = 0.01
    first, second = await asyncio.gather(store.load(), store.load())
    assert first == second
    assert backend.count("cart") == 1


async def test_failed_load_keeps_items_silently(store, backend, notices, gas_refill):
    backend.cart_rows.append(gas_refill.to_payload())
    await store.identify("user-1")
    backend.fail_next("cart")
    match await store.load():
        case Error(e):
            assert e.kind is C.CartErrorKind.SERVER
        case Ok(_):
            pytest.fail("load should have failed")
    assert store.items == (gas_refill,)
    assert notices == []


async def test_failed_first_load_stays_uninitialized_until_retried(store, backend, gas_refill):
    backend.cart_rows.append(gas_refill.to_payload())
    backend.fail_next("cart")
    await store.identify("user-1")
    assert store.phase is C.CartPhase.UNINITIALIZED
    assert isinstance(await store.load(), Ok)
    assert store.phase is C.CartPhase.READY
    assert store.items == (gas_refill,)


async def test_load_result_after_sign_out_is_discarded(store, backend, gas_refill):
    backend.cart_rows.append(gas_refill.to_payload())
    await store.identify("user-1")
    backend.latency = 0.02
    pending = asyncio.ensure_future(store.load())
    await asyncio.sleep(0.005)
    await store.identify(None)
    await pending
    assert store.items == ()


async def test_malformed_server_lines_are_dropped(store, backend):
    backend.cart_rows.extend([
        {"name": "no id", "price": 10},
        {"subServiceId": "x-0", "name": "no price"},
    ])
    await store.identify("user-1")
    (line,) = store.items
    assert line.sub_service_id == "x-0"
    assert line.price == Decimal(0)
    assert line.service_id == "x"


# ═══════════════════════════════════════════════════════════════════════════════
# add()
# ═══════════════════════════════════════════════════════════════════════════════


async def test_add_requires_identity(store, backend, notices, gas_refill):
    match await store.add(gas_refill):
        case Error(e):
            assert e.kind is C.CartErrorKind.UNAUTHENTICATED
        case Ok(_):
            pytest.fail("anonymous add must fail")
    assert messages(notices) == ["Please login to add items to cart"]
    assert backend.count("add_to_cart") == 0


async def test_add_posts_then_reloads(store, backend, notices, gas_refill):
    await store.identify("user-1")
    backend.calls.clear()
    match await store.add(gas_refill):
        case Ok(items):
            assert items == (gas_refill,)
        case Error(e):
            pytest.fail(e.message)
    assert backend.calls == ["add_to_cart", "cart"]
    assert messages(notices) == ["Added to cart"]
    assert store.phase is C.CartPhase.READY


async def test_duplicate_add_is_a_noop_with_notice(store, backend, notices, gas_refill):
    await store.identify("user-1")
    await store.add(gas_refill)
    match await store.add(gas_refill):
        case Error(e):
            assert e.kind is C.CartErrorKind.DUPLICATE
        case Ok(_):
            pytest.fail("duplicate add must be rejected")
    assert len(store.items) == 1
    assert store.items[0].quantity == 1
    assert backend.count("add_to_cart") == 1
    assert notices[-1] == C.Notice(C.NoticeLevel.INFO, "Item is already in your cart")


async def test_overlapping_adds_are_rejected_while_syncing(store, backend, gas_refill, servicing):
    await store.identify("user-1")
    backend.latency = 0.01
    first, second = await asyncio.gather(store.add(gas_refill), store.add(servicing))
    assert isinstance(first, Ok)
    match second:
        case Error(e):
            assert e.kind is C.CartErrorKind.BUSY
        case Ok(_):
            pytest.fail("second add should be rejected")
    assert len(backend.cart_rows) == 1


async def test_line_is_kept_when_reload_after_add_fails(store, backend, notices, gas_refill):
    await store.identify("user-1")
    backend.fail_next("cart")
    match await store.add(gas_refill):
        case Ok(items):
            assert items == (gas_refill,)
        case Error(e):
            pytest.fail(e.message)
    assert store.contains(gas_refill.sub_service_id)
    assert messages(notices) == ["Added to cart"]

    match await store.add(gas_refill):
        case Error(e):
            assert e.kind is C.CartErrorKind.DUPLICATE
        case Ok(_):
            pytest.fail("second add must be rejected locally")
    assert backend.count("add_to_cart") == 1
    assert len(backend.cart_rows) == 1


async def test_hold_rejects_mutations(store, gas_refill):
    await store.identify("user-1")
    with store.hold():
        assert store.syncing
        match await store.add(gas_refill):
            case Error(e):
                assert e.kind is C.CartErrorKind.BUSY
            case Ok(_):
                pytest.fail("add must wait for the hold")
    assert not store.syncing


async def test_add_failure_surfaces_server_message(store, backend, notices, gas_refill):
    await store.identify("user-1")
    backend.fail_next("add_to_cart", "Service unavailable in your area")
    match await store.add(gas_refill):
        case Error(e):
            assert e.message == "Service unavailable in your area"
        case Ok(_):
            pytest.fail("add should fail")
    assert store.items == ()
    assert notices[-1] == C.Notice(C.NoticeLevel.ERROR, "Service unavailable in your area")


async def test_add_failure_without_server_message(store, backend, notices, gas_refill):
    await store.identify("user-1")
    backend.fail_next("add_to_cart")
    await store.add(gas_refill)
    assert messages(notices) == ["Failed to add to cart"]


async def test_from_catalog_line():
    (category,) = Cat.aggregate(
        Cat.parse_records([{"_id": "c-ac", "name": "Air Conditioner"}]),
        Cat.parse_documents([{"_id": "ac1", "category": "Air Conditioner", "subServices": [
            {"name": "AC Gas Refill", "price": 449, "actualPrice": 599},
        ]}]),
    )
    line = C.CartItem.from_catalog(category, category.items[0])
    assert line.sub_service_id == "ac1-0"
    assert line.service_id == "ac1"
    assert line.category == "Air Conditioner"
    assert line.to_payload()["price"] == 449


# ═══════════════════════════════════════════════════════════════════════════════
# remove()
# ═══════════════════════════════════════════════════════════════════════════════


async def test_remove(store, backend, notices, gas_refill, servicing):
    await store.identify("user-1")
    await store.add(gas_refill)
    await store.add(servicing)
    match await store.remove(gas_refill.sub_service_id):
        case Ok(items):
            assert [i.sub_service_id for i in items] == ["ac1-1"]
        case Error(e):
            pytest.fail(e.message)
    assert [r["subServiceId"] for r in backend.cart_rows] == ["ac1-1"]
    assert notices[-1].message == "Removed from cart"


async def test_failed_remove_reconciles_with_server(store, backend, notices, gas_refill, servicing):
    await store.identify("user-1")
    await store.add(gas_refill)
    await store.add(servicing)
    backend.fail_next("remove_from_cart")
    match await store.remove(gas_refill.sub_service_id):
        case Error(e):
            assert e.kind is C.CartErrorKind.SERVER
        case Ok(_):
            pytest.fail("remove should fail")
    assert [i.sub_service_id for i in store.items] == ["ac1-0", "ac1-1"]
    assert notices[-1] == C.Notice(C.NoticeLevel.ERROR, "Failed to remove item")


async def test_failed_remove_restores_line_when_reload_fails_too(store, backend, gas_refill, servicing):
    await store.identify("user-1")
    await store.add(gas_refill)
    await store.add(servicing)
    backend.fail_next("remove_from_cart")
    backend.fail_next("cart")
    await store.remove(gas_refill.sub_service_id)
    assert [i.sub_service_id for i in store.items] == ["ac1-0", "ac1-1"]


async def test_remove_unknown_line(store, gas_refill):
    await store.identify("user-1")
    match await store.remove("missing-0"):
        case Error(e):
            assert e.kind is C.CartErrorKind.NOT_IN_CART
        case Ok(_):
            pytest.fail("unknown line")


# ═══════════════════════════════════════════════════════════════════════════════
# Quantities
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("quantity", [0, -1])
async def test_quantity_floor(store, gas_refill, quantity):
    await store.identify("user-1")
    await store.add(gas_refill)
    match store.update_quantity(gas_refill.sub_service_id, quantity):
        case Error(e):
            assert e.kind is C.CartErrorKind.INVALID_QUANTITY
        case Ok(_):
            pytest.fail("quantity below 1 accepted")
    assert store.items[0].quantity == 1


async def test_quantity_is_local_and_survives_reload(store, backend, gas_refill, servicing):
    await store.identify("user-1")
    await store.add(gas_refill)
    backend.calls.clear()
    store.increment(gas_refill.sub_service_id)
    store.increment(gas_refill.sub_service_id)
    assert backend.calls == []
    assert store.get(gas_refill.sub_service_id).quantity == 3
    assert store.can_decrement(gas_refill.sub_service_id)

    await store.add(servicing)
    assert store.get(gas_refill.sub_service_id).quantity == 3
    assert store.count == 4
    assert store.totals.total == Decimal(449 * 3 + 499)


async def test_decrement_stops_at_one(store, gas_refill):
    await store.identify("user-1")
    await store.add(gas_refill)
    assert not store.can_decrement(gas_refill.sub_service_id)
    assert isinstance(store.decrement(gas_refill.sub_service_id), Error)
    assert store.items[0].quantity == 1


def test_update_unknown_line(store):
    match store.update_quantity("nope-0", 2):
        case Error(e):
            assert e.kind is C.CartErrorKind.NOT_IN_CART
        case Ok(_):
            pytest.fail("unknown line")


# ═══════════════════════════════════════════════════════════════════════════════
# clear()
# ═══════════════════════════════════════════════════════════════════════════════


async def test_clear(store, backend, gas_refill):
    await store.identify("user-1")
    await store.add(gas_refill)
    assert isinstance(await store.clear(), Ok)
    assert store.items == ()
    assert backend.cart_rows == []


async def test_failed_clear_keeps_items(store, backend, gas_refill):
    await store.identify("user-1")
    await store.add(gas_refill)
    backend.fail_next("clear_cart")
    assert isinstance(await store.clear(), Error)
    assert store.items == (gas_refill,)


async def test_totals(store, gas_refill, servicing):
    await store.identify("user-1")
    await store.add(gas_refill)
    await store.add(servicing)
    totals = store.totals
    assert totals.total == Decimal(948)
    assert totals.savings == Decimal(150)
