"""
CartStore — the client-side mirror of the server-held cart.

One store per storefront session, injected into whatever needs the cart.
Mutations go through the server and return Result values; user-facing
outcomes are published as Notices instead of raised.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from kungfu import Result, Ok, Error, LazyCoroResult

from doorstep import pricing as P
from doorstep import saga as S
from doorstep.api import ApiError, CartBackend
from doorstep.cart._types import (
    CartItem,
    CartPhase,
    CartError,
    CartErrorKind,
    Notice,
    NoticeLevel,
)

logger = logging.getLogger(__name__)

type NoticeSink = Callable[[Notice], None]
type Removed = tuple[int, CartItem]


class CartStore:
    """
    Cart state: items, phase and the syncing flag.

    Phases: UNINITIALIZED (no identity, or nothing loaded yet), LOADING
    (a server round-trip is in flight; `syncing` is true), READY.
    Destructive mutations attempted while syncing are rejected, not queued.

    Quantities are local: the server cart is replaced wholesale on every
    load, and local quantity choices are re-applied on top of it.

    Example:
        store = CartStore(client, notify=toasts.append)
        await store.identify(user_id)
        await store.add(CartItem.from_catalog(category, item))
        store.update_quantity(item.id, 2)
        store.totals.total
    """

    def __init__(self, backend: CartBackend, notify: NoticeSink | None = None) -> None:
        self._backend = backend
        self._notify = notify
        self._identity: str | None = None
        self._items: list[CartItem] = []
        self._quantities: dict[str, int] = {}
        self._loaded = False
        self._pending = 0
        self._generation = 0
        self._inflight: asyncio.Task[Result[tuple[CartItem, ...], CartError]] | None = None

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def phase(self) -> CartPhase:
        if self._identity is None:
            return CartPhase.UNINITIALIZED
        if self._pending:
            return CartPhase.LOADING
        return CartPhase.READY if self._loaded else CartPhase.UNINITIALIZED

    @property
    def syncing(self) -> bool:
        return self._pending > 0

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def totals(self) -> P.Totals:
        return P.summarize(self._items)

    @property
    def count(self) -> int:
        """Units across all lines, for the header badge."""
        return sum(i.quantity for i in self._items)

    @property
    def empty(self) -> bool:
        return not self._items

    def contains(self, sub_service_id: str) -> bool:
        return any(i.sub_service_id == sub_service_id for i in self._items)

    def get(self, sub_service_id: str) -> CartItem | None:
        return next((i for i in self._items if i.sub_service_id == sub_service_id), None)

    def can_decrement(self, sub_service_id: str) -> bool:
        line = self.get(sub_service_id)
        return line is not None and line.quantity > 1

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _publish(self, level: NoticeLevel, message: str) -> None:
        if self._notify is not None:
            self._notify(Notice(level, message))

    def _reject[T](
        self,
        kind: CartErrorKind,
        message: str,
        level: NoticeLevel = NoticeLevel.INFO,
    ) -> Result[T, CartError]:
        logger.debug("Cart operation rejected: %s", kind.name)
        self._publish(level, message)
        return Error(CartError(kind, message))

    @contextmanager
    def _round_trip(self) -> Iterator[None]:
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    def _apply(self, server_items: tuple[CartItem, ...]) -> None:
        present = {i.sub_service_id for i in server_items}
        self._quantities = {k: q for k, q in self._quantities.items() if k in present}
        self._items = [
            dataclasses.replace(i, quantity=self._quantities[i.sub_service_id])
            if i.sub_service_id in self._quantities else i
            for i in server_items
        ]
        self._loaded = True

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Mark the cart busy while a caller acts on a snapshot of it."""
        with self._round_trip():
            yield

    async def _fetch(self) -> Result[tuple[CartItem, ...], CartError]:
        generation = self._generation
        with self._round_trip():
            result = await self._backend.cart()

        if generation != self._generation:
            logger.debug("Cart fetch finished after identity change, discarding")
            return Error(CartError(CartErrorKind.UNAUTHENTICATED, "Identity changed"))

        match result:
            case Ok(rows):
                parsed = tuple(i for i in map(CartItem.from_payload, rows) if i is not None)
                self._apply(parsed)
                logger.debug("Cart loaded with %d line(s)", len(parsed))
                return Ok(self.items)
            case Error(e):
                logger.warning("Failed to fetch cart: %s", e.message)
                return Error(CartError(CartErrorKind.SERVER, e.user_message("Failed to load cart")))

    # ─────────────────────────────────────────────────────────────────────────
    # Identity
    # ─────────────────────────────────────────────────────────────────────────

    async def identify(self, identity: str | None) -> None:
        """Identity became known (load the cart) or went away (reset)."""
        if identity == self._identity:
            return

        self._generation += 1
        self._identity = identity
        self._items = []
        self._quantities = {}
        self._loaded = False
        self._inflight = None

        if identity is None:
            logger.debug("Signed out, cart reset")
            return
        await self.load()

    # ─────────────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────────────

    async def load(self) -> Result[tuple[CartItem, ...], CartError]:
        """Replace local items with the server cart; concurrent calls share one fetch."""
        if self._identity is None:
            return Error(CartError(CartErrorKind.UNAUTHENTICATED, "Please login to view your cart"))

        if self._inflight is not None:
            return await self._inflight

        task = asyncio.ensure_future(self._fetch())
        self._inflight = task
        try:
            return await task
        finally:
            if self._inflight is task:
                self._inflight = None

    async def add(self, item: CartItem) -> Result[tuple[CartItem, ...], CartError]:
        if self._identity is None:
            return self._reject(
                CartErrorKind.UNAUTHENTICATED,
                "Please login to add items to cart",
                NoticeLevel.ERROR,
            )
        if self.contains(item.sub_service_id):
            return self._reject(CartErrorKind.DUPLICATE, "Item is already in your cart")
        if self.syncing:
            return self._reject(CartErrorKind.BUSY, "Cart is updating, please wait")

        generation = self._generation
        with self._round_trip():
            posted = await self._backend.add_to_cart(item.to_payload())

        match posted:
            case Error(e):
                message = e.user_message("Failed to add to cart")
                self._publish(NoticeLevel.ERROR, message)
                return Error(CartError(CartErrorKind.SERVER, message))
            case Ok(_):
                pass

        if item.quantity > 1:
            self._quantities[item.sub_service_id] = item.quantity

        # the server decides the final shape of the line
        match await self._fetch():
            case Error(e) if generation == self._generation:
                logger.warning("Cart reload after add failed, keeping line locally: %s", e.message)
                if not self.contains(item.sub_service_id):
                    self._items.append(item)
            case _:
                pass

        self._publish(NoticeLevel.SUCCESS, "Added to cart")
        return Ok(self.items)

    def _drop_locally(self, sub_service_id: str) -> LazyCoroResult[Removed, ApiError]:
        async def drop() -> Result[Removed, ApiError]:
            index = next(i for i, line in enumerate(self._items) if line.sub_service_id == sub_service_id)
            line = self._items.pop(index)
            return Ok((index, line))

        return LazyCoroResult(drop)

    async def _reconcile(self, removed: Removed) -> None:
        """Undo an optimistic removal: trust the server, else put the line back."""
        match await self._fetch():
            case Ok(_):
                return
            case Error(_):
                index, line = removed
                if not self.contains(line.sub_service_id):
                    self._items.insert(min(index, len(self._items)), line)

    async def remove(self, sub_service_id: str) -> Result[tuple[CartItem, ...], CartError]:
        if self._identity is None:
            return self._reject(
                CartErrorKind.UNAUTHENTICATED,
                "Please login to manage your cart",
                NoticeLevel.ERROR,
            )
        if self.syncing:
            return self._reject(CartErrorKind.BUSY, "Cart is updating, please wait")
        if not self.contains(sub_service_id):
            return self._reject(CartErrorKind.NOT_IN_CART, "Item is not in your cart")

        optimistic = S.step(
            self._drop_locally(sub_service_id),
            compensate=self._reconcile,
        ).then(lambda removed: S.step(
            self._backend.remove_from_cart(removed[1].sub_service_id),
        ))

        with self._round_trip():
            outcome = await S.run_chain(optimistic)

        match outcome:
            case Ok(_):
                self._quantities.pop(sub_service_id, None)
                self._publish(NoticeLevel.SUCCESS, "Removed from cart")
                return Ok(self.items)
            case Error(e):
                logger.warning(
                    "Remove of %s failed (rollback complete: %s)",
                    sub_service_id, e.rollback_complete,
                )
                self._publish(NoticeLevel.ERROR, "Failed to remove item")
                return Error(CartError(CartErrorKind.SERVER, "Failed to remove item"))

    def update_quantity(self, sub_service_id: str, quantity: int) -> Result[CartItem, CartError]:
        """Local only; the quantity floor is 1."""
        if quantity < 1:
            return self._reject(CartErrorKind.INVALID_QUANTITY, "Quantity cannot be less than 1")
        for index, line in enumerate(self._items):
            if line.sub_service_id == sub_service_id:
                updated = dataclasses.replace(line, quantity=quantity)
                self._items[index] = updated
                self._quantities[sub_service_id] = quantity
                return Ok(updated)
        return self._reject(CartErrorKind.NOT_IN_CART, "Item is not in your cart")

    def increment(self, sub_service_id: str) -> Result[CartItem, CartError]:
        line = self.get(sub_service_id)
        if line is None:
            return self._reject(CartErrorKind.NOT_IN_CART, "Item is not in your cart")
        return self.update_quantity(sub_service_id, line.quantity + 1)

    def decrement(self, sub_service_id: str) -> Result[CartItem, CartError]:
        line = self.get(sub_service_id)
        if line is None:
            return self._reject(CartErrorKind.NOT_IN_CART, "Item is not in your cart")
        return self.update_quantity(sub_service_id, line.quantity - 1)

    async def clear(self) -> Result[None, CartError]:
        """Delete the server cart, then reset locally. Items survive a failure."""
        if self._identity is None:
            return Error(CartError(CartErrorKind.UNAUTHENTICATED, "Please login to manage your cart"))
        if self.syncing:
            return Error(CartError(CartErrorKind.BUSY, "Cart is updating, please wait"))

        with self._round_trip():
            result = await self._backend.clear_cart()

        match result:
            case Ok(_):
                self._items = []
                self._quantities = {}
                return Ok(None)
            case Error(e):
                logger.error("Failed to clear cart: %s", e.message)
                return Error(CartError(CartErrorKind.SERVER, e.user_message("Failed to clear cart")))


__all__ = ("CartStore", "NoticeSink")
