"""
In-memory storefront backend.

Implements every backend protocol against plain lists so the catalog, cart,
checkout and search components can run without a server. Failures are
injected per operation name (the method name, e.g. "submit_enquiry").
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from kungfu import Result, Ok, Error, LazyCoroResult

from doorstep._types import Json
from doorstep.api import ApiError, ApiErrorKind


def server_error(message: str | None = None, status: int = 500) -> ApiError:
    return ApiError(
        kind=ApiErrorKind.STATUS,
        message=f"HTTP {status}",
        status=status,
        server_message=message,
    )


@dataclass(slots=True)
class InMemoryBackend:
    """
    Fake backend with a call log.

    Example:
        backend = InMemoryBackend(services=[{"_id": "s1", "category": "AC", ...}])
        backend.fail_next("submit_enquiry", "Pincode not serviceable")
        store = CartStore(backend)
    """

    categories_rows: list[Json] = field(default_factory=list)
    services_rows: list[Json] = field(default_factory=list)
    cart_rows: list[Json] = field(default_factory=list)
    profile_row: Json = field(default_factory=dict)
    enquiries: list[Json] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    latency: float = 0.0
    _once: dict[str, list[ApiError]] = field(default_factory=dict)
    _always: dict[str, ApiError] = field(default_factory=dict)

    # ─────────────────────────────────────────────────────────────────────────
    # Failure injection
    # ─────────────────────────────────────────────────────────────────────────

    def fail_next(self, operation: str, message: str | None = None, status: int = 500) -> None:
        """The next call of `operation` fails; later calls succeed again."""
        self._once.setdefault(operation, []).append(server_error(message, status))

    def fail(self, operation: str, message: str | None = None, status: int = 500) -> None:
        """Every call of `operation` fails until heal()."""
        self._always[operation] = server_error(message, status)

    def heal(self, operation: str | None = None) -> None:
        if operation is None:
            self._once.clear()
            self._always.clear()
            return
        self._once.pop(operation, None)
        self._always.pop(operation, None)

    def count(self, operation: str) -> int:
        return self.calls.count(operation)

    def _injected(self, operation: str) -> ApiError | None:
        queued = self._once.get(operation)
        if queued:
            return queued.pop(0)
        return self._always.get(operation)

    def _op[T](self, operation: str, body: Callable[[], T]) -> LazyCoroResult[T, ApiError]:
        async def run() -> Result[T, ApiError]:
            self.calls.append(operation)
            if self.latency:
                await asyncio.sleep(self.latency)
            else:
                await asyncio.sleep(0)
            if (error := self._injected(operation)) is not None:
                return Error(error)
            return body()

        return LazyCoroResult(run)

    # ─────────────────────────────────────────────────────────────────────────
    # Catalog
    # ─────────────────────────────────────────────────────────────────────────

    def categories(self) -> LazyCoroResult[list[Json], ApiError]:
        return self._op("categories", lambda: Ok(copy.deepcopy(self.categories_rows)))

    def services(self) -> LazyCoroResult[list[Json], ApiError]:
        return self._op("services", lambda: Ok(copy.deepcopy(self.services_rows)))

    def services_in_category(self, name: str) -> LazyCoroResult[list[Json], ApiError]:
        wanted = name.casefold()
        return self._op("services_in_category", lambda: Ok([
            copy.deepcopy(row)
            for row in self.services_rows
            if str(row.get("category", "")).casefold() == wanted
        ]))

    # ─────────────────────────────────────────────────────────────────────────
    # Cart
    # ─────────────────────────────────────────────────────────────────────────

    def cart(self) -> LazyCoroResult[list[Json], ApiError]:
        return self._op("cart", lambda: Ok(copy.deepcopy(self.cart_rows)))

    def add_to_cart(self, item: Json) -> LazyCoroResult[Json, ApiError]:
        def add() -> Result[Json, ApiError]:
            row = copy.deepcopy(item)
            if any(r.get("subServiceId") == row.get("subServiceId") for r in self.cart_rows):
                return Error(server_error("Item already in cart", 400))
            # the server keeps one unit per line
            row["quantity"] = 1
            self.cart_rows.append(row)
            return Ok({"items": copy.deepcopy(self.cart_rows)})

        return self._op("add_to_cart", add)

    def remove_from_cart(self, sub_service_id: str) -> LazyCoroResult[None, ApiError]:
        def remove() -> Result[None, ApiError]:
            before = len(self.cart_rows)
            self.cart_rows[:] = [r for r in self.cart_rows if r.get("subServiceId") != sub_service_id]
            if len(self.cart_rows) == before:
                return Error(server_error("Item not found in cart", 404))
            return Ok(None)

        return self._op("remove_from_cart", remove)

    def clear_cart(self) -> LazyCoroResult[None, ApiError]:
        def clear() -> Result[None, ApiError]:
            self.cart_rows.clear()
            return Ok(None)

        return self._op("clear_cart", clear)

    # ─────────────────────────────────────────────────────────────────────────
    # Customer
    # ─────────────────────────────────────────────────────────────────────────

    def submit_enquiry(self, payload: Json) -> LazyCoroResult[Json, ApiError]:
        def submit() -> Result[Json, ApiError]:
            stored = {"_id": f"enq-{len(self.enquiries) + 1}", **copy.deepcopy(payload)}
            self.enquiries.append(stored)
            return Ok({"message": "Enquiry created", "enquiry": stored})

        return self._op("submit_enquiry", submit)

    def profile(self) -> LazyCoroResult[Json, ApiError]:
        return self._op("profile", lambda: Ok(copy.deepcopy(self.profile_row)))

    # ─────────────────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────────────────

    def search(self, query: str) -> LazyCoroResult[Json, ApiError]:
        needle = query.casefold()

        def hits(rows: list[Json], key: str) -> list[Json]:
            return [copy.deepcopy(r) for r in rows if needle in str(r.get(key, "")).casefold()]

        def find() -> Result[Json, ApiError]:
            subs: list[Any] = [
                {"serviceId": doc.get("_id"), "category": doc.get("category"), **sub}
                for doc in self.services_rows
                for sub in doc.get("subServices") or []
                if isinstance(sub, dict) and needle in str(sub.get("name", "")).casefold()
            ]
            return Ok({
                "categories": hits(self.categories_rows, "name"),
                "services": hits(self.services_rows, "category"),
                "subServices": subs,
            })

        return self._op("search", find)


__all__ = ("InMemoryBackend", "server_error")
