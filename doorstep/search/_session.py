"""
Debounced search — only the latest query's results are ever applied.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass

from kungfu import Ok, Error

from doorstep._types import Json
from doorstep.api import SearchBackend
from doorstep.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.3


def _rows(data: Json, key: str) -> tuple[Json, ...]:
    value = data.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(row for row in value if isinstance(row, dict))


@dataclass(frozen=True, slots=True)
class SearchResults:
    categories: tuple[Json, ...] = ()
    services: tuple[Json, ...] = ()
    sub_services: tuple[Json, ...] = ()

    @classmethod
    def from_payload(cls, data: Json) -> SearchResults:
        return cls(
            categories=_rows(data, "categories"),
            services=_rows(data, "services"),
            sub_services=_rows(data, "subServices"),
        )

    @property
    def empty(self) -> bool:
        return not (self.categories or self.services or self.sub_services)


class SearchSession:
    """
    Search-as-you-type state for one search box.

    Every update() restarts the debounce window. A result is applied only if
    its query is still the latest one; a failed search shows no results.

    Example:
        session = SearchSession(client)
        session.update("wash")
        session.update("washing")
        await session.settle()
        session.results.services
    """

    def __init__(self, backend: SearchBackend, debounce: float = DEFAULT_DEBOUNCE) -> None:
        self._backend = backend
        self._debounce = debounce
        self._query = ""
        self._results: SearchResults | None = None
        self._generation = 0
        self._pending: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, backend: SearchBackend, settings: Settings) -> SearchSession:
        return cls(backend, debounce=settings.search_debounce)

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> SearchResults | None:
        """None until a search for the current query has finished."""
        return self._results

    @property
    def loading(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def update(self, query: str) -> None:
        self._generation += 1
        self._query = query
        self._cancel_pending()

        if not query.strip():
            self._results = None
            return

        self._pending = asyncio.get_running_loop().create_task(
            self._search(query, self._generation),
        )

    async def _search(self, query: str, generation: int) -> None:
        await asyncio.sleep(self._debounce)
        match await self._backend.search(query.strip()):
            case Ok(data):
                results = SearchResults.from_payload(data)
            case Error(e):
                logger.warning("Search for %r failed: %s", query, e.message)
                results = SearchResults()

        if generation != self._generation:
            logger.debug("Discarding late results for %r", query)
            return
        self._results = results

    async def settle(self) -> None:
        """Wait for the pending search, if any, to apply or be discarded."""
        task = self._pending
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def close(self) -> None:
        self._generation += 1
        self._cancel_pending()


__all__ = ("SearchResults", "SearchSession", "DEFAULT_DEBOUNCE")
