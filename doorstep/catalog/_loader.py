"""
Catalog loading — fetch both sources, degrade on partial failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from combinators import parallel as C_parallel
from kungfu import Option, Some, Nothing, Ok, Error, Result, LazyCoroResult

from doorstep import lift as L
from doorstep._types import Json
from doorstep.api import ApiError, CatalogBackend, to_api_error
from doorstep.catalog._types import (
    CategoryRecord,
    ServiceDocument,
    Category,
    parse_category_record,
    parse_service_document,
)
from doorstep.catalog._aggregate import aggregate, flatten, first_image
from doorstep.catalog._catalog import Catalog, CategoryPage
from doorstep.catalog._slug import resolve_slug

logger = logging.getLogger(__name__)


def parse_records(rows: Iterable[Json]) -> tuple[CategoryRecord, ...]:
    return tuple(r for r in map(parse_category_record, rows) if r is not None)


def parse_documents(rows: Iterable[Json]) -> tuple[ServiceDocument, ...]:
    return tuple(d for d in map(parse_service_document, rows) if d is not None)


def _settled[T](
    call: LazyCoroResult[T, ApiError],
    operation: str,
) -> LazyCoroResult[Result[T, ApiError], ApiError]:
    """Make the call's own Result the value, so one failed source cannot sink the other."""
    return L.catching_async(call, on_error=lambda e: to_api_error(e, operation))


class CatalogLoader:
    """
    Loads the catalog for one page.

    Each load captures a generation number; abandon() bumps it, so a load
    that completes after the page went away returns Nothing instead of a
    catalog for an unmounted view.

    Example:
        loader = CatalogLoader(client)
        match await loader.load():
            case Some(catalog):
                render(catalog.categories)
            case _:
                pass  # superseded
    """

    def __init__(self, backend: CatalogBackend) -> None:
        self._backend = backend
        self._generation = 0
        self._records: tuple[CategoryRecord, ...] = ()
        self._names: tuple[str, ...] = ()

    def abandon(self) -> None:
        """Discard the results of every load currently in flight."""
        self._generation += 1

    async def load(self) -> Option[Catalog]:
        generation = self._generation
        fetched = await C_parallel(
            _settled(self._backend.categories(), "categories"),
            _settled(self._backend.services(), "services"),
        )
        match fetched:
            case Ok([categories_result, services_result]):
                pass
            case Error(e):
                categories_result = services_result = Error(e)

        if generation != self._generation:
            logger.debug("Catalog load superseded, discarding result")
            return Nothing()

        degraded = False
        match categories_result:
            case Ok(rows):
                records = parse_records(rows)
                self._records = records
            case Error(e):
                logger.warning("Category records unavailable, using service names only: %s", e.message)
                records = ()
                degraded = True

        match services_result:
            case Ok(rows):
                documents = parse_documents(rows)
                self._names = tuple(dict.fromkeys(d.category for d in documents))
            case Error(e):
                logger.warning("Service documents unavailable, categories will be empty: %s", e.message)
                documents = ()
                degraded = True

        return Some(Catalog(
            categories=aggregate(records, documents),
            records=records,
            degraded=degraded,
        ))

    async def load_category(self, segment: str) -> Option[CategoryPage]:
        """Category-detail route: resolve the slug, fetch that category's services."""
        generation = self._generation

        records = self._records
        if not records:
            match await self._backend.categories():
                case Ok(rows):
                    records = parse_records(rows)
                    self._records = records
                case Error(e):
                    logger.info("Resolving %r without category records: %s", segment, e.message)

        ref = resolve_slug(segment, records, self._names)
        result = await self._backend.services_in_category(ref.name)
        if generation != self._generation:
            logger.debug("Category load for %r superseded, discarding result", segment)
            return Nothing()

        degraded = False
        match result:
            case Ok(rows):
                documents = parse_documents(rows)
            case Error(e):
                logger.warning("Services for %r unavailable: %s", ref.name, e.message)
                documents = ()
                degraded = True

        record = next((r for r in records if r.id == ref.category_id), None)
        category = Category(
            id=ref.category_id or ref.slug,
            slug=ref.slug,
            title=documents[0].category if documents else ref.name,
            description=(record.description if record else "")
            or (documents[0].description if documents else ""),
            image_url=(record.image_url if record else "")
            or (documents[0].image_url if documents else "")
            or first_image(documents),
            items=flatten(documents),
        )
        if not category.items:
            logger.info("Category %r resolved to no items", segment)
        return Some(CategoryPage(ref=ref, category=category, degraded=degraded))


__all__ = ("CatalogLoader", "parse_records", "parse_documents")
