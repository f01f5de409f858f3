"""
Catalog snapshot — what a page renders, plus deep-link lookups.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from kungfu import Option, Some, Nothing

from doorstep.catalog._types import (
    CategoryRecord,
    Category,
    CatalogItem,
    CategoryRef,
)
from doorstep.catalog._slug import resolve_slug


def find_item(items: Iterable[CatalogItem], item_id: str) -> Option[CatalogItem]:
    """
    Exact `{service_id}-{index}` match, else the first sub-service of a
    service document addressed by its bare id.
    """
    listed = tuple(items)
    key = item_id.strip()
    for item in listed:
        if item.id == key:
            return Some(item)
    for item in listed:
        if item.service_id == key:
            return Some(item)
    return Nothing()


@dataclass(frozen=True, slots=True)
class Catalog:
    """
    Ordered categories from one fetch.

    degraded is set when one of the two sources failed and the catalog was
    built from whatever arrived.
    """

    categories: tuple[Category, ...]
    records: tuple[CategoryRecord, ...] = ()
    degraded: bool = False

    @property
    def empty(self) -> bool:
        return not self.categories

    def category(self, segment: str) -> Option[Category]:
        key = segment.strip()
        for cat in self.categories:
            if cat.id == key or cat.slug == key.lower():
                return Some(cat)
        ref = resolve_slug(key, self.records)
        for cat in self.categories:
            if cat.title == ref.name:
                return Some(cat)
        return Nothing()

    def item(self, segment: str, item_id: str) -> Option[tuple[Category, CatalogItem]]:
        match self.category(segment):
            case Some(cat):
                match find_item(cat.items, item_id):
                    case Some(item):
                        return Some((cat, item))
                    case _:
                        return Nothing()
            case _:
                return Nothing()


@dataclass(frozen=True, slots=True)
class CategoryPage:
    """Category-detail route result; `found` is false for the not-found state."""

    ref: CategoryRef
    category: Category
    degraded: bool = False

    @property
    def found(self) -> bool:
        return bool(self.category.items)


__all__ = ("Catalog", "CategoryPage", "find_item")
