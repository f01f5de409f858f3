"""
Aggregation — category records + service documents into an ordered catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from doorstep.catalog._types import (
    CategoryRecord,
    ServiceDocument,
    CatalogItem,
    Category,
    to_catalog_item,
)
from doorstep.catalog._slug import slugify

logger = logging.getLogger(__name__)


def index_by_category(
    documents: Iterable[ServiceDocument],
) -> dict[str, list[ServiceDocument]]:
    """Group documents by category name; dict keeps encounter order."""
    index: dict[str, list[ServiceDocument]] = {}
    for doc in documents:
        index.setdefault(doc.category, []).append(doc)
    return index


def order_records(records: Iterable[CategoryRecord]) -> tuple[CategoryRecord, ...]:
    """Explicit display order first (stable), then unordered records in list order."""
    listed = list(records)
    ordered = sorted(
        (r for r in listed if r.order is not None),
        key=lambda r: r.order if r.order is not None else 0,
    )
    return (*ordered, *(r for r in listed if r.order is None))


def flatten(documents: Iterable[ServiceDocument]) -> tuple[CatalogItem, ...]:
    """Document order, then sub-service array order."""
    return tuple(
        to_catalog_item(doc, idx, sub)
        for doc in documents
        for idx, sub in doc.sub_services
    )


def first_image(documents: Iterable[ServiceDocument]) -> str:
    for doc in documents:
        for _, sub in doc.sub_services:
            if sub.image_url:
                return sub.image_url
    return ""


def aggregate(
    records: Iterable[CategoryRecord],
    documents: Iterable[ServiceDocument],
) -> tuple[Category, ...]:
    """
    Build the ordered catalog.

    Administrative categories come first, in display order, each with the
    flattened items of every document tagged with its name. Category names
    that only appear on documents are appended afterwards in encounter order,
    identified by their slug, so no purchasable item is dropped.
    """
    index = index_by_category(documents)
    categories: list[Category] = []
    seen: set[str] = set()

    for record in order_records(records):
        if record.name in seen:
            logger.warning("Duplicate category record %r (%s) ignored", record.name, record.id)
            continue
        seen.add(record.name)
        docs = index.get(record.name, [])
        categories.append(Category(
            id=record.id,
            slug=slugify(record.name),
            title=record.name,
            description=record.description,
            image_url=record.image_url or first_image(docs),
            items=flatten(docs),
        ))

    for name, docs in index.items():
        if name in seen:
            continue
        logger.warning("Services reference category %r with no category record", name)
        slug = slugify(name)
        categories.append(Category(
            id=slug,
            slug=slug,
            title=name,
            description=docs[0].description,
            image_url=first_image(docs),
            items=flatten(docs),
        ))

    return tuple(categories)


__all__ = ("index_by_category", "order_records", "flatten", "first_image", "aggregate")
