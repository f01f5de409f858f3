"""
Catalog types and the parsing boundary.

Backend records arrive loosely shaped: optional fields come and go, ids live
under `_id` or `id`, prices may be numbers or strings. Everything is parsed
here into fully specified frozen dataclasses so nothing downstream has to ask
whether a field is present.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto

from doorstep._types import Json, to_money

logger = logging.getLogger(__name__)

ZERO = Decimal(0)

# ═══════════════════════════════════════════════════════════════════════════════
# Raw Records
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CategoryRecord:
    """Administrative category, as maintained out-of-band."""
    id: str
    name: str
    description: str
    image_url: str
    order: int | None


@dataclass(frozen=True, slots=True)
class SubService:
    name: str
    description: str
    price: Decimal
    actual_price: Decimal | None
    image_url: str
    issues_resolved: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ServiceDocument:
    """
    Backend grouping of sub-services under a category name.

    sub_services keeps (index, SubService) pairs: the index is the position
    in the backend array, so malformed entries that were skipped do not
    shift the ids of their siblings.
    """
    id: str
    category: str
    description: str
    image_url: str
    sub_services: tuple[tuple[int, SubService], ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """A purchasable unit; id is `{service_id}-{index}`."""
    id: str
    service_id: str
    index: int
    name: str
    description: str
    price: Decimal
    actual_price: Decimal | None
    image_url: str
    issues_resolved: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    slug: str
    title: str
    description: str
    image_url: str
    items: tuple[CatalogItem, ...]


class SlugSource(Enum):
    """Which resolver tier matched a path segment."""
    ADMIN = auto()
    SERVICE = auto()
    LEGACY = auto()
    TITLE_CASE = auto()


@dataclass(frozen=True, slots=True)
class CategoryRef:
    """Canonical identity a path segment resolved to."""
    slug: str
    name: str
    source: SlugSource
    category_id: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def _text(raw: Json, *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
    return ""


def _order(raw: Json) -> int | None:
    for key in ("order", "displayOrder", "sortOrder"):
        value = raw.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def parse_category_record(raw: Json) -> CategoryRecord | None:
    name = _text(raw, "name", "title")
    if not name:
        logger.warning("Skipping category record without a name: %r", raw.get("_id", raw.get("id")))
        return None
    return CategoryRecord(
        id=_text(raw, "_id", "id") or name,
        name=name,
        description=_text(raw, "description"),
        image_url=_text(raw, "imageUrl", "image"),
        order=_order(raw),
    )


def parse_sub_service(raw: object, where: str) -> SubService | None:
    if not isinstance(raw, dict):
        logger.warning("Skipping malformed sub-service in %s", where)
        return None

    price = to_money(raw.get("price"))
    if price is None:
        logger.warning("Sub-service %r in %s has no price", raw.get("name"), where)
        price = ZERO

    actual = to_money(raw.get("actualPrice"))
    if actual is not None and actual < price:
        logger.warning(
            "Sub-service %r in %s has actualPrice below price, ignoring it",
            raw.get("name"), where,
        )
        actual = None

    issues = raw.get("issuesResolved")
    return SubService(
        name=_text(raw, "name") or "Service",
        description=_text(raw, "description"),
        price=price,
        actual_price=actual,
        image_url=_text(raw, "imageUrl", "image"),
        issues_resolved=tuple(
            i.strip() for i in issues if isinstance(i, str) and i.strip()
        ) if isinstance(issues, list) else (),
    )


def parse_service_document(raw: Json) -> ServiceDocument | None:
    doc_id = _text(raw, "_id", "id")
    category = _text(raw, "category")
    if not doc_id or not category:
        logger.warning("Skipping service document without id or category: %r", doc_id or raw.get("name"))
        return None

    subs = raw.get("subServices")
    parsed: list[tuple[int, SubService]] = []
    if isinstance(subs, list):
        for idx, entry in enumerate(subs):
            sub = parse_sub_service(entry, f"service {doc_id}")
            if sub is not None:
                parsed.append((idx, sub))

    return ServiceDocument(
        id=doc_id,
        category=category,
        description=_text(raw, "description"),
        image_url=_text(raw, "imageUrl", "image"),
        sub_services=tuple(parsed),
    )


def to_catalog_item(doc: ServiceDocument, index: int, sub: SubService) -> CatalogItem:
    return CatalogItem(
        id=f"{doc.id}-{index}",
        service_id=doc.id,
        index=index,
        name=sub.name,
        description=sub.description,
        price=sub.price,
        actual_price=sub.actual_price,
        image_url=sub.image_url,
        issues_resolved=sub.issues_resolved,
    )


__all__ = (
    "CategoryRecord",
    "SubService",
    "ServiceDocument",
    "CatalogItem",
    "Category",
    "SlugSource",
    "CategoryRef",
    "parse_category_record",
    "parse_sub_service",
    "parse_service_document",
    "to_catalog_item",
)
