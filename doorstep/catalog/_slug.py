"""
Slug resolution — path segment to canonical category identity.

Resolution is an ordered chain of total resolvers, first match wins:

    1. administrative record (id, or slug synthesized from its name)
    2. category names seen on service documents
    3. fixed legacy name table
    4. title-cased hyphen segments (always matches)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from kungfu import Option, Some, Nothing

from doorstep.catalog._types import CategoryRecord, CategoryRef, SlugSource

type SlugResolver = Callable[[str], Option[CategoryRef]]

LEGACY_CATEGORY_NAMES: Mapping[str, str] = {
    "air-conditioner": "Air Conditioner",
    "ceiling-table-fan": "Ceiling & Table Fan",
    "water-purifier": "Water Purifier",
    "visi-cooler": "Visi Cooler",
    "water-cooler": "Water Cooler",
    "air-cooler": "Air Cooler",
    "cctv-camera": "CCTV Camera",
    "computer-laptop": "Computer & Laptop",
    "microwave-oven": "Microwave oven",
    "electric-induction": "Electric Induction",
    "air-purifier": "Air Purifier",
    "home-theatre-sound-box": "Home theatre/ Sound box",
    "inverter-batteries": "Inverter Batteries",
    "vacuum-cleaner": "Vacuum cleaner",
    "washing-machine": "Washing Machine",
    "deep-freezer": "Deep Freezer",
    "refrigerator": "Refrigerator",
}


def slugify(name: str) -> str:
    """Lower-case, whitespace runs joined by single hyphens."""
    return "-".join(name.lower().split())


def title_case(segment: str) -> str:
    """'washing-machine' -> 'Washing Machine'; only first letters change."""
    return " ".join(word[:1].upper() + word[1:] for word in segment.split("-") if word)


# ═══════════════════════════════════════════════════════════════════════════════
# Tiers
# ═══════════════════════════════════════════════════════════════════════════════


def by_admin_record(records: Iterable[CategoryRecord]) -> SlugResolver:
    snapshot = tuple(records)

    def resolve(segment: str) -> Option[CategoryRef]:
        key = segment.strip()
        lowered = key.lower()
        for record in snapshot:
            slug = slugify(record.name)
            if record.id == key or slug == lowered:
                return Some(CategoryRef(slug, record.name, SlugSource.ADMIN, record.id))
        return Nothing()

    return resolve


def by_service_name(names: Iterable[str]) -> SlugResolver:
    """Orphan categories only exist as names on service documents."""
    by_slug: dict[str, str] = {}
    for name in names:
        by_slug.setdefault(slugify(name), name)

    def resolve(segment: str) -> Option[CategoryRef]:
        key = segment.strip().lower()
        name = by_slug.get(key)
        if name is None:
            return Nothing()
        return Some(CategoryRef(key, name, SlugSource.SERVICE))

    return resolve


def by_legacy_table(table: Mapping[str, str] = LEGACY_CATEGORY_NAMES) -> SlugResolver:
    def resolve(segment: str) -> Option[CategoryRef]:
        key = segment.strip().lower()
        name = table.get(key)
        if name is None:
            return Nothing()
        return Some(CategoryRef(key, name, SlugSource.LEGACY))

    return resolve


def _title_cased(segment: str) -> CategoryRef:
    key = segment.strip()
    return CategoryRef(key.lower(), title_case(key), SlugSource.TITLE_CASE)


def by_title_case(segment: str) -> Option[CategoryRef]:
    return Some(_title_cased(segment))


# ═══════════════════════════════════════════════════════════════════════════════
# Chain
# ═══════════════════════════════════════════════════════════════════════════════


def first_match(*resolvers: SlugResolver) -> Callable[[str], CategoryRef]:
    """Compose resolvers; the title-case tier closes the chain so it is total."""

    def resolve(segment: str) -> CategoryRef:
        for resolver in resolvers:
            match resolver(segment):
                case Some(ref):
                    return ref
                case _:
                    continue
        return _title_cased(segment)

    return resolve


def resolve_slug(
    segment: str,
    records: Iterable[CategoryRecord] = (),
    names: Iterable[str] = (),
) -> CategoryRef:
    """Resolve a category path segment. Never raises."""
    return first_match(
        by_admin_record(records),
        by_service_name(names),
        by_legacy_table(),
    )(segment)


__all__ = (
    "SlugResolver",
    "LEGACY_CATEGORY_NAMES",
    "slugify",
    "title_case",
    "by_admin_record",
    "by_service_name",
    "by_legacy_table",
    "by_title_case",
    "first_match",
    "resolve_slug",
)
