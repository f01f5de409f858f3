"""
Catalog — reshape category records and service documents into a catalog.

    from doorstep import catalog as Cat

    loader = Cat.CatalogLoader(client)
    match await loader.load():
        case Some(catalog): ...

    ref = Cat.resolve_slug("washing-machine", catalog.records)
"""

from __future__ import annotations

from doorstep.catalog._types import (
    CategoryRecord,
    SubService,
    ServiceDocument,
    CatalogItem,
    Category,
    SlugSource,
    CategoryRef,
    parse_category_record,
    parse_sub_service,
    parse_service_document,
    to_catalog_item,
)
from doorstep.catalog._slug import (
    SlugResolver,
    LEGACY_CATEGORY_NAMES,
    slugify,
    title_case,
    by_admin_record,
    by_service_name,
    by_legacy_table,
    by_title_case,
    first_match,
    resolve_slug,
)
from doorstep.catalog._aggregate import (
    index_by_category,
    order_records,
    flatten,
    first_image,
    aggregate,
)
from doorstep.catalog._catalog import Catalog, CategoryPage, find_item
from doorstep.catalog._loader import CatalogLoader, parse_records, parse_documents

__all__ = (
    # Types
    "CategoryRecord",
    "SubService",
    "ServiceDocument",
    "CatalogItem",
    "Category",
    "SlugSource",
    "CategoryRef",
    # Parsing
    "parse_category_record",
    "parse_sub_service",
    "parse_service_document",
    "parse_records",
    "parse_documents",
    "to_catalog_item",
    # Slugs
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
    # Aggregation
    "index_by_category",
    "order_records",
    "flatten",
    "first_image",
    "aggregate",
    # Snapshot / loading
    "Catalog",
    "CategoryPage",
    "find_item",
    "CatalogLoader",
)
