"""
Backend protocols — what each component consumes.

StorefrontClient implements all of them over HTTP; doorstep.testing
implements them in memory.
"""

from __future__ import annotations

from typing import Protocol

from kungfu import LazyCoroResult

from doorstep._types import Json
from doorstep.api._errors import ApiError


class CatalogBackend(Protocol):
    """GET /categories, GET /services, GET /services/category/{name}."""

    def categories(self) -> LazyCoroResult[list[Json], ApiError]:
        """Administrative category records, in display order."""
        ...

    def services(self) -> LazyCoroResult[list[Json], ApiError]:
        """Every service document with its sub-service array."""
        ...

    def services_in_category(self, name: str) -> LazyCoroResult[list[Json], ApiError]:
        """Service documents tagged with one category name."""
        ...


class CartBackend(Protocol):
    """Server-held cart of the authenticated identity."""

    def cart(self) -> LazyCoroResult[list[Json], ApiError]:
        """Cart lines."""
        ...

    def add_to_cart(self, item: Json) -> LazyCoroResult[Json, ApiError]:
        ...

    def remove_from_cart(self, sub_service_id: str) -> LazyCoroResult[None, ApiError]:
        ...

    def clear_cart(self) -> LazyCoroResult[None, ApiError]:
        ...


class EnquiryBackend(Protocol):
    """POST /customer/enquiry, GET /customer/me."""

    def submit_enquiry(self, payload: Json) -> LazyCoroResult[Json, ApiError]:
        ...

    def profile(self) -> LazyCoroResult[Json, ApiError]:
        ...


class SearchBackend(Protocol):
    """GET /search?q=."""

    def search(self, query: str) -> LazyCoroResult[Json, ApiError]:
        ...


__all__ = ("CatalogBackend", "CartBackend", "EnquiryBackend", "SearchBackend")
