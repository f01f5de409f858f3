"""
Address resolution — city fragment and pincode lookup.
"""

from __future__ import annotations

from collections.abc import Iterable

from kungfu import Option, Some, Nothing

from doorstep.address._types import Locality
from doorstep.address._table import LOCALITIES
from doorstep.config import Settings

PINCODE_LENGTH = 6


def is_pincode(text: str) -> bool:
    return len(text) == PINCODE_LENGTH and text.isascii() and text.isdigit()


class AddressResolver:
    """
    Lookup over a static table of localities.

    Example:
        resolver = AddressResolver(limit=8)
        resolver.by_city("nan")        # (Locality("Nanded", ...),)
        resolver.by_pincode("431602")  # Some(Locality("Nanded", ...))
    """

    def __init__(
        self,
        localities: Iterable[Locality] = LOCALITIES,
        limit: int | None = None,
    ) -> None:
        self._localities = tuple(localities)
        self._limit = limit

    @classmethod
    def from_settings(cls, settings: Settings) -> AddressResolver:
        return cls(limit=settings.suggestion_limit)

    def by_city(self, fragment: str, limit: int | None = None) -> tuple[Locality, ...]:
        """Case-insensitive substring match, in table order."""
        needle = fragment.strip().casefold()
        if not needle:
            return ()
        matches = tuple(loc for loc in self._localities if needle in loc.city.casefold())
        cap = limit if limit is not None else self._limit
        return matches[:cap] if cap is not None else matches

    def by_pincode(self, code: str) -> Option[Locality]:
        """Exact match on a full six-digit code only."""
        code = code.strip()
        if not is_pincode(code):
            return Nothing()
        for loc in self._localities:
            if loc.pincode == code:
                return Some(loc)
        return Nothing()

    def suggest(self, query: str) -> tuple[Locality, ...]:
        """Route a free-text field to the right lookup."""
        query = query.strip()
        if query.isdigit():
            match self.by_pincode(query):
                case Some(loc):
                    return (loc,)
                case _:
                    return ()
        return self.by_city(query)


__all__ = ("AddressResolver", "is_pincode", "PINCODE_LENGTH")
