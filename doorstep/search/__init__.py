"""
Search — debounced free-text search over the catalog.

    from doorstep import search

    session = search.SearchSession.from_settings(client, settings)
    session.update("fridge")
"""

from __future__ import annotations

from doorstep.search._session import SearchResults, SearchSession, DEFAULT_DEBOUNCE

__all__ = ("SearchResults", "SearchSession", "DEFAULT_DEBOUNCE")
