"""
API — REST consumer and backend protocols.

    from doorstep import api

    client = api.StorefrontClient.from_settings(settings, token=token)
"""

from __future__ import annotations

from doorstep.api._errors import ApiError, ApiErrorKind, to_api_error
from doorstep.api._protocols import (
    CatalogBackend,
    CartBackend,
    EnquiryBackend,
    SearchBackend,
)
from doorstep.api._client import StorefrontClient

__all__ = (
    "ApiError",
    "ApiErrorKind",
    "to_api_error",
    "CatalogBackend",
    "CartBackend",
    "EnquiryBackend",
    "SearchBackend",
    "StorefrontClient",
)
