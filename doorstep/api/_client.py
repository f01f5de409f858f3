"""HTTP client for the storefront backend.

Every method returns a LazyCoroResult: nothing is sent until it is awaited,
and transport or status failures come back as ApiError values instead of
exceptions.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from kungfu import LazyCoroResult

from doorstep import lift as L
from doorstep._types import Json
from doorstep.api._errors import ApiError, to_api_error
from doorstep.config import Settings

logger = logging.getLogger(__name__)


def _as_list(data: Any, key: str) -> list[Json]:
    """Accept either a bare JSON array or an object wrapping one under key."""
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


def _as_object(data: Any) -> Json:
    return data if isinstance(data, dict) else {}


class StorefrontClient:
    """
    Async client for the REST endpoints the storefront consumes.

    Example:
        async with StorefrontClient.from_settings(settings) as api:
            api.authenticate(token)
            match await api.cart():
                case Ok(items): ...
                case Error(e): ...
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token: str | None = None,
    ) -> StorefrontClient:
        return cls(base_url=settings.api_base_url, timeout=settings.api_timeout, token=token)

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def authenticate(self, token: str | None) -> None:
        """Set or drop the bearer token sent with every request."""
        self._token = token

    @property
    def authenticated(self) -> bool:
        return bool(self._token)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> StorefrontClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ─────────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        if self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Json | None = None,
        params: dict[str, str] | None = None,
    ) -> LazyCoroResult[Any, ApiError]:
        operation = f"{method} {path}"

        async def call() -> Any:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=self._headers(),
            )
            response.raise_for_status()
            logger.debug("%s -> %s", operation, response.status_code)
            if not response.content:
                return None
            return response.json()

        return L.catching_async(call, on_error=lambda e: to_api_error(e, operation))

    # ─────────────────────────────────────────────────────────────────────────
    # Catalog
    # ─────────────────────────────────────────────────────────────────────────

    def categories(self) -> LazyCoroResult[list[Json], ApiError]:
        return self._request("GET", "/categories").map(lambda d: _as_list(d, "categories"))

    def services(self) -> LazyCoroResult[list[Json], ApiError]:
        return self._request("GET", "/services").map(lambda d: _as_list(d, "services"))

    def services_in_category(self, name: str) -> LazyCoroResult[list[Json], ApiError]:
        path = f"/services/category/{quote(name, safe='')}"
        return self._request("GET", path).map(lambda d: _as_list(d, "services"))

    # ─────────────────────────────────────────────────────────────────────────
    # Cart
    # ─────────────────────────────────────────────────────────────────────────

    def cart(self) -> LazyCoroResult[list[Json], ApiError]:
        return self._request("GET", "/cart").map(lambda d: _as_list(d, "items"))

    def add_to_cart(self, item: Json) -> LazyCoroResult[Json, ApiError]:
        return self._request("POST", "/cart/add", json=item).map(_as_object)

    def remove_from_cart(self, sub_service_id: str) -> LazyCoroResult[None, ApiError]:
        path = f"/cart/{quote(sub_service_id, safe='')}"
        return self._request("DELETE", path).map(lambda _: None)

    def clear_cart(self) -> LazyCoroResult[None, ApiError]:
        return self._request("DELETE", "/cart").map(lambda _: None)

    # ─────────────────────────────────────────────────────────────────────────
    # Customer
    # ─────────────────────────────────────────────────────────────────────────

    def submit_enquiry(self, payload: Json) -> LazyCoroResult[Json, ApiError]:
        return self._request("POST", "/customer/enquiry", json=payload).map(_as_object)

    def profile(self) -> LazyCoroResult[Json, ApiError]:
        return self._request("GET", "/customer/me").map(_as_object)

    # ─────────────────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────────────────

    def search(self, query: str) -> LazyCoroResult[Json, ApiError]:
        return self._request("GET", "/search", params={"q": query}).map(_as_object)


__all__ = ("StorefrontClient",)
