from __future__ import annotations

import json

import httpx
import pytest
from kungfu import Ok, Error

from doorstep import api
from doorstep.config import Settings


def make_client(handler, token: str | None = None) -> api.StorefrontClient:
    return api.StorefrontClient(
        "http://test/api",
        token=token,
        transport=httpx.MockTransport(handler),
    )


async def test_categories_accepts_bare_list():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/categories"
        return httpx.Response(200, json=[{"_id": "c1", "name": "AC"}, "junk"])

    async with make_client(handler) as client:
        assert await client.categories() == Ok([{"_id": "c1", "name": "AC"}])


async def test_cart_unwraps_items_and_sends_bearer_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"items": [{"subServiceId": "a-0"}]})

    async with make_client(handler, token="secret") as client:
        assert await client.cart() == Ok([{"subServiceId": "a-0"}])
        client.authenticate(None)
        assert not client.authenticated
        await client.cart()

    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert "Authorization" not in seen[1].headers


async def test_path_segments_are_quoted():
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.raw_path.decode())
        return httpx.Response(200, json=[])

    async with make_client(handler) as client:
        await client.services_in_category("Home theatre/ Sound box")
        await client.remove_from_cart("a b-0")

    assert paths == [
        "/api/services/category/Home%20theatre%2F%20Sound%20box",
        "/api/cart/a%20b-0",
    ]


async def test_post_bodies_and_query_params():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={"ok": True})

    async with make_client(handler) as client:
        await client.add_to_cart({"subServiceId": "a-0", "price": 449})
        await client.submit_enquiry({"items": []})
        await client.search("wash")

    add, enquiry, search = requests
    assert (add.method, add.url.path) == ("POST", "/api/cart/add")
    assert json.loads(add.content) == {"subServiceId": "a-0", "price": 449}
    assert enquiry.url.path == "/api/customer/enquiry"
    assert search.url.params["q"] == "wash"


async def test_empty_body_is_fine():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async with make_client(handler) as client:
        assert await client.clear_cart() == Ok(None)


async def test_status_error_keeps_server_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Item already in cart"})

    async with make_client(handler) as client:
        match await client.add_to_cart({}):
            case Error(e):
                assert e.kind is api.ApiErrorKind.STATUS
                assert e.status == 400
                assert e.user_message("fallback") == "Item already in cart"
            case Ok(_):
                pytest.fail("expected an error")


async def test_status_error_without_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    async with make_client(handler) as client:
        match await client.profile():
            case Error(e):
                assert e.server_message is None
                assert e.user_message("fallback") == "fallback"
            case Ok(_):
                pytest.fail("expected an error")


async def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        match await client.services():
            case Error(e):
                assert e.kind is api.ApiErrorKind.TRANSPORT
            case Ok(_):
                pytest.fail("expected an error")


async def test_invalid_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})

    async with make_client(handler) as client:
        match await client.categories():
            case Error(e):
                assert e.kind is api.ApiErrorKind.DECODE
            case Ok(_):
                pytest.fail("expected an error")


async def test_nothing_is_sent_until_awaited():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json=[])

    async with make_client(handler) as client:
        pending = client.cart()
        assert calls == []
        await pending
        assert calls == ["/api/cart"]


def test_from_settings():
    settings = Settings(
        api_base_url="http://shop.example/api",
        api_timeout=3.0,
        suggestion_limit=8,
        search_debounce=0.3,
        log_level="INFO",
    )
    client = api.StorefrontClient.from_settings(settings, token="t")
    assert client.authenticated
