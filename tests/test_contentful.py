from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from product_catalog.sync.contentful_adapter import external_id_of, to_product_values
from product_catalog.sync.contentful_client import ContentfulClient
from product_catalog.utils.errors import ExternalSourceUnavailable, ValidationError


def _client(handler) -> ContentfulClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://cdn.test")
    return ContentfulClient(
        space_id="space1",
        environment="master",
        access_token="token-123",
        content_type="product",
        page_limit=100,
        client=http,
    )


@pytest.mark.asyncio
async def test_fetch_entries_requests_the_configured_collection() -> None:
    seen: dict[str, object] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"total": 1, "items": [{"sys": {"id": "e1"}, "fields": {"name": "Lamp"}}]})

    client = _client(handler)
    items = await client.fetch_entries()

    assert seen["path"] == "/spaces/space1/environments/master/entries"
    assert seen["params"] == {"access_token": "token-123", "content_type": "product", "limit": "100"}
    assert items == [{"sys": {"id": "e1"}, "fields": {"name": "Lamp"}}]


@pytest.mark.asyncio
async def test_fetch_entries_wraps_http_errors() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    with pytest.raises(ExternalSourceUnavailable, match="HTTP 500"):
        await _client(handler).fetch_entries()


@pytest.mark.asyncio
async def test_fetch_entries_rejects_bodies_without_items() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"sys": {"type": "Error"}})

    with pytest.raises(ExternalSourceUnavailable, match="items"):
        await _client(handler).fetch_entries()


@pytest.mark.asyncio
async def test_fetch_entries_rejects_non_json() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(ExternalSourceUnavailable, match="non-JSON"):
        await _client(handler).fetch_entries()


@pytest.mark.asyncio
async def test_unconfigured_client_never_calls_out() -> None:
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"items": []})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://cdn.test")
    client = ContentfulClient(space_id=None, access_token=None, client=http)

    assert client.configured is False
    with pytest.raises(ExternalSourceUnavailable):
        await client.fetch_entries()
    assert calls == []


@pytest.mark.asyncio
async def test_injected_http_client_is_not_closed() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": []})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://cdn.test")
    async with ContentfulClient(space_id="s", access_token="t", client=http) as client:
        assert await client.fetch_entries() == []

    assert http.is_closed is False
    await http.aclose()


def test_entry_mapping_keeps_only_present_fields() -> None:
    external_id, values = to_product_values(
        {
            "sys": {"id": "4LgMotpNF6W20YKmuemW0a"},
            "fields": {"name": "Apple Mi Watch", "price": 1302.71, "stock": "7", "category": "Smartwatch", "color": None},
        }
    )

    assert external_id == "4LgMotpNF6W20YKmuemW0a"
    assert values == {
        "name": "Apple Mi Watch",
        "category": "Smartwatch",
        "color": None,
        "price": Decimal("1302.71"),
        "stock": 7,
    }


def test_entry_mapping_rejects_unusable_entries() -> None:
    with pytest.raises(ValidationError):
        to_product_values({"sys": {"id": "e1"}, "fields": {"price": 3}})
    with pytest.raises(ValidationError):
        to_product_values({"sys": {"id": "e1"}})
    with pytest.raises(ValidationError):
        to_product_values({"sys": {"id": "e1"}, "fields": {"name": "X", "price": "cheap"}})
    with pytest.raises(ValidationError):
        to_product_values({"sys": {"id": "e1"}, "fields": {"name": "X", "stock": "lots"}})
    with pytest.raises(ValidationError):
        external_id_of({"fields": {"name": "X"}})


@pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity", float("nan"), 1e9, "99999999.999", -1e8])
def test_entry_mapping_rejects_prices_the_column_cannot_hold(price) -> None:
    with pytest.raises(ValidationError):
        to_product_values({"sys": {"id": "e1"}, "fields": {"name": "X", "price": price}})


def test_entry_mapping_accepts_the_largest_storable_price() -> None:
    _, values = to_product_values({"sys": {"id": "e1"}, "fields": {"name": "X", "price": "99999999.99"}})

    assert values["price"] == Decimal("99999999.99")


def test_external_id_falls_back_to_top_level_id() -> None:
    assert external_id_of({"id": 42, "fields": {}}) == "42"
