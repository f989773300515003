"""Unit tests for the HTTP transport."""

import httpx
import pytest

from newsagg.adapters.http import HttpResponse, HttpTransport


def make_transport(handler) -> HttpTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(timeout=5.0, client=client)


@pytest.mark.asyncio
async def test_get_returns_status_and_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"articles": []})

    async with make_transport(handler) as transport:
        response = await transport.get("https://api.example.com/news", params={"q": "ai", "page": 2})

    assert response.status_code == 200
    assert response.is_success
    assert response.json() == {"articles": []}
    assert seen["params"] == {"q": "ai", "page": "2"}


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream down")

    async with make_transport(handler) as transport:
        response = await transport.get("https://api.example.com/news")

    assert response.status_code == 500
    assert not response.is_success
    assert response.body == "upstream down"


@pytest.mark.asyncio
async def test_transport_failure_raises_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_transport(handler) as transport:
        with pytest.raises(httpx.HTTPError):
            await transport.get("https://api.example.com/news")


def test_json_returns_none_for_invalid_body():
    assert HttpResponse(status_code=200, body="<html>").json() is None
