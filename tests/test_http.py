"""Tests for the httpx-backed transport."""

import httpx
import pytest

from dataproxy.http import ConnectionError, HTTPClient, ProxyConfig, Request, TimeoutConfig, Transport


class TestHTTPClient:
    """Test HTTPClient."""

    def test_is_a_transport(self):
        assert isinstance(HTTPClient(), Transport)

    def test_from_config(self):
        config = ProxyConfig(base_url="https://api.test.example", bearer_token="abc", timeout_read=5)
        client = HTTPClient.from_config(config)

        assert client.base_url == "https://api.test.example"
        assert client.headers == {"Authorization": "Bearer abc"}
        assert client.timeout_config == TimeoutConfig(read=5.0)

    def test_from_config_without_token(self):
        assert HTTPClient.from_config(ProxyConfig()).headers == {}

    @pytest.mark.asyncio
    async def test_send_returns_response_for_any_status(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(418, text="teapot")

        client = HTTPClient(
            base_url="https://api.test.example",
            headers={"Authorization": "Bearer abc"},
            transport=httpx.MockTransport(handler),
        )
        async with client:
            response = await client.send(
                Request("PUT", "/customers/1", content=b"{}", headers=(("Content-Type", "application/json"),))
            )

        assert response.status_code == 418
        assert str(seen[0].url) == "https://api.test.example/customers/1"
        assert seen[0].headers["authorization"] == "Bearer abc"
        assert seen[0].content == b"{}"
        assert client._client is None

    @pytest.mark.asyncio
    async def test_connect_errors_are_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = HTTPClient(transport=httpx.MockTransport(handler))
        with pytest.raises(ConnectionError) as exc_info:
            await client.send(Request("GET", "http://api/customers"))
        await client.aclose()

        assert exc_info.value.url == "http://api/customers"
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeouts_are_wrapped(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = HTTPClient(transport=httpx.MockTransport(handler))
        with pytest.raises(ConnectionError):
            await client.send(Request("GET", "http://api/customers"))
        await client.aclose()
