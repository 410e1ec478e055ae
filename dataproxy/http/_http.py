"""Internal HTTP transport for the data proxy.

This module provides a thin wrapper around httpx. The proxy asks its
transport factory for a fresh transport on every call and closes it when
the call ends, whatever the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from .exceptions import ConnectionError

if TYPE_CHECKING:
    from .config import ProxyConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Request:
    """A single outgoing request, built per call and never shared."""

    method: str
    uri: str
    body: Any = None
    content: bytes | None = None
    headers: tuple[tuple[str, str], ...] = ()

    def to_httpx(self) -> httpx.Request:
        return httpx.Request(self.method, self.uri, content=self.content, headers=list(self.headers))


@runtime_checkable
class Transport(Protocol):
    """What the proxy needs from a transport: send one request, then close."""

    async def send(self, request: Request) -> httpx.Response: ...

    async def aclose(self) -> None: ...


@dataclass
class TimeoutConfig:
    """Configuration for HTTP request timeouts."""

    read: float = 30.0
    connect: float = 10.0
    write: float = 30.0
    pool: float = 30.0


class HTTPClient:
    """Async httpx-backed transport.

    Parameters
    ----------
    base_url : str, optional
        Prefix for relative request URIs
    headers : dict, optional
        Headers sent with every request (authorization, user agent, ...)
    timeout_config : TimeoutConfig, optional
        Per-phase timeouts; this is the only place timeouts are set
    follow_redirects : bool, optional
        Whether httpx should follow redirects. Default is False
    verify : bool, optional
        Whether to verify TLS certificates. Default is True
    transport : httpx.AsyncBaseTransport, optional
        Low-level httpx transport, e.g. ``httpx.MockTransport`` in tests
    """

    def __init__(
        self,
        base_url: str = "",
        headers: dict[str, str] | None = None,
        timeout_config: TimeoutConfig | None = None,
        follow_redirects: bool = False,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client: httpx.AsyncClient | None = None
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.timeout_config = timeout_config or TimeoutConfig()
        self.follow_redirects = follow_redirects
        self.verify = verify
        self._transport = transport

    @classmethod
    def from_config(cls, config: "ProxyConfig", transport: httpx.AsyncBaseTransport | None = None) -> "HTTPClient":
        """Build a client from a ProxyConfig."""
        headers = {}
        if config.bearer_token:
            headers["Authorization"] = f"Bearer {config.bearer_token}"
        return cls(
            base_url=config.base_url,
            headers=headers,
            timeout_config=TimeoutConfig(
                read=config.timeout_read,
                connect=config.timeout_connect,
                write=config.timeout_write,
                pool=config.timeout_pool,
            ),
            follow_redirects=config.follow_redirects,
            verify=config.verify_tls,
            transport=transport,
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            timeout = httpx.Timeout(
                read=self.timeout_config.read,
                connect=self.timeout_config.connect,
                write=self.timeout_config.write,
                pool=self.timeout_config.pool,
            )
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=timeout,
                follow_redirects=self.follow_redirects,
                verify=self.verify,
                transport=self._transport,
            )
        return self._client

    async def send(self, request: Request) -> httpx.Response:
        """Send the request and return the raw response, whatever its status."""
        client = self._ensure_client()
        try:
            return await client.request(
                request.method,
                request.uri,
                content=request.content,
                headers=list(request.headers),
            )
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            logger.warning("%s %s failed: %s", request.method, request.uri, exc)
            raise ConnectionError(request.uri, exc) from exc

    async def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def aclose(self) -> None:
        """Alias for close() to match expected interface."""
        await self.close()

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
