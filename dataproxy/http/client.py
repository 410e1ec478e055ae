"""Generic CRUD proxy for a remote REST resource."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, List, Optional, Protocol, TypeVar
from urllib.parse import quote

import httpx

from ._http import HTTPClient, Request, Transport
from .classifier import ensure_success_status_code
from .config import ProxyConfig, get_config
from .exceptions import UnsupportedContentError
from .formatters import Codec, JsonCodec
from .invocation import SynchronousInvocationStrategy, WaitForResultStrategy, build_invocation_strategy
from .models import DomainObject

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DomainObject)
KeyT = TypeVar("KeyT")
TOut = TypeVar("TOut")


class ServiceDataProxy(Protocol[T, KeyT]):
    """Repository-style contract implemented by HttpServiceProxy."""

    def get_all(self) -> List[T]: ...

    def get_by_id(self, id: KeyT) -> T: ...

    def insert(self, entity: T) -> T: ...

    def update(self, entity: T) -> T: ...

    def delete(self, id: KeyT) -> None: ...

    async def get_all_async(self) -> List[T]: ...

    async def get_by_id_async(self, id: KeyT) -> T: ...

    async def insert_async(self, entity: T) -> T: ...

    async def update_async(self, entity: T) -> T: ...

    async def delete_async(self, id: KeyT) -> None: ...


def _default_transport() -> Transport:
    return HTTPClient.from_config(get_config())


def _ignore_response(response: httpx.Response, entity: Any) -> None:
    return None


def _identity(message: str) -> str:
    return message


class HttpServiceProxy(Generic[T, KeyT]):
    """Treat a remote REST resource as a local repository.

    Every operation has a coroutine form (``*_async``) and a blocking form
    that runs the coroutine through the configured invocation strategy.
    Failed responses are raised as typed errors; see
    :func:`dataproxy.http.classifier.ensure_success_status_code`.

    Parameters
    ----------
    resource_uri : str
        URI of the resource collection (e.g. "https://api.example.com/customers")
    entity_type : type
        The DomainObject subclass returned by the resource
    transport_factory : callable, optional
        Returns a fresh transport for each call. The proxy closes it when
        the call ends. Defaults to an ``HTTPClient`` built from the global
        configuration
    codec : Codec, optional
        Body serializer/deserializer. Default is ``JsonCodec()``
    on_response_observed : callable, optional
        Called with ``(response, decoded_value)`` after every successful
        decode. Its return value is ignored
    format_server_error : callable, optional
        Rewrites the response body of a 400/404/409/501 response before
        it becomes the error message. Default is identity
    invocation_strategy : SynchronousInvocationStrategy, optional
        Runs the coroutines for the blocking methods. Default is
        ``WaitForResultStrategy()``

    Examples
    --------
    >>> proxy = HttpServiceProxy("https://api.example.com/customers", Customer)
    >>> customer = proxy.get_by_id(1)
    """

    def __init__(
        self,
        resource_uri: str,
        entity_type: type[T],
        transport_factory: Optional[Callable[[], Transport]] = None,
        codec: Optional[Codec] = None,
        on_response_observed: Optional[Callable[[httpx.Response, Any], None]] = None,
        format_server_error: Optional[Callable[[str], str]] = None,
        invocation_strategy: Optional[SynchronousInvocationStrategy] = None,
    ):
        self.resource_uri = resource_uri.rstrip("/")
        self.entity_type = entity_type
        self._transport_factory = transport_factory or _default_transport
        self._codec = codec or JsonCodec()
        self._on_response_observed = on_response_observed or _ignore_response
        self._format_server_error = format_server_error or _identity
        self._invocation_strategy = invocation_strategy or WaitForResultStrategy()

    @classmethod
    def from_config(
        cls,
        resource_uri: str,
        entity_type: type[T],
        config: Optional[ProxyConfig] = None,
        **kwargs: Any,
    ) -> "HttpServiceProxy[T, KeyT]":
        """Build a proxy whose transport and blocking strategy follow a ProxyConfig."""
        config = config or get_config()
        kwargs.setdefault("transport_factory", lambda: HTTPClient.from_config(config))
        kwargs.setdefault("invocation_strategy", build_invocation_strategy(config.sync_strategy))
        return cls(resource_uri, entity_type, **kwargs)

    @property
    def is_latency_prone(self) -> bool:
        return True

    @property
    def supports_transactions(self) -> bool:
        return False

    def item_uri(self, id: Any) -> str:
        """URI of a single item: ``{resource_uri}/{id}`` with the id percent-encoded."""
        return f"{self.resource_uri}/{quote(str(id), safe='')}"

    # ---------------- CRUD (blocking) -----------------

    def get_all(self) -> List[T]:
        """GET the whole collection.

        Raises
        ------
        ServiceError
            When the server returns 400 - Bad Request
        UnimplementedError
            When the server returns 501 - Not Implemented
        """
        return self.http_get(self.resource_uri, List[self.entity_type])

    def get_by_id(self, id: KeyT) -> T:
        """GET one item.

        Raises
        ------
        NotFoundError
            When the server returns 404 - Not Found
        ServiceError
            When the server returns 400 - Bad Request
        UnimplementedError
            When the server returns 501 - Not Implemented
        """
        return self.http_get(self.item_uri(id), self.entity_type)

    def insert(self, entity: T) -> T:
        """POST a new item and return it as stored by the server."""
        return self.http_post(entity, self.resource_uri, self.entity_type)

    def update(self, entity: T) -> T:
        """PUT an existing item.

        Raises
        ------
        NotFoundError
            When the server returns 404 - Not Found
        ConcurrencyError
            When the server returns 409 - Conflict
        ServiceError
            When the server returns 400 - Bad Request
        UnimplementedError
            When the server returns 501 - Not Implemented
        """
        return self.http_put(entity, self._update_uri(entity), self.entity_type)

    def delete(self, id: KeyT) -> None:
        """DELETE one item."""
        self.http_delete(self.item_uri(id))

    # ---------------- CRUD (async) -----------------

    async def get_all_async(self) -> List[T]:
        return await self.http_get_async(self.resource_uri, List[self.entity_type])

    async def get_by_id_async(self, id: KeyT) -> T:
        return await self.http_get_async(self.item_uri(id), self.entity_type)

    async def insert_async(self, entity: T) -> T:
        return await self.http_post_async(entity, self.resource_uri, self.entity_type)

    async def update_async(self, entity: T) -> T:
        return await self.http_put_async(entity, self._update_uri(entity), self.entity_type)

    async def delete_async(self, id: KeyT) -> None:
        await self.http_delete_async(self.item_uri(id))

    # ---------------- verbs -----------------

    def http_get(self, uri: str, shape: Any) -> Any:
        return self._invoke(lambda: self.http_get_async(uri, shape))

    async def http_get_async(self, uri: str, shape: Any) -> Any:
        """GET ``uri`` and decode the body into ``shape``."""
        return await self._send("GET", uri, shape)

    def http_post(self, body: Any, uri: str, shape: Any) -> Any:
        return self._invoke(lambda: self.http_post_async(body, uri, shape))

    async def http_post_async(self, body: Any, uri: str, shape: Any) -> Any:
        """POST ``body`` to ``uri`` and decode the response into ``shape``."""
        return await self._send("POST", uri, shape, body)

    def http_put(self, body: Any, uri: str, shape: Any) -> Any:
        return self._invoke(lambda: self.http_put_async(body, uri, shape))

    async def http_put_async(self, body: Any, uri: str, shape: Any) -> Any:
        """PUT ``body`` to ``uri`` and decode the response into ``shape``."""
        return await self._send("PUT", uri, shape, body)

    def http_delete(self, uri: str) -> None:
        self._invoke(lambda: self.http_delete_async(uri))

    async def http_delete_async(self, uri: str) -> None:
        """DELETE ``uri``; any response body is discarded."""
        await self._send("DELETE", uri)

    # ---------------- overridable hooks -----------------

    def build_transport(self) -> Transport:
        return self._transport_factory()

    def select_codec(self) -> Codec:
        return self._codec

    def on_parse_response(self, response: httpx.Response, entity: Any) -> None:
        self._on_response_observed(response, entity)

    def on_format_server_error(self, message: str) -> str:
        return self._format_server_error(message)

    # ---------------- internal -----------------

    def _invoke(self, func: Callable[[], Awaitable[TOut]]) -> TOut:
        return self._invocation_strategy.invoke(func)

    def _update_uri(self, entity: T) -> str:
        if entity.ID is None:
            raise ValueError(f"Cannot update a {type(entity).__name__} that has no ID")
        return self.item_uri(entity.ID)

    async def _send(self, method: str, uri: str, shape: Any = None, body: Any = None) -> Any:
        """Run one request through the transport and parse the response.

        With ``shape`` left as None the body is not decoded (DELETE) and the
        observation hook receives None.
        """
        codec = self.select_codec()
        headers = [("Accept", codec.media_type)]
        content = None
        if body is not None:
            content = codec.encode(body)
            headers.append(("Content-Type", codec.media_type))
        request = Request(method, uri, body, content, tuple(headers))

        logger.debug("%s %s", method, uri)
        transport = self.build_transport()
        try:
            response = await transport.send(request)
            logger.debug("%s %s -> %s", method, uri, response.status_code)
            if shape is None:
                self._ensure_success(response, codec, request, has_body=bool(response.content))
                self.on_parse_response(response, None)
                return None
            return self._parse_response(response, codec, request, shape)
        finally:
            await transport.aclose()

    def _ensure_success(
        self, response: httpx.Response, codec: Codec, request: Request, has_body: bool = True
    ) -> None:
        ensure_success_status_code(response, self.on_format_server_error, request.to_httpx())
        content_type = response.headers.get("content-type")
        if has_body and not codec.can_read(content_type):
            raise UnsupportedContentError(
                content_type or "", codec.supported_media_types, status_code=response.status_code
            )

    def _parse_response(self, response: httpx.Response, codec: Codec, request: Request, shape: Any) -> Any:
        self._ensure_success(response, codec, request)
        entity = codec.decode(response.content, shape)
        self.on_parse_response(response, entity)
        return entity
