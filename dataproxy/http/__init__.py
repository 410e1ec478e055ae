"""HTTP data proxy: CRUD against a remote REST resource with typed errors."""

from ._http import HTTPClient, Request, TimeoutConfig, Transport
from .client import HttpServiceProxy, ServiceDataProxy
from .config import ProxyConfig, get_config, load_dotenv_for_proxy
from .exceptions import (
    ConcurrencyError,
    ConnectionError,
    DataProxyError,
    NotFoundError,
    ServiceError,
    UnimplementedError,
    UnsupportedContentError,
)
from .formatters import Codec, JsonCodec, XmlCodec
from .invocation import (
    RunWithinTaskStrategy,
    SynchronousInvocationStrategy,
    WaitForResultStrategy,
    build_invocation_strategy,
)
from .models import DomainObject

__all__ = [
    "Codec",
    "ConcurrencyError",
    "ConnectionError",
    "DataProxyError",
    "DomainObject",
    "HTTPClient",
    "HttpServiceProxy",
    "JsonCodec",
    "NotFoundError",
    "ProxyConfig",
    "Request",
    "RunWithinTaskStrategy",
    "ServiceDataProxy",
    "ServiceError",
    "SynchronousInvocationStrategy",
    "TimeoutConfig",
    "Transport",
    "UnimplementedError",
    "UnsupportedContentError",
    "WaitForResultStrategy",
    "XmlCodec",
    "build_invocation_strategy",
    "get_config",
    "load_dotenv_for_proxy",
]
