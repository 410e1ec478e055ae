"""Pytest configuration and fixtures."""

import pytest

from dataproxy.http import config as config_module
from stubs import MockServer, ProxyStub


@pytest.fixture
def server():
    """Mock server; answers 200 with an empty JSON body until told otherwise."""
    return MockServer()


@pytest.fixture
def proxy(server):
    """Proxy stub wired to the mock server, default strategy and codec."""
    return ProxyStub(server)


@pytest.fixture
def mock_config():
    """Mock configuration environment."""
    return {
        "DATAPROXY_BASE_URL": "https://api.test.example",
        "DATAPROXY_TOKEN": "test-token",
        "DATAPROXY_TIMEOUT_READ": "5",
        "DATAPROXY_SYNC_STRATEGY": "task",
    }


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the cached global configuration from leaking between tests."""
    config_module._config = None
    yield
    config_module._config = None
