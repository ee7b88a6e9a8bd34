"""Fixtures for module tests using WireMock testcontainers."""

from collections.abc import Generator

import pytest
from testcontainers.core import testcontainers_config
from wiremock.client import Mappings
from wiremock.constants import Config
from wiremock.testing.testcontainer import WireMockContainer

from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.server_time import TimeClient
from api_qa_harness.clients.users import UserClient
from api_qa_harness.config import ApiConfig


@pytest.fixture(scope="session", autouse=True)
def _disable_ryuk() -> None:
    """Disable the extra cleanup instance, we use contexts to clean containers."""
    testcontainers_config.ryuk_disabled = True


@pytest.fixture(scope="session")
def wiremock_server() -> Generator[WireMockContainer, None, None]:
    """Start WireMock container using wiremock's testcontainer support."""
    with WireMockContainer(secure=False) as wm:
        Config.base_url = wm.get_url("__admin")
        yield wm
        print(wm.get_logs())


@pytest.fixture
def api_config(wiremock_server: WireMockContainer) -> Generator[ApiConfig, None, None]:
    """Point the clients at WireMock with a clean set of stubs."""
    Mappings.delete_all_mappings()
    yield ApiConfig(base_url=wiremock_server.get_base_url(), timeout=5.0)
    Mappings.delete_all_mappings()


@pytest.fixture
def product_client(api_config: ApiConfig) -> Generator[ProductClient, None, None]:
    with ProductClient.from_config(api_config) as client:
        yield client


@pytest.fixture
def user_client(api_config: ApiConfig) -> Generator[UserClient, None, None]:
    with UserClient.from_config(api_config) as client:
        yield client


@pytest.fixture
def time_client(api_config: ApiConfig) -> Generator[TimeClient, None, None]:
    with TimeClient.from_config(api_config) as client:
        yield client
