from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from app.core.destination import ConnectorRegistry, get_connector_registry
from app.main import app
from tests.utils.destination import FakeConnector


@pytest.fixture
def fake_connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def registry(fake_connector: FakeConnector) -> ConnectorRegistry:
    return ConnectorRegistry([fake_connector])


@pytest.fixture
def client(registry: ConnectorRegistry) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_connector_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
