"""Test configuration and fixtures."""

import os

import pytest
import pytest_asyncio

from dredge import RegistryClient
from tests.helpers import FakeRegistry


@pytest.fixture(scope="session")
def registry_port():
    """Get registry port for integration testing."""
    return int(os.getenv("REGISTRY_PORT", "15000"))


@pytest_asyncio.fixture
async def fake_registry():
    """Start an in-process fake registry."""
    registry = FakeRegistry()
    await registry.start()
    yield registry
    await registry.close()


@pytest_asyncio.fixture
async def client(fake_registry):
    """Registry client pointed at the fake registry."""
    async with RegistryClient(fake_registry.url, timeout=5, max_pages=10) as registry_client:
        yield registry_client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring registry"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Modify test collection."""
    # Skip integration tests if no registry
    skip_integration = pytest.mark.skip(reason="Registry not available")

    for item in items:
        if (
            "integration" in item.keywords
            and os.getenv("REGISTRY_AVAILABLE", "false").lower() != "true"
        ):
            item.add_marker(skip_integration)
