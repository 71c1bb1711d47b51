"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from notion_batch.config import Settings, get_settings  # noqa: E402
from notion_stubs import NotionStub  # noqa: E402

DATABASE_ID = "2b8e4f0a-1c2d-4e3f-9a8b-7c6d5e4f3a2b"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (stubbed Notion API, in-memory database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def database_id():
    """Provide the Notion database ID used by stubbed responses."""
    return DATABASE_ID


@pytest.fixture
def settings():
    """Provide settings with a token and no rate limiting."""
    return Settings(
        _env_file=None,
        notion_api_key="secret-token",
        notion_rate_limit_delay=0.0,
        notion_database_id=DATABASE_ID,
    )


@pytest.fixture
def notion_stub():
    """Provide a stubbed Notion API."""
    return NotionStub()


@pytest.fixture
def env_settings(monkeypatch):
    """Point the cached settings at test environment variables."""
    monkeypatch.setenv("NOTION_API_KEY", "secret-token")
    monkeypatch.setenv("NOTION_RATE_LIMIT_DELAY", "0")
    monkeypatch.setenv("NOTION_DATABASE_ID", DATABASE_ID)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
