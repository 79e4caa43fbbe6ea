"""
Pytest configuration and fixtures for schemasupport tests.
"""

import logging
from pathlib import Path

import pytest

from tests.helpers import FakeConnection


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: requires a reachable PostgreSQL")


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def change_root(tmp_path: Path) -> Path:
    """Empty search root for change files"""
    root = tmp_path / "sql"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Tests that call setup_logging() replace root handlers; put them back"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
