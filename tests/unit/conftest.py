"""
Fixtures for tests that run against FakeConnection.
"""

from unittest.mock import patch

import pytest

from tests.helpers import offline_quote_ident


@pytest.fixture(autouse=True)
def offline_identifiers():
    """psycopg2.sql.Identifier needs a live connection to quote; stand in for it"""
    with patch("psycopg2.extensions.quote_ident", offline_quote_ident):
        yield
