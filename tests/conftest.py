"""
Test configuration and fixtures for the ordered list test suite.

This file contains shared fixtures and configuration for all tests.
"""

import os
import sys
import pytest
from unittest.mock import patch, MagicMock

# Add project root to Python path so we can import app modules
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Set test environment before importing app
os.environ["FLASK_ENV"] = "testing"
os.environ["PGHOST"] = "localhost"
os.environ["PGDATABASE"] = "ordering_test"
os.environ["PGUSER"] = "test_user"
os.environ["PGPASSWORD"] = "test_password"
os.environ["PGPORT"] = "5432"

from app import app
from list_orderer import CallbackSortableProvider, ListOrderer
from tests.fixtures.sample_data import list_item_rows, trailing_keys


class InMemoryList:
    """
    A list of {'id', 'order'} dicts exposed through a SortableProvider.

    Records every set_item_order call so tests can check that an operation
    wrote exactly one key.
    """

    def __init__(self, orders):
        self.items = [{"id": item_id, "order": order} for item_id, order in orders.items()]
        self.writes = []
        self.provider = CallbackSortableProvider(
            get_items=lambda: list(reversed(self.items)),  # deliberately unsorted
            get_item_id=lambda item: item["id"],
            get_item_order=lambda item: item["order"],
            set_item_order=self._set_order,
        )
        self.orderer = ListOrderer(self.provider)

    def _set_order(self, item, order):
        self.writes.append((item["id"], order))
        item["order"] = order

    def order_of(self, item_id):
        return next(item["order"] for item in self.items if item["id"] == item_id)

    def ids_in_order(self):
        return [item["id"] for item in sorted(self.items, key=lambda i: i["order"])]

    def snapshot(self):
        return {item["id"]: item["order"] for item in self.items}


@pytest.fixture
def abc_list():
    """Three items a < b < c with real generated keys."""
    keys = trailing_keys(3)
    return InMemoryList({"a": keys[0], "b": keys[1], "c": keys[2]})


@pytest.fixture
def make_list():
    """Factory for InMemoryList with arbitrary {id: order} contents."""
    return InMemoryList


@pytest.fixture
def client():
    """Create a test client for the Flask application."""
    app.config["TESTING"] = True

    with app.test_client() as client:
        with app.app_context():
            yield client


@pytest.fixture
def mock_db_connection():
    """Mock database connection for model tests."""
    with patch("models.list_item.get_db_connection") as mock_conn:
        mock_connection = MagicMock()
        mock_cursor = MagicMock()
        mock_connection.cursor.return_value = mock_cursor
        mock_conn.return_value = mock_connection

        yield {
            "connection": mock_connection,
            "cursor": mock_cursor,
            "get_connection": mock_conn,
        }


@pytest.fixture
def sample_rows():
    """Five list_item rows in ascending key order."""
    return list_item_rows(5)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "slow: Slow-running tests")
