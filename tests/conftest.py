"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Settings load at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from contextlib import ExitStack
from datetime import datetime
from typing import Callable, Generator, Optional
from uuid import uuid4

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else (len(self.data) if isinstance(self.data, list) else 1)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    eq and in_ filter the table rows; order and range are ignored.
    """

    def __init__(self, table: "MockSupabaseTable"):
        self._table = table
        self._data = list(table.rows)
        self._filtered = False
        self._limit: Optional[int] = None
        self._inserted: Optional[list] = None

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id and timestamps, persist in table
        if isinstance(data, dict):
            data = [data]
        inserted = []
        for item in data:
            error = self._table.insert_error_for(item)
            if error is not None:
                raise error
            row = dict(item)
            row["id"] = str(uuid4())
            row["created_at"] = datetime.utcnow().isoformat() + "Z"
            row["updated_at"] = datetime.utcnow().isoformat() + "Z"
            self._table.rows.append(row)
            inserted.append(row)
        self._inserted = inserted
        return self

    def eq(self, column, value):
        self._filtered = True
        self._data = [row for row in self._data if row.get(column) == value]
        return self

    def in_(self, column, values):
        self._filtered = True
        allowed = set(values)
        self._data = [row for row in self._data if row.get(column) in allowed]
        return self

    def order(self, column, **kwargs):
        return self

    def range(self, start, end):
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self) -> MockSupabaseResponse:
        if self._inserted is not None:
            return MockSupabaseResponse(data=self._inserted)

        if self._table.select_error is not None:
            raise self._table.select_error

        data = self._data
        if self._limit is not None:
            data = data[:self._limit]

        count = self._table.count
        if count is None or self._filtered:
            count = len(self._data)
        return MockSupabaseResponse(data=data, count=count)


class MockSupabaseTable:
    """Mock Supabase table backed by a list of row dicts."""

    def __init__(self, rows: list, count: int = None):
        self.rows = rows
        self.count = count
        self.insert_errors: list[tuple[Callable[[dict], bool], Exception]] = []
        self.select_error: Optional[Exception] = None

    def insert_error_for(self, item: dict) -> Optional[Exception]:
        for matches, error in self.insert_errors:
            if matches(item):
                return error
        return None

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self).select(*args, **kwargs)

    def insert(self, data):
        return MockSupabaseQuery(self).insert(data)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables: dict[str, MockSupabaseTable] = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = MockSupabaseTable(list(data), count)

    def fail_inserts(self, table_name: str, error: Exception, when: Callable[[dict], bool] = lambda item: True):
        """Make inserts into a table raise for rows matching `when`."""
        self.table(table_name).insert_errors.append((when, error))

    def fail_selects(self, table_name: str, error: Exception):
        """Make every read from a table raise."""
        self.table(table_name).select_error = error

    def rows(self, table_name: str) -> list:
        """Current rows of a table (including inserts)."""
        return self.table(table_name).rows

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable([])
        return self._tables[name]


# ===================
# FIXTURES
# ===================

SERVICE_MODULES = [
    "services.guest_blog_site_service",
    "services.publisher_service",
    "services.client_service",
]


@pytest.fixture(autouse=True)
def reset_service_singletons():
    """Drop cached service instances and upload sessions between tests."""
    import services.guest_blog_site_service as site_module
    import services.publisher_service as publisher_module
    import services.client_service as client_module
    import services.pricing_service as pricing_module
    import services.bulk_commit_service as commit_module
    import services.upload_session_service as session_module

    def reset():
        site_module._guest_blog_site_service = None
        publisher_module._publisher_service = None
        client_module._client_service = None
        pricing_module._pricing_service = None
        commit_module._bulk_commit_service = None
        session_module._upload_session_store = None

    reset()
    yield
    reset()


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("guest_blog_sites", [
                {"id": "1", "site_url": "https://example.com", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("publishers", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with ExitStack() as stack:
        stack.enter_context(patch("config.database.get_supabase_client", return_value=mock_supabase))
        for module in SERVICE_MODULES:
            stack.enter_context(patch(f"{module}.get_supabase_client", return_value=mock_supabase))
        yield mock_supabase


@pytest.fixture
def sample_publishers() -> list:
    """Publishers referenced by the sample upload rows."""
    return [
        {"id": "pub-1", "name": "TechCrunch Editorial", "email": "editor@techcrunch.com", "is_active": True},
        {"id": "pub-2", "name": "Forbes Business", "email": "business@forbes.com", "is_active": True},
        {"id": "pub-3", "name": "Acme Media", "email": None, "is_active": True},
    ]


@pytest.fixture
def sample_client() -> dict:
    """Client with a 40% markup."""
    return {
        "id": "client-1",
        "name": "Growth Agency",
        "email": "ops@growth.agency",
        "percentage": 40,
        "is_active": True,
    }


@pytest.fixture
def template_csv() -> bytes:
    """Two-row upload in template column order."""
    return (
        "Site URL,Publisher Email,DA,DR,Traffic,SS,Category,Country,Language,TAT,Base Price,Status\n"
        "techcrunch.com,editor@techcrunch.com,95,94,15000000,2,TECHNOLOGY_GADGETS,US,en,2-3 days,500,ACTIVE\n"
        "https://forbes.com/business,business@forbes.com,92,93,12000000,1,business_entrepreneurship,US,en,3-5 days,450,\n"
    ).encode("utf-8")


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("guest_blog_sites", [...])
            response = test_client_with_mock_db.get("/api/guest-sites")
    """
    from fastapi.testclient import TestClient
    from main import app

    yield TestClient(app)
