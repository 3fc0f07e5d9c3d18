"""
Shared test fixtures.

Provides an in-memory Supabase double that understands the query
chains used by the gateway and catalog service: eq filters, ordering,
ranges, inserts with generated ids, and unique-key violations raised
as PostgREST APIError.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require these at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from copy import deepcopy
from datetime import date, datetime
from typing import Optional
from postgrest.exceptions import APIError

from tests.factories import CatalogFactory

REPORT_UNIQUE_KEY = ("store", "sku", "week_start_date", "week_end_date")


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Chainable query that runs against a MockSupabaseTable on execute()."""

    def __init__(self, table: "MockSupabaseTable", action: str, payload=None):
        self._table = table
        self._action = action
        self._payload = payload
        self._filters: list[tuple[str, str]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._range: Optional[tuple[int, int]] = None
        self._limit: Optional[int] = None

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self._filters.append((column, str(value)))
        return self

    def order(self, column, desc=False, **kwargs):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(str(row.get(column)) == value for column, value in self._filters)

    def execute(self) -> MockSupabaseResponse:
        self._table.calls.append(self._action)
        failure = self._table.failures.get(self._action)
        if failure is not None:
            raise failure

        if self._action == "insert":
            return MockSupabaseResponse(data=[self._table.insert_row(self._payload)])

        matching = [row for row in self._table.rows if self._matches(row)]

        if self._action == "update":
            for row in matching:
                row.update(deepcopy(self._payload))
            return MockSupabaseResponse(data=deepcopy(matching))

        if self._action == "delete":
            self._table.rows = [row for row in self._table.rows if not self._matches(row)]
            return MockSupabaseResponse(data=deepcopy(matching))

        if self._order:
            column, desc = self._order
            matching.sort(key=lambda row: str(row.get(column)), reverse=desc)
        if self._range:
            start, end = self._range
            matching = matching[start:end + 1]
        if self._limit is not None:
            matching = matching[:self._limit]
        return MockSupabaseResponse(data=deepcopy(matching))


class MockSupabaseTable:
    """In-memory table with optional unique key and injectable failures."""

    def __init__(self, rows: list = None, unique_key: Optional[tuple] = None):
        self.rows = deepcopy(rows or [])
        self.unique_key = unique_key
        self.failures: dict[str, Exception] = {}
        self.calls: list[str] = []
        self._next_id = 1000

    def insert_row(self, payload: dict) -> dict:
        row = deepcopy(payload)
        if self.unique_key:
            key = tuple(str(row.get(column)) for column in self.unique_key)
            for existing in self.rows:
                if tuple(str(existing.get(column)) for column in self.unique_key) == key:
                    raise APIError({
                        "code": "23505",
                        "message": "duplicate key value violates unique constraint",
                        "details": f"Key {key} already exists.",
                        "hint": None,
                    })
        self._next_id += 1
        row["id"] = str(self._next_id)
        row["created_at"] = datetime.utcnow().isoformat() + "Z"
        self.rows.append(row)
        return deepcopy(row)

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self, "select")

    def insert(self, data):
        return MockSupabaseQuery(self, "insert", data)

    def update(self, data):
        return MockSupabaseQuery(self, "update", data)

    def delete(self):
        return MockSupabaseQuery(self, "delete")


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables: dict[str, MockSupabaseTable] = {}

    def set_table_data(self, table_name: str, data: list, unique_key: Optional[tuple] = None):
        """Configure rows for a table."""
        self._tables[table_name] = MockSupabaseTable(data, unique_key)

    def fail(self, table_name: str, action: str, error: Exception):
        """Make every `action` ("select", "insert", ...) on a table raise."""
        self.table(table_name).failures[action] = error

    def rows(self, table_name: str) -> list:
        return self.table(table_name).rows

    def table(self, name: str) -> MockSupabaseTable:
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable()
        return self._tables[name]


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Mock Supabase client with empty report and catalog tables.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("production_reports", [...], REPORT_UNIQUE_KEY)
    """
    client = MockSupabaseClient()
    client.set_table_data("production_reports", [], REPORT_UNIQUE_KEY)
    client.set_table_data("sku_catalog", [])
    return client


@pytest.fixture
def week():
    """Week 42 of 2026: Monday 2026-10-12 to Sunday 2026-10-18."""
    from services.week_service import week_for_date
    return week_for_date(date(2026, 10, 14))


@pytest.fixture
def gateway(mock_supabase):
    from services.report_gateway import ReportGateway
    return ReportGateway(client=mock_supabase)


@pytest.fixture
def report_store(gateway, week):
    """ReportStore with two registered stores, active on `week`."""
    from services.report_store import ReportStore
    return ReportStore(gateway=gateway, known_stores=["Makati", "Ortigas"], window=week)


@pytest.fixture
def sleeps() -> list:
    """Collects pauses requested by a BatchRunner."""
    return []


@pytest.fixture
def runner(sleeps):
    """BatchRunner that records pauses instead of sleeping."""
    from services.batch_runner import BatchRunner
    return BatchRunner(batch_size=2, pause_seconds=0.5, sleep=sleeps.append)


@pytest.fixture
def sample_catalog() -> list:
    return [
        CatalogFactory.create(sku="FG-1001", description="Pork BBQ", type="sku"),
        CatalogFactory.create(sku="FG-1002", description="Chicken Adobo", type="sku"),
        CatalogFactory.create(sku="PK-2001", description="Tray 8x8", type="packaging", um="pc"),
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/reports/state")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
