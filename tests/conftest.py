"""
Shared fixtures.

No real network calls in tests: the Supabase client is replaced by an
in-process fake that understands the handful of query-builder calls the
storage layer makes, the ON DELETE CASCADE rules and the project
functions from sql/schema.sql.
"""

import copy
import itertools
from typing import Any, Optional
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from hometrack.config import SupabaseSettings
from hometrack.identity import Identity
from hometrack.services.storage import (
    InMemoryHomeStorage,
    SupabaseClient,
    SupabaseHomeStorage,
)


CHILD_TABLES = ("tasks", "photos", "project_notes", "estimates", "receipts", "contractors")


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeDatabase:
    """
    Tables as lists of dict rows.

    Like NOW() in Postgres, created_at is one value per statement, so rows
    inserted together tie. Each function call is a transaction: a failure
    restores every table.
    """

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.failing_tables: set[str] = set()
        self.failing_rpcs: set[str] = set()
        self.rpc_calls: list[tuple[str, dict]] = []
        self._clock = itertools.count(1000, 1000)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def check(self, table: str) -> None:
        if table in self.failing_tables:
            raise APIError({"message": f"permission denied for table {table}", "code": "42501"})

    def statement_time(self) -> int:
        return next(self._clock)

    def insert(
        self,
        table: str,
        row: dict[str, Any],
        created_at: Optional[int] = None,
    ) -> dict[str, Any]:
        stored = dict(row)
        if stored.get("id") is None:
            stored["id"] = str(uuid4())
        stored.setdefault("created_at", created_at or self.statement_time())
        self.rows(table).append(stored)
        return dict(stored)

    def delete_where(self, table: str, column: str, value: Any) -> list[dict[str, Any]]:
        removed = [r for r in self.rows(table) if r.get(column) == value]
        self.tables[table] = [r for r in self.rows(table) if r.get(column) != value]
        if table == "projects":
            for project in removed:
                for child in CHILD_TABLES:
                    self.delete_where(child, "project_id", project["id"])
        return removed

    def rpc(self, name: str, params: dict[str, Any]):
        self.rpc_calls.append((name, params))
        if name in self.failing_rpcs:
            raise APIError({"message": f"function {name} failed", "code": "P0001"})
        snapshot = copy.deepcopy(self.tables)
        try:
            if name == "insert_project_children":
                self._insert_children(params["p_project_id"], params["p_table"], params["p_rows"])
            elif name == "replace_project_children":
                self._replace(params["p_project_id"], params["p_table"], params["p_rows"])
            elif name == "replace_all_project_children":
                for table, rows in params["p_children"].items():
                    self._replace(params["p_project_id"], table, rows)
            elif name == "update_project_with_children":
                self._update_project(
                    params["p_project_id"], params["p_project"], params["p_children"]
                )
            else:
                raise APIError({"message": f"Unknown function {name}", "code": "42883"})
        except APIError:
            self.tables = snapshot
            raise
        return None

    def _project(self, project_id: str) -> dict[str, Any]:
        for project in self.rows("projects"):
            if project["id"] == project_id:
                return project
        raise APIError({"message": f"Project not found: {project_id}", "code": "P0002"})

    def _insert_children(self, project_id: str, table: str, rows: list[dict[str, Any]]) -> None:
        if table not in CHILD_TABLES:
            raise APIError({"message": f"Unknown child table: {table}", "code": "22023"})
        self._project(project_id)
        self.check(table)
        # clock_timestamp() + ordinality
        now = self.statement_time()
        for position, row in enumerate(rows, start=1):
            self.insert(table, {**row, "project_id": project_id, "created_at": now + position})

    def _replace(self, project_id: str, table: str, rows: list[dict[str, Any]]) -> None:
        if table not in CHILD_TABLES:
            raise APIError({"message": f"Unknown child table: {table}", "code": "22023"})
        self.delete_where(table, "project_id", project_id)
        self._insert_children(project_id, table, rows)

    def _update_project(
        self,
        project_id: str,
        values: dict[str, Any],
        children: dict[str, list[dict[str, Any]]],
    ) -> None:
        self._project(project_id).update(values)
        for table, rows in children.items():
            self._replace(project_id, table, rows)


class FakeQuery:
    """Mimics the postgrest request builder: chain, then execute()."""

    def __init__(self, db: FakeDatabase, table: str):
        self._db = db
        self._table = table
        self._operation = "select"
        self._payload: Any = None
        self._filters: list[tuple[str, Any]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def select(self, *columns):
        self._operation = "select"
        return self

    def insert(self, rows, default_to_null: bool = True):
        self._operation = "insert"
        self._payload = rows
        return self

    def update(self, values):
        self._operation = "update"
        self._payload = values
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self):
        db = self._db
        db.check(self._table)

        if self._operation == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            now = db.statement_time()
            return FakeResponse([db.insert(self._table, row, now) for row in payload])

        if self._operation == "update":
            updated = []
            for row in db.rows(self._table):
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self._operation == "delete":
            removed = []
            for column, value in self._filters[:1]:
                removed = db.delete_where(self._table, column, value)
            return FakeResponse(removed)

        rows = [dict(r) for r in db.rows(self._table) if self._matches(r)]
        if self._order:
            column, desc = self._order
            # Postgres gives no order among ties; returning them newest
            # first keeps tests from relying on insertion order.
            present = [r for r in reversed(rows) if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            # Postgres puts NULLs first for DESC, last for ASC
            rows = missing + present if desc else present + missing
        if self._limit:
            rows = rows[: self._limit]
        return FakeResponse(rows)


class FakeRpc:
    def __init__(self, db: FakeDatabase, name: str, params: dict):
        self._db = db
        self._name = name
        self._params = params

    def execute(self):
        return FakeResponse(self._db.rpc(self._name, self._params))


class FakeSupabase:
    """Stands in for supabase.Client."""

    def __init__(self, db: FakeDatabase):
        self.db = db
        self.postgrest = MagicMock()
        self.auth = MagicMock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.db, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self.db, name, params)


@pytest.fixture
def supabase_settings():
    return SupabaseSettings(url="https://example.supabase.co", anon_key="test-anon-key")


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def supabase_client(fake_db, supabase_settings):
    return SupabaseClient(settings=supabase_settings, client=FakeSupabase(fake_db))


@pytest.fixture
def supabase_storage(supabase_client):
    return SupabaseHomeStorage(supabase_client)


@pytest.fixture
def memory_storage():
    return InMemoryHomeStorage.with_sample_data()


@pytest.fixture
def user_identity():
    return Identity(user_id="user-1", email="owner@example.com", access_token="jwt")


@pytest.fixture
def seeded_home(fake_db):
    """A home row owned by user-1."""
    return fake_db.insert("homes", {
        "id": "home-1",
        "user_id": "user-1",
        "address": "12 Elm Street",
        "purchase_price": 300000,
        "current_value": 350000,
        "property_type": "single-family",
    })
