from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from src.b2b_portal.db import supabase as supabase_module
from src.b2b_portal.models.session import Role, Session


class FakeAPIError(Exception):
    """Mimics the PostgREST client error, which carries a Postgres ``code``."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]]):
        self.data = data


class FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: list[tuple[str, str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.limit_to: int | None = None

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeQuery":
        self.operation = "update"
        self.payload = payload
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values: Any) -> "FakeQuery":
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.limit_to = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        for kind, column, value in self.filters:
            if kind == "eq" and row.get(column) != value:
                return False
            if kind == "in" and row.get(column) not in value:
                return False
        return True

    def execute(self) -> FakeResponse:
        self.store.check_failure(self.table_name, self.operation)
        rows = self.store.tables.setdefault(self.table_name, [])

        if self.operation == "insert":
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.store.add_row(self.table_name, record) for record in records]
            return FakeResponse(copy.deepcopy(inserted))

        if self.operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        selected = [copy.deepcopy(row) for row in rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda row: row.get(column) or "", reverse=desc)
        if self.limit_to is not None:
            selected = selected[: self.limit_to]
        if "order_items(" in self.columns:
            items = self.store.tables.get("order_items", [])
            for row in selected:
                row["order_items"] = [copy.deepcopy(item) for item in items if item.get("order_id") == row["id"]]
        return FakeResponse(selected)


class FakeSupabase:
    """In-memory stand-in for the Supabase query builder."""

    unique_columns = {"applications": ("email",), "customers": ("application_id",)}

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self._counter = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, operation: str, code: str | None = "XX000", skip: int = 0) -> None:
        """Make ``operation`` on ``table`` raise, after letting ``skip`` calls through."""
        self.failures[(table, operation)] = {"code": code, "skip": skip}

    def check_failure(self, table: str, operation: str) -> None:
        self.calls.append((table, operation))
        rule = self.failures.get((table, operation))
        if rule is None:
            return
        if rule["skip"] > 0:
            rule["skip"] -= 1
            return
        raise FakeAPIError(f"{operation} on {table} failed", code=rule["code"])

    def add_row(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        rows = self.tables.setdefault(table, [])
        for column in self.unique_columns.get(table, ()):
            value = record.get(column)
            if value is not None and any(row.get(column) == value for row in rows):
                raise FakeAPIError(f"duplicate key value violates unique constraint on {column}", code="23505")
        self._counter += 1
        row = copy.deepcopy(record)
        row.setdefault("id", f"{table}-{self._counter}")
        row.setdefault(
            "created_at",
            (datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=self._counter)).isoformat(),
        )
        rows.append(row)
        return row

    def seed(self, table: str, *records: dict[str, Any]) -> None:
        for record in records:
            self.add_row(table, record)


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeSupabase:
    fake = FakeSupabase()
    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda: fake)
    return fake


@pytest.fixture
def admin() -> Session:
    return Session(user_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def accountant() -> Session:
    return Session(user_id="acct-1", role=Role.ACCOUNTING)


@pytest.fixture
def president() -> Session:
    return Session(user_id="pres-1", role=Role.PRESIDENT)


@pytest.fixture
def customer_session():
    def build(customer_id: str) -> Session:
        return Session(user_id=f"user-{customer_id}", role=Role.CUSTOMER, customer_id=customer_id)

    return build
