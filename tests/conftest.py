from __future__ import annotations

import copy
import itertools
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from energylink.main import create_app
from energylink.services.auth.session import SessionRegistry
from energylink.services.discovery.search import derive_entries


class FakeAuthError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FakeQuery:
    """Chainable stand-in for the PostgREST query builder."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.row_limit: int | None = None
        self.count: str | None = None

    def select(self, *columns: str, count: str | None = None) -> "FakeQuery":
        self.action = "select"
        self.count = count
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self.action, self.payload = "insert", payload
        return self

    def upsert(self, payload: Any) -> "FakeQuery":
        self.action, self.payload = "upsert", payload
        return self

    def update(self, payload: Any) -> "FakeQuery":
        self.action, self.payload = "update", payload
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.row_limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self) -> SimpleNamespace:
        self.db.calls.append((self.table, self.action, copy.deepcopy(self.payload), list(self.filters)))
        error = self.db.failures.get(self.table)
        if error is not None:
            raise error

        rows = self.db.tables.setdefault(self.table, [])
        if self.action == "select":
            data = [copy.deepcopy(row) for row in rows if self._matches(row)]
            if self.row_limit is not None:
                data = data[: self.row_limit]
            return SimpleNamespace(data=data, count=len(rows) if self.count else None)

        if self.action == "insert":
            row = dict(self.payload)
            row.setdefault("id", f"{self.table}-{next(self.db.ids)}")
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=None)

        if self.action == "upsert":
            row = dict(self.payload)
            for index, existing in enumerate(rows):
                if existing.get("id") == row.get("id"):
                    rows[index] = {**existing, **row}
                    return SimpleNamespace(data=[copy.deepcopy(rows[index])], count=None)
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=None)

        updated = []
        for row in rows:
            if self._matches(row):
                row.update(self.payload)
                updated.append(copy.deepcopy(row))
        return SimpleNamespace(data=updated, count=None)


class FakeSubscription:
    def __init__(self, auth: "FakeAuth", callback: Callable) -> None:
        self.auth = auth
        self.callback = callback

    def unsubscribe(self) -> None:
        if self.callback in self.auth.listeners:
            self.auth.listeners.remove(self.callback)


class FakeAuth:
    """Minimal GoTrue surface; listeners are notified synchronously."""

    def __init__(self) -> None:
        self.accounts: dict[str, dict] = {}
        self.listeners: list[Callable] = []
        self.session: SimpleNamespace | None = None
        self.ids = itertools.count(1)

    def _notify(self, event: str) -> None:
        for listener in list(self.listeners):
            listener(event, self.session)

    def _sign_in(self, account: dict) -> SimpleNamespace:
        user = SimpleNamespace(id=account["id"], email=account["email"], user_metadata=account["metadata"])
        self.session = SimpleNamespace(user=user, access_token=f"token-{user.id}")
        self._notify("SIGNED_IN")
        return SimpleNamespace(user=user, session=self.session)

    def sign_up(self, credentials: dict) -> SimpleNamespace:
        email = credentials["email"]
        if email in self.accounts:
            raise FakeAuthError("User already registered")
        account = {
            "id": f"user-{next(self.ids)}",
            "email": email,
            "password": credentials["password"],
            "metadata": credentials.get("options", {}).get("data", {}),
        }
        self.accounts[email] = account
        return self._sign_in(account)

    def sign_in_with_password(self, credentials: dict) -> SimpleNamespace:
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        return self._sign_in(account)

    def sign_out(self) -> None:
        self.session = None
        self._notify("SIGNED_OUT")

    def get_session(self) -> SimpleNamespace | None:
        return self.session

    def on_auth_state_change(self, callback: Callable) -> FakeSubscription:
        self.listeners.append(callback)
        return FakeSubscription(self, callback)


class FakeSupabase:
    """In-memory replacement for the supabase client's table and auth APIs."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple] = []
        self.ids = itertools.count(1)
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *rows: dict) -> None:
        self.tables.setdefault(table, []).extend(copy.deepcopy(row) for row in rows)


@pytest.fixture(autouse=True)
def clear_derivation_cache():
    derive_entries.cache_clear()
    yield
    derive_entries.cache_clear()


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def sessions(supabase: FakeSupabase) -> SessionRegistry:
    return SessionRegistry(supabase)


@pytest.fixture
def app(sessions: SessionRegistry):
    return create_app(sessions=sessions)


@pytest.fixture
def api_client(app):
    with TestClient(app) as client:
        yield client
