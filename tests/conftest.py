"""Shared fixtures: an in-memory stand-in for the Supabase client and realtime feed."""

import itertools
import threading
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from allwork.database.supabase_client import get_supabase
from allwork.modules.auth.service import clear_auth_cache


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload: Any = None
        self.filters: List = []
        self.order_by: Optional[str] = None
        self.desc = False
        self.limit_n: Optional[int] = None
        self.count_mode: Optional[str] = None

    def select(self, columns: str = "*", count: Optional[str] = None):
        self.op = "select"
        self.count_mode = count
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def upsert(self, payload):
        self.op, self.payload = "upsert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by, self.desc = column, desc
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    def execute(self) -> FakeResponse:
        with self.db.lock:
            self.db.calls.append((self.table_name, self.op))
            failure = self.db.failures.get((self.table_name, self.op))
            if failure:
                raise Exception(failure)
            rows = self.db.tables.setdefault(self.table_name, [])
            return getattr(self, f"_{self.op}")(rows)

    def _select(self, rows):
        found = [dict(r) for r in rows if self._matches(r)]
        if self.order_by:
            found.sort(key=lambda r: (r.get(self.order_by) is None, r.get(self.order_by)), reverse=self.desc)
        if self.limit_n is not None:
            found = found[: self.limit_n]
        count = len(found) if self.count_mode == "exact" else None
        return FakeResponse(found, count)

    def _insert(self, rows):
        payloads = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for payload in payloads:
            row = self.db.with_defaults(self.table_name, dict(payload))
            rows.append(row)
            inserted.append(dict(row))
        return FakeResponse(inserted)

    def _upsert(self, rows):
        payloads = self.payload if isinstance(self.payload, list) else [self.payload]
        saved = []
        for payload in payloads:
            existing = next((r for r in rows if r.get("id") == payload.get("id")), None)
            if existing is None:
                existing = self.db.with_defaults(self.table_name, dict(payload))
                rows.append(existing)
            else:
                existing.update(payload)
            saved.append(dict(existing))
        return FakeResponse(saved)

    def _update(self, rows):
        updated = []
        for row in rows:
            if self._matches(row):
                row.update(self.payload)
                updated.append(dict(row))
        return FakeResponse(updated)

    def _delete(self, rows):
        removed = [r for r in rows if self._matches(r)]
        self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
        return FakeResponse([dict(r) for r in removed])


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, Dict[str, str]] = {}
        self.tokens: Dict[str, SimpleNamespace] = {}
        self._ids = itertools.count(1)

    def add_user(self, email: str, password: str = "secret123") -> SimpleNamespace:
        user = SimpleNamespace(id=f"user-{next(self._ids)}", email=email, user_metadata={})
        self.users[email] = {"password": password, "id": user.id}
        token = f"token-{user.id}"
        self.tokens[token] = user
        user.token = token
        return user

    def sign_up(self, credentials):
        if credentials["email"] in self.users:
            raise Exception("User already registered")
        user = self.add_user(credentials["email"], credentials["password"])
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        record = self.users.get(credentials["email"])
        if not record or record["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = f"token-{record['id']}"
        return SimpleNamespace(user=self.tokens[token], session=SimpleNamespace(access_token=token))

    def get_user(self, jwt=None):
        user = self.tokens.get(jwt)
        if user is None:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=user)

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.failures: Dict[tuple, str] = {}
        self.auth = FakeAuth()
        self.lock = threading.RLock()
        self._ids = {"teams": itertools.count(1), "tasks": itertools.count(1)}
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def with_defaults(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        if table in self._ids and row.get("id") is None:
            row["id"] = next(self._ids[table])
        if table == "tasks":
            self._clock += timedelta(seconds=1)
            row.setdefault("created_at", self._clock.isoformat())
            row.setdefault("status", "todo")
            if row.get("priority") is None:
                row["priority"] = "medium"
        if table == "team_members":
            row.setdefault("role", "member")
        return row

    def fail(self, table: str, op: str, message: str = "network down"):
        self.failures[(table, op)] = message

    def recover(self, table: str, op: str):
        self.failures.pop((table, op), None)

    def count_calls(self, table: str, op: str) -> int:
        return sum(1 for call in self.calls if call == (table, op))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    # Seeding helpers

    def add_profile(self, user, first_name="", last_name="", position="") -> Dict[str, Any]:
        display = f"{first_name} {last_name}".strip() or user.email.split("@")[0]
        row = {
            "id": user.id,
            "email": user.email,
            "display_name": display,
            "first_name": first_name,
            "last_name": last_name,
            "position": position,
        }
        self.tables.setdefault("profiles", []).append(row)
        return row

    def add_team(self, name: str) -> Dict[str, Any]:
        row = self.with_defaults("teams", {"name": name})
        self.tables.setdefault("teams", []).append(row)
        return row

    def add_member(self, team_id: int, user_id: str, role: str = "member") -> Dict[str, Any]:
        row = {"team_id": team_id, "user_id": user_id, "role": role}
        self.tables.setdefault("team_members", []).append(row)
        return row

    def add_task(self, team_id: int, title: str, assignee_id: str, status: str = "todo") -> Dict[str, Any]:
        row = self.with_defaults("tasks", {
            "title": title,
            "team_id": team_id,
            "assignee_id": assignee_id,
            "status": status,
        })
        self.tables.setdefault("tasks", []).append(row)
        return row


class FakeChannel:
    def __init__(self, team_id, callback):
        self.team_id = team_id
        self.callback = callback


class FakeTaskFeed:
    def __init__(self):
        self.channels: List[FakeChannel] = []
        self.removed: List[FakeChannel] = []

    async def subscribe(self, team_id, callback):
        channel = FakeChannel(team_id, callback)
        self.channels.append(channel)
        return channel

    async def unsubscribe(self, channel):
        self.removed.append(channel)


@pytest.fixture(autouse=True)
def _reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def feed() -> FakeTaskFeed:
    return FakeTaskFeed()


@pytest.fixture
def alice(fake_db):
    user = fake_db.auth.add_user("alice@example.com")
    fake_db.add_profile(user, "Alice", "Wong")
    return user


@pytest.fixture
def bob(fake_db):
    user = fake_db.auth.add_user("bob@example.com")
    fake_db.add_profile(user, "Bob", "")
    return user


@pytest.fixture
def team(fake_db, alice, bob):
    row = fake_db.add_team("Developers")
    fake_db.add_member(row["id"], alice.id, "owner")
    fake_db.add_member(row["id"], bob.id)
    return row


@pytest.fixture
def client(fake_db, feed):
    from allwork.main import app
    from allwork.modules.board.routes import get_task_feed

    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_task_feed] = lambda: feed
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {user.token}"}


def as_user(user) -> Dict[str, Any]:
    return {"id": user.id, "email": user.email}
