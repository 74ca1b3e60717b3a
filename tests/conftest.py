"""
In-memory stand-in for the Supabase client: enough of the PostgREST query
builder, auth and storage surface for the repositories and routers.
"""

import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from madrasah.core.cache import QueryCache
from madrasah.core.config import Settings
from madrasah.core.context import AppContext
from madrasah.main import create_app

ADMIN_ID = "00000000-0000-0000-0000-000000000001"
AUTH = {"Authorization": "Bearer mock-admin"}


class FakeResult:
    def __init__(self, data):
        self.data = data
        self.count = None


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.on_conflict = ""
        self.filters = []
        self.order_by = None
        self.single = False

    # -- verbs ---------------------------------------------------------------
    def select(self, columns="*", count=None):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, changes):
        self.op, self.payload = "update", changes
        return self

    def delete(self):
        self.op = "delete"
        return self

    def upsert(self, payload, on_conflict=""):
        self.op, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    # -- filters -------------------------------------------------------------
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and str(row[column]) >= str(value))
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and str(row[column]) <= str(value))
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def maybe_single(self):
        self.single = True
        return self

    # -- execution -------------------------------------------------------------
    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        error = self.db.errors.pop((self.table, self.op), None)
        if error is not None:
            raise error
        rows = self.db.rows(self.table)

        if self.op == "select":
            found = [dict(r) for r in rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                found.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
            if self.single:
                return FakeResult(found[0] if found else None)
            return FakeResult(found)

        if self.op == "insert":
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            return FakeResult([self.db.add(self.table, r) for r in records])

        if self.op == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    changed.append(dict(row))
            return FakeResult(changed)

        if self.op == "delete":
            gone = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResult([dict(r) for r in gone])

        if self.op == "upsert":
            return FakeResult(self._upsert(rows))
        raise AssertionError(self.op)

    def _upsert(self, rows):
        keys = [k.strip() for k in self.on_conflict.split(",") if k.strip()]
        records = self.payload if isinstance(self.payload, list) else [self.payload]

        # Postgres rejects a statement that touches the same conflict row twice
        seen = set()
        for record in records:
            key = tuple(record.get(k) for k in keys)
            if key in seen:
                raise APIError({
                    "message": "ON CONFLICT DO UPDATE command cannot affect row a second time",
                    "code": "21000",
                })
            seen.add(key)

        saved = []
        for record in records:
            existing = next(
                (r for r in rows if all(r.get(k) == record.get(k) for k in keys)),
                None,
            )
            if existing is None:
                saved.append(self.db.add(self.table, record))
            else:
                existing.update(record)
                saved.append(dict(existing))
        return saved


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.files[(self.name, path)] = (file, file_options)
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.files = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.signed_out = []
        self.admin = SimpleNamespace(sign_out=lambda jwt, scope="global": self.signed_out.append(jwt))

    def get_user(self, token):
        user = self.tokens.get(token)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials):
        for token, user in self.tokens.items():
            if user.email == credentials["email"]:
                session = SimpleNamespace(access_token=token, refresh_token="refresh-" + token)
                return SimpleNamespace(user=user, session=session)
        raise Exception("Invalid login credentials")


class FakeSupabase:
    """
    Tables are lists of dicts. ``unique`` declares single-column unique
    constraints; ``fail(table, op, error)`` makes the next matching call raise.
    """

    def __init__(self, unique=None):
        self.tables = {}
        self.unique = unique or {}
        self.calls = []
        self.errors = {}
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self._ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def add(self, table, record):
        rows = self.rows(table)
        for column in self.unique.get(table, ()):
            if any(r.get(column) == record.get(column) for r in rows):
                raise APIError({
                    "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                    "code": "23505",
                })
        row = {"id": f"{table}-{next(self._ids)}", "created_at": "2026-10-01T00:00:00", **record}
        rows.append(row)
        return dict(row)

    def seed(self, table, *records):
        return [self.add(table, r) for r in records]

    def fail(self, table, op, error):
        self.errors[(table, op)] = error

    def count(self, table, op):
        return self.calls.count((table, op))


@pytest.fixture
def settings():
    return Settings(
        AUTH_MODE="mock",
        SUPABASE_URL="https://project.supabase.test",
        SUPABASE_KEY="anon",
        ERROR_LOCALE="bn",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def db():
    return FakeSupabase(unique={"students": ("student_id",), "staff": ("staff_id",)})


@pytest.fixture
def ctx(settings, db):
    return AppContext(
        settings=settings,
        db=db,
        auth_client_factory=lambda: db,
        cache=QueryCache(ttl_seconds=settings.CACHE_TTL_SECONDS),
    )


@pytest.fixture
def client(ctx):
    app = create_app(context=ctx)
    with TestClient(app, headers=AUTH) as test_client:
        yield test_client
