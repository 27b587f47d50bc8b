import uuid
from collections import defaultdict

import pytest
from fastapi.testclient import TestClient

from app.core.errors import DuplicateRecordError, StoreError
from app.core.security import create_access_token
from app.main import app
from app.services.db_service import BOOKINGS, DOCTORS, PAYMENTS, SERVICES, USERS, get_store


class FakeStore:
    """In-memory stand-in for RecordStore with the columns and constraints of sql/schema.sql."""

    UNIQUE = {
        BOOKINGS: ("treatment", "date", "patientEmail"),
        USERS: ("email",),
    }

    # Columns and NOT NULL fields as in sql/schema.sql; PostgREST rejects anything else
    COLUMNS = {
        SERVICES: {"id", "name", "price", "slots"},
        BOOKINGS: {"id", "treatment", "date", "slot", "patient", "patientEmail", "phone",
                   "price", "paid", "transactionId", "created_at"},
        USERS: {"id", "email", "name", "role", "created_at"},
        DOCTORS: {"id", "name", "email", "specialty", "slots", "img"},
        PAYMENTS: {"id", "booking", "transactionId", "amount", "patientEmail", "created_at"},
    }
    REQUIRED = {
        BOOKINGS: ("treatment", "date", "slot", "patientEmail"),
        USERS: ("email",),
        DOCTORS: ("name", "specialty"),
        PAYMENTS: ("booking", "transactionId"),
    }

    def __init__(self):
        self.tables = defaultdict(list)
        self.writes = []

    def _check_schema(self, table, values, inserting=True):
        unknown = set(values) - self.COLUMNS[table]
        if unknown:
            raise StoreError(f"unknown columns on {table}: {sorted(unknown)}")
        if inserting and any(values.get(k) is None for k in self.REQUIRED.get(table, ())):
            raise StoreError(f"null value in required column on {table}")

    def seed(self, table, *rows):
        stored = []
        for row in rows:
            row = {"id": str(uuid.uuid4()), **row}
            self.tables[table].append(row)
            stored.append(dict(row))
        return stored

    @staticmethod
    def _matches(row, filters):
        return all(row.get(k) == v for k, v in (filters or {}).items())

    async def find(self, table, filters=None, columns="*"):
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]
        if columns != "*":
            keep = columns.split(",")
            rows = [{k: r[k] for k in keep if k in r} for r in rows]
        return rows

    async def find_one(self, table, filters):
        rows = await self.find(table, filters)
        return rows[0] if rows else None

    async def insert_one(self, table, values):
        self._check_schema(table, values)
        key = self.UNIQUE.get(table)
        if key and any(all(r.get(k) == values.get(k) for k in key) for r in self.tables[table]):
            raise DuplicateRecordError(f"duplicate key on {table}")
        self.writes.append(("insert", table))
        return self.seed(table, values)[0]

    async def upsert_one(self, table, values, on_conflict):
        self._check_schema(table, values)
        self.writes.append(("upsert", table))
        for row in self.tables[table]:
            if row.get(on_conflict) == values.get(on_conflict):
                row.update(values)
                return dict(row)
        return self.seed(table, values)[0]

    async def update(self, table, filters, values):
        self._check_schema(table, values, inserting=False)
        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                self.writes.append(("update", table))
                row.update(values)
                updated.append(dict(row))
        return updated

    async def delete(self, table, filters):
        before = len(self.tables[table])
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, filters)]
        deleted = before - len(self.tables[table])
        if deleted:
            self.writes.append(("delete", table))
        return deleted


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(email):
        return {"Authorization": f"Bearer {create_access_token(email)}"}
    return _headers


@pytest.fixture
def admin(store, auth):
    """A stored admin user; returns request headers carrying their token."""
    store.seed(USERS, {"email": "admin@clinic.test", "name": "Admin", "role": "admin"})
    return auth("admin@clinic.test")
