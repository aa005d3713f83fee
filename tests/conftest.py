from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core import db
from forms import repository as forms_repository
from main import app
from purchases import repository as purchases_repository

EPOCH = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def page(rows, limit=None, offset=None):
    rows = rows[offset or 0:]
    return rows[:limit] if limit is not None else rows


class FakeStore:
    """
    In-memory stand-in for the repository layer.

    Every insert gets the next id and a strictly increasing timestamp.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self._ids: dict[str, int] = defaultdict(int)
        self._tick = 0

    def add(self, table: str, values: dict[str, Any], *, time_column: str = "fecha_creacion") -> int:
        self._ids[table] += 1
        self._tick += 1
        row = {"id": self._ids[table], **values, time_column: EPOCH + timedelta(seconds=self._tick)}
        self.tables[table].append(row)
        return row["id"]

    def newest_first(self, table: str, time_column: str = "fecha_creacion") -> list[dict[str, Any]]:
        return sorted(self.tables[table], key=lambda r: (r[time_column], r["id"]), reverse=True)

    def row(self, table: str, row_id: int) -> dict[str, Any]:
        return next(r for r in self.tables[table] if r["id"] == row_id)

    def install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        store = self

        async def insert_contact(pool, **values):
            return store.add("contacts", values)

        async def insert_vip_registration(pool, **values):
            return store.add("vip_registrations", values)

        async def insert_inscription(pool, **values):
            return store.add("inscriptions", values)

        async def list_rows(pool, table, *, limit=None, offset=None):
            return page(store.newest_first(table.name), limit, offset)

        async def insert_purchase(pool, category, values):
            return store.add(category.table, {**values, "comprobante": None})

        async def insert_proof_record(pool, category, values, *, comprobante_url):
            row = {k: v for (k, v) in values.items() if k != "compra_id"}
            return store.add(category.proof_table, {**row, "comprobante": comprobante_url}, time_column="fecha_subida")

        async def find_latest_purchase_id(pool, category, *, nombre, email):
            for row in store.newest_first(category.table):
                if row["nombre"] == nombre and row["email"] == email:
                    return row["id"]
            return None

        async def set_purchase_proof(pool, category, purchase_id, comprobante_url):
            for row in store.tables[category.table]:
                if row["id"] == purchase_id:
                    row["comprobante"] = comprobante_url
                    return True
            return False

        async def list_purchases(pool, category, *, limit=None, offset=None):
            return page(store.newest_first(category.table), limit, offset)

        async def list_proof_records(pool, category, *, limit=None, offset=None):
            return page(store.newest_first(category.proof_table, "fecha_subida"), limit, offset)

        for name, fn in {
            "insert_contact": insert_contact,
            "insert_vip_registration": insert_vip_registration,
            "insert_inscription": insert_inscription,
            "list_rows": list_rows,
        }.items():
            monkeypatch.setattr(forms_repository, name, fn)

        for name, fn in {
            "insert_purchase": insert_purchase,
            "insert_proof_record": insert_proof_record,
            "find_latest_purchase_id": find_latest_purchase_id,
            "set_purchase_proof": set_purchase_proof,
            "list_purchases": list_purchases,
            "list_proof_records": list_proof_records,
        }.items():
            monkeypatch.setattr(purchases_repository, name, fn)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setenv("UPLOAD_DIR", str(path))
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://monkeyranch.test")
    monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
    return path


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    fake.install(monkeypatch)
    return fake


@pytest.fixture
def client(store, upload_dir):
    # The lifespan (real pool) only runs when TestClient is used as a context manager.
    app.dependency_overrides[db.get_pool] = lambda: object()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
