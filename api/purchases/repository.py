"""
Purchase persistence.

Each category has a purchase table and a proof ("comprobante") table. The proof
table is an append-only audit trail with a denormalised copy of the submitted
form; nothing references the purchase row it describes.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.schema import TableSpec

from .categories import CATEGORIES, PurchaseCategory

PURCHASE_FIELDS = ("nombre", "email", "telefono", "cantidad", "fecha_evento", "precio")
PROOF_FIELDS = ("nombre", "email", "telefono", "cantidad", "fecha_evento", "total")


def _extra_type(category: PurchaseCategory, column: str) -> str:
    return "INTEGER" if column in category.int_fields else "TEXT"


def purchase_table(category: PurchaseCategory) -> TableSpec:
    text_extras = tuple(
        f"{c} TEXT NOT NULL" for c in category.extra_fields if c not in category.int_fields
    )
    return TableSpec(
        name=category.table,
        columns=(
            "id SERIAL PRIMARY KEY",
            "nombre TEXT NOT NULL",
            "email TEXT NOT NULL",
            "telefono TEXT NOT NULL",
            "cantidad INTEGER NOT NULL",
            "fecha_evento TEXT NOT NULL",
            *text_extras,
            "fecha_creacion TIMESTAMPTZ NOT NULL DEFAULT now()",
        ),
        added_columns=(
            ("precio", "NUMERIC(10, 2)"),
            ("comprobante", "TEXT"),
            *((c, "INTEGER") for c in category.int_fields),
        ),
    )


def proof_table(category: PurchaseCategory) -> TableSpec:
    return TableSpec(
        name=category.proof_table,
        columns=(
            "id SERIAL PRIMARY KEY",
            "nombre TEXT NOT NULL",
            "email TEXT NOT NULL",
            "telefono TEXT NOT NULL",
            "cantidad INTEGER NOT NULL",
            "fecha_evento TEXT NOT NULL",
            "total NUMERIC(10, 2) NOT NULL",
            *(f"{c} {_extra_type(category, c)}" for c in category.extra_fields),
            "comprobante TEXT NOT NULL",
            "fecha_subida TIMESTAMPTZ NOT NULL DEFAULT now()",
        ),
    )


TABLES = tuple(
    table
    for category in CATEGORIES.values()
    for table in (purchase_table(category), proof_table(category))
)


async def _insert(pool: asyncpg.Pool, table: str, values: dict[str, Any]) -> int:
    columns = list(values)
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    row = await db.fetch_one(
        pool,
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING id",
        *values.values(),
    )
    if row is None or "id" not in row:
        raise RuntimeError(f"Insert into {table} did not return an id.")
    return int(row["id"])


async def insert_purchase(pool: asyncpg.Pool, category: PurchaseCategory, values: dict[str, Any]) -> int:
    """
    Insert a purchase row. `values` holds PURCHASE_FIELDS plus the category extras.
    """
    allowed = (*PURCHASE_FIELDS, *category.extra_fields)
    return await _insert(pool, category.table, {k: values.get(k) for k in allowed})


async def insert_proof_record(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    values: dict[str, Any],
    *,
    comprobante_url: str,
) -> int:
    allowed = (*PROOF_FIELDS, *category.extra_fields)
    row = {k: values.get(k) for k in allowed}
    row["comprobante"] = comprobante_url
    return await _insert(pool, category.proof_table, row)


async def find_latest_purchase_id(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    *,
    nombre: str,
    email: str,
) -> int | None:
    """
    Most recent purchase for this nombre+email, or None.

    Not unique: a buyer with several purchases always resolves to the newest.
    """
    row = await db.fetch_one(
        pool,
        f"""
        SELECT id
        FROM {category.table}
        WHERE nombre = $1
          AND email = $2
        ORDER BY fecha_creacion DESC, id DESC
        LIMIT 1
        """,
        nombre,
        email,
    )
    return int(row["id"]) if row is not None else None


async def set_purchase_proof(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    purchase_id: int,
    comprobante_url: str,
) -> bool:
    """
    Point a purchase at its proof, replacing any earlier one.
    Returns False when no row has that id.
    """
    status = await db.execute(
        pool,
        f"UPDATE {category.table} SET comprobante = $1 WHERE id = $2",
        comprobante_url,
        purchase_id,
    )
    return db.affected_rows(status) > 0


async def list_purchases(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    *,
    limit: int | None = None,
    offset: int | None = None,
) -> list[dict[str, Any]]:
    page, args = db.page_clause(limit, offset)
    return await db.fetch_all(
        pool,
        f"SELECT * FROM {category.table} ORDER BY fecha_creacion DESC, id DESC {page}",
        *args,
    )


async def list_proof_records(
    pool: asyncpg.Pool,
    category: PurchaseCategory,
    *,
    limit: int | None = None,
    offset: int | None = None,
) -> list[dict[str, Any]]:
    page, args = db.page_clause(limit, offset)
    return await db.fetch_all(
        pool,
        f"SELECT * FROM {category.proof_table} ORDER BY fecha_subida DESC, id DESC {page}",
        *args,
    )
