"""
Form persistence: contact messages, VIP registrations and inscriptions.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db
from core.schema import TableSpec

CONTACTS = TableSpec(
    name="contacts",
    columns=(
        "id SERIAL PRIMARY KEY",
        "nombre TEXT NOT NULL",
        "email TEXT NOT NULL",
        "mensaje TEXT NOT NULL",
        "fecha_creacion TIMESTAMPTZ NOT NULL DEFAULT now()",
    ),
    added_columns=(
        ("telefono", "TEXT"),
        ("instagram", "TEXT"),
        ("facebook", "TEXT"),
        ("tiktok", "TEXT"),
    ),
)

VIP_REGISTRATIONS = TableSpec(
    name="vip_registrations",
    columns=(
        "id SERIAL PRIMARY KEY",
        "nombre TEXT NOT NULL",
        "email TEXT NOT NULL",
        "contacto TEXT NOT NULL",
        "boletos TEXT NOT NULL",
        "fecha_creacion TIMESTAMPTZ NOT NULL DEFAULT now()",
    ),
)

INSCRIPTIONS = TableSpec(
    name="inscriptions",
    columns=(
        "id SERIAL PRIMARY KEY",
        "nombre TEXT NOT NULL",
        "email TEXT NOT NULL",
        "telefono TEXT NOT NULL",
        "edad INTEGER NOT NULL",
        "placa TEXT NOT NULL",
        "licencia TEXT NOT NULL",
        "fecha_creacion TIMESTAMPTZ NOT NULL DEFAULT now()",
    ),
    added_columns=(("categoria", "TEXT"),),
)

TABLES = (CONTACTS, VIP_REGISTRATIONS, INSCRIPTIONS)


async def _insert_returning_id(pool: asyncpg.Pool, sql: str, *args: Any) -> int:
    row = await db.fetch_one(pool, sql, *args)
    if row is None or "id" not in row:
        raise RuntimeError("Insert did not return an id.")
    return int(row["id"])


async def list_rows(
    pool: asyncpg.Pool,
    table: TableSpec,
    *,
    limit: int | None = None,
    offset: int | None = None,
) -> list[dict[str, Any]]:
    """
    All rows of a form table, newest first.
    """
    page, args = db.page_clause(limit, offset)
    return await db.fetch_all(
        pool,
        f"SELECT * FROM {table.name} ORDER BY fecha_creacion DESC, id DESC {page}",
        *args,
    )


async def insert_contact(
    pool: asyncpg.Pool,
    *,
    nombre: str,
    email: str,
    telefono: str,
    mensaje: str,
    instagram: str | None = None,
    facebook: str | None = None,
    tiktok: str | None = None,
) -> int:
    return await _insert_returning_id(
        pool,
        """
        INSERT INTO contacts (nombre, email, telefono, mensaje, instagram, facebook, tiktok)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        RETURNING id
        """,
        nombre,
        email,
        telefono,
        mensaje,
        instagram,
        facebook,
        tiktok,
    )


async def insert_vip_registration(
    pool: asyncpg.Pool,
    *,
    nombre: str,
    email: str,
    contacto: str,
    boletos: str,
) -> int:
    return await _insert_returning_id(
        pool,
        """
        INSERT INTO vip_registrations (nombre, email, contacto, boletos)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        nombre,
        email,
        contacto,
        boletos,
    )


async def insert_inscription(
    pool: asyncpg.Pool,
    *,
    nombre: str,
    email: str,
    telefono: str,
    edad: int,
    placa: str,
    licencia: str,
    categoria: str | None = None,
) -> int:
    return await _insert_returning_id(
        pool,
        """
        INSERT INTO inscriptions (nombre, email, telefono, edad, placa, licencia, categoria)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        RETURNING id
        """,
        nombre,
        email,
        telefono,
        edad,
        placa,
        licencia,
        categoria,
    )
