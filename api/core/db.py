"""
Async database access helpers (raw SQL) using asyncpg.

The pool is a process-scoped handle: FastAPI creates it on startup, keeps it
on `app.state.pool` and closes it on shutdown (see `api/main.py`). Handlers
receive it through the `get_pool` dependency and pass it down explicitly.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    return _sanitize_database_url(config.raw_database_url())


async def create_pool() -> asyncpg.Pool:
    return await asyncpg.create_pool(
        dsn=database_url(),
        ssl=config.database_ssl(),
        min_size=1,
        max_size=5,
        command_timeout=30,
    )


async def connect() -> asyncpg.Connection:
    """
    Single connection for one-off admin commands.
    """
    return await asyncpg.connect(dsn=database_url(), ssl=config.database_ssl(), command_timeout=30)


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()


def get_pool(request: Request) -> asyncpg.Pool:
    """
    FastAPI dependency returning the pool created in the lifespan handler.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. Create it in the app lifespan.")
    return pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(pool: asyncpg.Pool, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(pool: asyncpg.Pool, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(pool: asyncpg.Pool, sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the command status tag,
    e.g. "UPDATE 1".
    """
    return await pool.execute(sql, *args)


def affected_rows(status: str) -> int:
    """
    Parse the row count out of a command status tag ("UPDATE 3" -> 3).
    """
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0


def page_clause(limit: int | None, offset: int | None, *, first_param: int = 1) -> tuple[str, list[int]]:
    """
    Build an optional `LIMIT/OFFSET` suffix and its arguments.

    With neither value the whole table is returned.
    """
    clauses: list[str] = []
    args: list[int] = []
    n = first_param
    if limit is not None:
        clauses.append(f"LIMIT ${n}")
        args.append(limit)
        n += 1
    if offset:
        clauses.append(f"OFFSET ${n}")
        args.append(offset)
    return " ".join(clauses), args
