"""
Startup schema bootstrap.

Each feature declares its tables as `TableSpec`s. `ensure_schema` creates
missing tables and adds columns introduced after a table's first release.
It is additive only: nothing is ever dropped or narrowed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

import asyncpg

from . import db
from .outcomes import Outcome, best_effort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableSpec:
    name: str
    # Column definitions from the table's first release, e.g. "nombre TEXT NOT NULL".
    columns: tuple[str, ...]
    # (column, type) pairs added later.
    added_columns: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def create_sql(self) -> str:
        body = ",\n  ".join(self.columns)
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n  {body}\n)"

    def add_column_sql(self) -> list[str]:
        return [
            f"ALTER TABLE {self.name} ADD COLUMN IF NOT EXISTS {column} {sql_type}"
            for (column, sql_type) in self.added_columns
        ]

    def statements(self) -> list[str]:
        return [self.create_sql(), *self.add_column_sql()]


async def _apply(pool: asyncpg.Pool, table: TableSpec) -> int:
    statements = table.statements()
    for sql in statements:
        await db.execute(pool, sql)
    return len(statements)


async def ensure_schema(pool: asyncpg.Pool, tables: Iterable[TableSpec]) -> list[Outcome]:
    """
    Create/extend every table. A failing table is logged and skipped; the rest
    still run. Returns one outcome per table.
    """
    outcomes: list[Outcome] = []
    for table in tables:
        outcome = await best_effort(f"schema:{table.name}", _apply(pool, table))
        if outcome.ok:
            logger.info("table_ready table=%s statements=%s", table.name, outcome.value)
        else:
            logger.warning("table_failed table=%s error=%s", table.name, outcome.error)
        outcomes.append(outcome)
    return outcomes
