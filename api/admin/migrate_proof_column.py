"""
Make sure every purchase and proof table has a TEXT `comprobante` column.

Older deployments created the column with a narrower type (or not at all).
The column is added when missing and widened to TEXT otherwise; it is never
dropped, so existing proof links survive.

Usage: python -m admin.migrate_proof_column
"""

from __future__ import annotations

import argparse
import asyncio
import logging

import asyncpg

from core import db
from core.outcomes import Outcome, best_effort
from purchases.categories import CATEGORIES

logger = logging.getLogger(__name__)

TABLES = [
    *(c.table for c in CATEGORIES.values()),
    *(c.proof_table for c in CATEGORIES.values()),
]


async def column_type(conn: asyncpg.Connection, table: str, column: str) -> str | None:
    row = await conn.fetchrow(
        """
        SELECT data_type
        FROM information_schema.columns
        WHERE table_name = $1
          AND column_name = $2
        """,
        table,
        column,
    )
    return row["data_type"] if row is not None else None


async def migrate_table(conn: asyncpg.Connection, table: str) -> str:
    current = await column_type(conn, table, "comprobante")
    if current is None:
        await conn.execute(f"ALTER TABLE {table} ADD COLUMN IF NOT EXISTS comprobante TEXT")
        return "added"
    if current == "text":
        return "unchanged"
    await conn.execute(f"ALTER TABLE {table} ALTER COLUMN comprobante TYPE TEXT USING comprobante::text")
    return f"altered from {current}"


async def migrate(tables: list[str]) -> list[Outcome]:
    conn = await db.connect()
    outcomes: list[Outcome] = []
    try:
        for table in tables:
            outcome = await best_effort(f"comprobante:{table}", migrate_table(conn, table))
            if outcome.ok:
                logger.info("comprobante_column table=%s result=%s", table, outcome.value)
            else:
                logger.warning("comprobante_column_failed table=%s error=%s", table, outcome.error)
            outcomes.append(outcome)
    finally:
        await conn.close()
    return outcomes


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ensure comprobante columns are TEXT.")
    parser.add_argument("tables", nargs="*", default=TABLES)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    outcomes = asyncio.run(migrate(args.tables))
    return 0 if all(o.ok for o in outcomes) else 1


if __name__ == "__main__":
    raise SystemExit(main())
