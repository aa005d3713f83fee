"""
Print the columns of the purchase tables (or the tables given).

Usage: python -m admin.check_schema [table ...]
"""

from __future__ import annotations

import argparse
import asyncio
import logging

import asyncpg

from core import db
from purchases.categories import CATEGORIES

logger = logging.getLogger(__name__)

DEFAULT_TABLES = [c.table for c in CATEGORIES.values()]


async def table_columns(conn: asyncpg.Connection, table: str) -> list[tuple[str, str]]:
    rows = await conn.fetch(
        """
        SELECT column_name, data_type
        FROM information_schema.columns
        WHERE table_name = $1
        ORDER BY ordinal_position
        """,
        table,
    )
    return [(r["column_name"], r["data_type"]) for r in rows]


async def check(tables: list[str]) -> int:
    conn = await db.connect()
    try:
        for table in tables:
            columns = await table_columns(conn, table)
            print(f"\n{table}:")
            if not columns:
                print("  (table not found)")
            for name, data_type in columns:
                print(f"  - {name}: {data_type}")
    except asyncpg.PostgresError:
        logger.exception("schema_check_failed")
        return 1
    finally:
        await conn.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("tables", nargs="*", default=DEFAULT_TABLES)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    return asyncio.run(check(args.tables))


if __name__ == "__main__":
    raise SystemExit(main())
