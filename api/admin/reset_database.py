"""
Empty every form and purchase table, keeping the table structure.

Proof audit tables are left alone unless --include-proofs is given.

Usage: python -m admin.reset_database --yes [--include-proofs]
"""

from __future__ import annotations

import argparse
import asyncio
import logging

import asyncpg

from core import db
from forms import repository as forms_repository
from purchases.categories import CATEGORIES

logger = logging.getLogger(__name__)

FORM_TABLES = [t.name for t in forms_repository.TABLES]
PURCHASE_TABLES = [c.table for c in CATEGORIES.values()]
PROOF_TABLES = [c.proof_table for c in CATEGORIES.values()]


def tables_to_reset(include_proofs: bool = False) -> list[str]:
    tables = [*FORM_TABLES, *PURCHASE_TABLES]
    if include_proofs:
        tables.extend(PROOF_TABLES)
    return tables


async def reset(tables: list[str]) -> list[str]:
    """
    TRUNCATE each table. Missing tables are logged and skipped.
    Returns the tables that were emptied.
    """
    conn = await db.connect()
    emptied: list[str] = []
    try:
        for table in tables:
            try:
                await conn.execute(f"TRUNCATE TABLE {table} CASCADE")
            except asyncpg.PostgresError as e:
                logger.warning("table_not_reset table=%s error=%s", table, e)
                continue
            logger.info("table_reset table=%s", table)
            emptied.append(table)
    finally:
        await conn.close()
    return emptied


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete all rows from the Monkey Ranch tables.")
    parser.add_argument("--yes", action="store_true", help="confirm that all data should be deleted")
    parser.add_argument("--include-proofs", action="store_true", help="also empty the proof audit tables")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if not args.yes:
        parser.error("refusing to delete data without --yes")

    tables = tables_to_reset(include_proofs=args.include_proofs)
    emptied = asyncio.run(reset(tables))
    logger.info("reset_complete emptied=%s of=%s", len(emptied), len(tables))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
