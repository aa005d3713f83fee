import asyncio

import pytest

from admin import migrate_proof_column, reset_database


class FakeConnection:
    def __init__(self, column_types):
        self.column_types = column_types
        self.statements = []

    async def fetchrow(self, sql, table, column):
        data_type = self.column_types.get(table)
        return {"data_type": data_type} if data_type else None

    async def execute(self, sql, *args):
        self.statements.append(sql)
        return "ALTER TABLE"


@pytest.mark.parametrize("current, expected, statement", [
    (None, "added", "ALTER TABLE vip_purchases ADD COLUMN IF NOT EXISTS comprobante TEXT"),
    ("text", "unchanged", None),
    ("character varying", "altered from character varying",
     "ALTER TABLE vip_purchases ALTER COLUMN comprobante TYPE TEXT USING comprobante::text"),
])
def test_migrate_proof_column(current, expected, statement):
    conn = FakeConnection({"vip_purchases": current})

    result = asyncio.run(migrate_proof_column.migrate_table(conn, "vip_purchases"))

    assert result == expected
    assert conn.statements == ([statement] if statement else [])


def test_migration_never_drops_columns():
    conn = FakeConnection({t: "bytea" for t in migrate_proof_column.TABLES})

    for table in migrate_proof_column.TABLES:
        asyncio.run(migrate_proof_column.migrate_table(conn, table))

    assert len(conn.statements) == 6
    assert not any("DROP" in sql for sql in conn.statements)


def test_reset_keeps_proof_tables_by_default():
    tables = reset_database.tables_to_reset()

    assert "contacts" in tables
    assert "parking_purchases" in tables
    assert "comprobantes_vip" not in tables
    assert "comprobantes_vip" in reset_database.tables_to_reset(include_proofs=True)


def test_reset_requires_confirmation():
    with pytest.raises(SystemExit) as err:
        reset_database.main([])

    assert err.value.code == 2
