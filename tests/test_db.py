from core import db


def test_page_clause_without_limits_returns_whole_table():
    assert db.page_clause(None, None) == ("", [])
    assert db.page_clause(None, 0) == ("", [])


def test_page_clause_numbers_placeholders_in_order():
    assert db.page_clause(10, 20) == ("LIMIT $1 OFFSET $2", [10, 20])
    assert db.page_clause(None, 5) == ("OFFSET $1", [5])


def test_page_clause_continues_after_earlier_parameters():
    assert db.page_clause(10, 20, first_param=3) == ("LIMIT $3 OFFSET $4", [10, 20])


def test_affected_rows():
    assert db.affected_rows("UPDATE 1") == 1
    assert db.affected_rows("UPDATE 0") == 0
    assert db.affected_rows("") == 0
