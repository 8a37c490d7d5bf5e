from __future__ import annotations

import pytest

from src.digitization_portal.digitization_portal.catalog.mysql_catalog_repository import MySQLCatalogRepository
from src.digitization_portal.digitization_portal.core.enums import Stage


class RecordingCursor:
    def __init__(self, rows=None):
        self.executed: list[tuple[str, tuple]] = []
        self._rows = list(rows or [])
        self.rowcount = 1

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class RecordingConnection:
    def __init__(self, cursor: RecordingCursor):
        self.cur = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class RecordingFactory:
    def __init__(self, rows=None):
        self.conn = RecordingConnection(RecordingCursor(rows))

    def connect(self):
        return self.conn


def test_exists_file_name_matches_on_binary_file_key():
    factory = RecordingFactory(rows=[])
    repo = MySQLCatalogRepository(factory)

    assert repo.exists_file_name("  Café-A-2000 ") is False

    sql, params = factory.conn.cur.executed[0]
    assert "file_key = LOWER(TRIM(%s)) COLLATE utf8mb4_bin" in sql
    assert "file_name =" not in sql
    assert params == ("  Café-A-2000 ",)


def test_exists_file_name_true_when_row_found():
    repo = MySQLCatalogRepository(RecordingFactory(rows=[{"record_id": 7}]))

    assert repo.exists_file_name("a-b-1999") is True


def test_update_fields_sets_cleared_columns_to_null():
    factory = RecordingFactory()
    repo = MySQLCatalogRepository(factory)

    assert repo.update_fields(record_id=3, last_edited_by="sara", stage=Stage.SCANNING, clear=["assignee", "deadline"])

    sql, params = factory.conn.cur.executed[0]
    assert sql == (
        "UPDATE digitization_records SET last_edited_by=%s, stage=%s, assignee=NULL, deadline=NULL "
        "WHERE record_id=%s"
    )
    assert params == ("sara", "Scanning", 3)
    assert factory.conn.committed is True


def test_update_fields_refuses_to_clear_required_columns():
    factory = RecordingFactory()
    repo = MySQLCatalogRepository(factory)

    with pytest.raises(ValueError, match="file_name"):
        repo.update_fields(record_id=3, last_edited_by=None, clear=["file_name"])

    assert factory.conn.cur.executed == []
    assert factory.conn.committed is False
