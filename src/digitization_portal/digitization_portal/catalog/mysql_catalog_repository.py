from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Stage
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CatalogRecord, NewCatalogRecord
from .repository import CLEARABLE_FIELDS, CatalogRepository

_COLUMNS = """
    record_id, file_name, book_name, author_name, year, stage,
    assignee, scanned_by, digitized_by, deadline,
    created_by, last_edited_by, created_at, last_edited_at
"""

_INSERT = """
    INSERT INTO digitization_records(
        file_name, book_name, author_name, year, stage,
        assignee, scanned_by, digitized_by, deadline,
        created_by, last_edited_by
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _insert_params(r: NewCatalogRecord) -> tuple:
    return (
        r.file_name,
        r.book_name,
        r.author_name,
        r.year,
        r.stage.value,
        r.assignee,
        r.scanned_by,
        r.digitized_by,
        r.deadline,
        r.created_by,
        r.last_edited_by,
    )


def _to_record(r: dict) -> CatalogRecord:
    return CatalogRecord(
        record_id=int(r["record_id"]),
        file_name=r["file_name"],
        book_name=r["book_name"],
        author_name=r["author_name"],
        year=str(r["year"]),
        stage=Stage.from_label(r.get("stage")) or Stage.PENDING,
        assignee=r.get("assignee"),
        scanned_by=r.get("scanned_by"),
        digitized_by=r.get("digitized_by"),
        deadline=r.get("deadline"),
        created_by=r.get("created_by"),
        last_edited_by=r.get("last_edited_by"),
        created_at=r.get("created_at"),
        last_edited_at=r.get("last_edited_at"),
    )


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_file_names(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT file_name FROM digitization_records")
            return [r["file_name"] for r in fetchall(cur) if r.get("file_name")]

    def exists_file_name(self, file_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id
                FROM digitization_records
                WHERE file_key = LOWER(TRIM(%s)) COLLATE utf8mb4_bin
                LIMIT 1
                """,
                (file_name,),
            )
            return fetchone(cur) is not None

    def insert_one(self, record: NewCatalogRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT, _insert_params(record))
            return int(cur.lastrowid)

    def insert_many(self, records: Sequence[NewCatalogRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_INSERT, [_insert_params(r) for r in records])
            return len(records)

    def get_by_id(self, record_id: int) -> Optional[CatalogRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM digitization_records WHERE record_id=%s",
                (int(record_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_all(self) -> Sequence[CatalogRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM digitization_records ORDER BY created_at DESC, record_id DESC")
            return [_to_record(r) for r in fetchall(cur)]

    def update_fields(
        self,
        *,
        record_id: int,
        last_edited_by: Optional[str],
        stage: Optional[Stage] = None,
        assignee: Optional[str] = None,
        scanned_by: Optional[str] = None,
        digitized_by: Optional[str] = None,
        deadline: Optional[date] = None,
        clear: Sequence[str] = (),
    ) -> bool:
        sets = ["last_edited_by=%s"]
        params: list[object] = [last_edited_by]

        if stage is not None:
            sets.append("stage=%s")
            params.append(stage.value)
        if assignee is not None:
            sets.append("assignee=%s")
            params.append(assignee)
        if scanned_by is not None:
            sets.append("scanned_by=%s")
            params.append(scanned_by)
        if digitized_by is not None:
            sets.append("digitized_by=%s")
            params.append(digitized_by)
        if deadline is not None:
            sets.append("deadline=%s")
            params.append(deadline)
        for column in clear:
            if column not in CLEARABLE_FIELDS:
                raise ValueError(f"Field {column!r} cannot be cleared")
            sets.append(f"{column}=NULL")

        params.append(int(record_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE digitization_records SET {', '.join(sets)} WHERE record_id=%s",
                tuple(params),
            )
            return cur.rowcount > 0
