from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ReportType, Stage
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import EmployeeReport, NewEmployeeReport
from .repository import ReportRepository

_COLUMNS = """
    report_id, employee_id, employee_name, submitted_date, submitted_time,
    stage, report_type, quantity
"""


def _to_report(r: dict) -> EmployeeReport:
    return EmployeeReport(
        report_id=int(r["report_id"]),
        employee_id=str(r["employee_id"]),
        employee_name=r["employee_name"],
        submitted_date=r["submitted_date"],
        submitted_time=normalize_mysql_time(r["submitted_time"]),
        stage=Stage(r["stage"]),
        report_type=ReportType(r["report_type"]),
        quantity=int(r["quantity"]),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, report: NewEmployeeReport) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_reports(
                    employee_id, employee_name, submitted_date, submitted_time,
                    stage, report_type, quantity
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    report.employee_id,
                    report.employee_name,
                    report.submitted_date,
                    report.submitted_time,
                    report.stage.value,
                    report.report_type.value,
                    int(report.quantity),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[EmployeeReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employee_reports WHERE report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list_reports(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[EmployeeReport]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))
        if start_date is not None:
            clauses.append("submitted_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("submitted_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employee_reports
                WHERE {where}
                ORDER BY submitted_date DESC, submitted_time DESC, report_id DESC
                """,
                tuple(params),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def delete(self, *, report_id: int, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM employee_reports WHERE report_id=%s AND employee_id=%s",
                (int(report_id), str(employee_id)),
            )
            return cur.rowcount > 0
