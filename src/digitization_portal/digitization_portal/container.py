from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .catalog.mysql_catalog_repository import MySQLCatalogRepository
from .catalog.service import CatalogService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_TIMEZONE, SALARY_DAYS_PER_MONTH
from .database.connection import DBConfig, DatabaseConnection
from .payroll.calculator.present_days_calculator import PresentDaysSalaryCalculator
from .payroll.service import SalaryReportService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .users.mysql_employee_repository import MySQLEmployeeRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    catalog_repo: MySQLCatalogRepository
    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    report_repo: MySQLReportRepository

    catalog_service: CatalogService
    attendance_service: AttendanceService
    salary_report_service: SalaryReportService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    base_salaries: Optional[Mapping[str, float]] = None,
    days_per_month: int = SALARY_DAYS_PER_MONTH,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    catalog_repo = MySQLCatalogRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    report_repo = MySQLReportRepository(conn)

    catalog_service = CatalogService(catalog_repo)
    attendance_service = AttendanceService(attendance_repo, clock=lambda: now_local(timezone))
    salary_report_service = SalaryReportService(
        attendance_repo,
        employees_repo,
        base_salaries=base_salaries,
        calculator=PresentDaysSalaryCalculator(days_per_month),
    )
    report_service = ReportService(report_repo, employees_repo, clock=lambda: now_local(timezone))

    return Container(
        conn=conn,
        catalog_repo=catalog_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        report_repo=report_repo,
        catalog_service=catalog_service,
        attendance_service=attendance_service,
        salary_report_service=salary_report_service,
        report_service=report_service,
    )
