from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence, Union

from ..attendance.service import month_bounds
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import clean_optional, require_non_empty
from ..core.enums import ReportType, Stage
from ..core.exceptions import ValidationError
from ..users.repository import EmployeeRepository
from .model import EmployeeReport, EmployeeReportGroup, NewEmployeeReport
from .repository import ReportRepository

logger = logging.getLogger(__name__)

# Report forms say "PDF Uploading" for the Uploading stage.
_STAGE_ALIASES = {"pdfuploading": Stage.UPLOADING}


def report_stage(label: Optional[str]) -> Stage:
    """Stage a report can be logged against. Pending is not work done."""
    text = require_non_empty(label, "Stage")
    stage = Stage.from_label(text) or _STAGE_ALIASES.get("".join(text.split()).casefold())
    if stage is None or stage == Stage.PENDING:
        raise ValidationError(f"Unknown report stage '{text}'")
    return stage


def report_quantity(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a whole number")
    try:
        quantity = int(str(value).strip())
    except ValueError:
        raise ValidationError("Quantity must be a whole number")
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")
    return quantity


class ReportService:
    """Daily work reports logged by staff."""

    def __init__(
        self,
        reports: ReportRepository,
        employees: EmployeeRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._reports = reports
        self._employees = employees
        self._clock = clock or now_local

    def submit(
        self,
        employee_id: str,
        *,
        stage: Optional[str],
        report_type: Optional[str],
        quantity,
        work_date: Union[date, str, None] = None,
        now: Optional[datetime] = None,
    ) -> EmployeeReport:
        """Log work for a day. The date defaults to today in the office time zone."""
        employee_id = require_non_empty(employee_id, "User")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError("Unknown employee")

        kind = ReportType.from_label(require_non_empty(report_type, "Type"))
        if kind is None:
            raise ValidationError(f"Unknown report type '{report_type}'")

        now = now or self._clock()
        submitted_date = now.date()
        if isinstance(work_date, date):
            submitted_date = work_date
        elif clean_optional(work_date):
            try:
                submitted_date = parse_iso_date(clean_optional(work_date))
            except ValueError:
                raise ValidationError("Date must be YYYY-MM-DD")

        report_id = self._reports.insert(
            NewEmployeeReport(
                employee_id=employee.employee_id,
                employee_name=employee.full_name,
                submitted_date=submitted_date,
                submitted_time=now.time().replace(second=0, microsecond=0),
                stage=report_stage(stage),
                report_type=kind,
                quantity=report_quantity(quantity),
            )
        )
        logger.info("Employee %s logged report %s for %s", employee_id, report_id, submitted_date)

        stored = self._reports.get_by_id(report_id)
        if not stored:
            raise ValidationError("Report was not saved")
        return stored

    def list_mine(self, employee_id: str) -> Sequence[EmployeeReport]:
        return self._reports.list_reports(employee_id=require_non_empty(employee_id, "User"))

    def reports_by_employee(
        self,
        *,
        month: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[EmployeeReportGroup]:
        """Admin view: reports grouped per employee, filtered by month and name."""
        if month:
            start, end = month_bounds(month)
            reports = self._reports.list_reports(start_date=start, end_date=end)
        else:
            reports = self._reports.list_reports()

        term = (search or "").strip().casefold()
        groups: dict[str, EmployeeReportGroup] = {}
        for r in reports:
            if term and term not in r.employee_name.casefold():
                continue
            group = groups.get(r.employee_id)
            if group is None:
                group = groups[r.employee_id] = EmployeeReportGroup(r.employee_id, r.employee_name)
            group.reports.append(r)
        return list(groups.values())

    def delete(self, *, report_id: int, employee_id: str) -> None:
        employee_id = require_non_empty(employee_id, "User")
        if not self._reports.delete(report_id=int(report_id), employee_id=employee_id):
            raise ValidationError("Report does not exist")
        logger.info("Employee %s deleted report %s", employee_id, report_id)
