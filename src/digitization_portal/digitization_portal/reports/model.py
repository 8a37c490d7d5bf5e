from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time

from ..core.enums import ReportType, Stage


@dataclass(frozen=True)
class NewEmployeeReport:
    employee_id: str
    employee_name: str
    submitted_date: date
    submitted_time: time
    stage: Stage
    report_type: ReportType
    quantity: int


@dataclass(frozen=True)
class EmployeeReport:
    """Work logged by one staff member: a quantity of pages or books at a stage."""

    report_id: int
    employee_id: str
    employee_name: str
    submitted_date: date
    submitted_time: time
    stage: Stage
    report_type: ReportType
    quantity: int

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "date": self.submitted_date.isoformat(),
            "time": self.submitted_time.strftime("%H:%M"),
            "stage": self.stage.value,
            "type": self.report_type.value,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class EmployeeReportGroup:
    employee_id: str
    employee_name: str
    reports: list[EmployeeReport] = field(default_factory=list)

    def total(self, report_type: ReportType) -> int:
        return sum(r.quantity for r in self.reports if r.report_type == report_type)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "total_pages": self.total(ReportType.PAGES),
            "total_books": self.total(ReportType.BOOKS),
            "reports": [r.to_dict() for r in self.reports],
        }
