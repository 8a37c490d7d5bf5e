from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import EmployeeReport, NewEmployeeReport


class ReportRepository(Protocol):
    def insert(self, report: NewEmployeeReport) -> int:
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[EmployeeReport]:
        raise NotImplementedError

    def list_reports(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[EmployeeReport]:
        """Newest first by date, then time."""

        raise NotImplementedError

    def delete(self, *, report_id: int, employee_id: str) -> bool:
        """Delete a report only if it belongs to employee_id."""

        raise NotImplementedError
