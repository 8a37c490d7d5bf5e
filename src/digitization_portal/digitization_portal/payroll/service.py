from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import month_bounds
from ..core.constants import DEFAULT_BASE_SALARIES
from ..core.enums import AttendanceStatus
from ..users.repository import EmployeeRepository
from .calculator.base import SalaryCalculator
from .calculator.present_days_calculator import PresentDaysSalaryCalculator


@dataclass(frozen=True)
class SalaryRow:
    employee_id: str
    full_name: str
    role: str
    month: str
    present_days: int
    base_salary: float
    salary: float

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "full_name": self.full_name,
            "role": self.role,
            "month": self.month,
            "present_days": self.present_days,
            "base_salary": self.base_salary,
            "salary": self.salary,
        }


class SalaryReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        base_salaries: Optional[Mapping[str, float]] = None,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._base_salaries = dict(DEFAULT_BASE_SALARIES if base_salaries is None else base_salaries)
        self._calculator = calculator or PresentDaysSalaryCalculator()

    def base_salary(self, role: str) -> float:
        return float(self._base_salaries.get(role, 0))

    def available_months(self) -> list[str]:
        """Distinct YYYY-MM values with attendance, newest first."""
        months = {r.month for r in self._attendance.list_records()}
        return sorted(months, reverse=True)

    def salary_sheet(self, *, month: Optional[str] = None, search: Optional[str] = None) -> list[SalaryRow]:
        """Salaries for one month; defaults to the newest month with attendance.

        Admins are excluded. `search` filters by a case-insensitive name substring.
        """
        if not month:
            months = self.available_months()
            if not months:
                return []
            month = months[0]

        start, end = month_bounds(month)
        present = Counter(
            r.user_id
            for r in self._attendance.list_records(start_date=start, end_date=end)
            if r.status == AttendanceStatus.PRESENT
        )

        term = (search or "").strip().casefold()
        rows: list[SalaryRow] = []
        for emp in self._employees.list_active():
            if emp.is_admin:
                continue
            if term and term not in emp.full_name.casefold():
                continue
            base = self.base_salary(emp.role)
            days = int(present.get(emp.employee_id, 0))
            rows.append(
                SalaryRow(
                    employee_id=emp.employee_id,
                    full_name=emp.full_name,
                    role=emp.role,
                    month=month,
                    present_days=days,
                    base_salary=base,
                    salary=self._calculator.salary(base_salary=base, present_days=days),
                )
            )
        return rows
