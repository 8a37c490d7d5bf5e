from __future__ import annotations

from ...core.constants import SALARY_DAYS_PER_MONTH
from .base import SalaryCalculator


class PresentDaysSalaryCalculator(SalaryCalculator):
    """Daily rate (base / days_per_month) times present days, rounded to 2 decimals."""

    def __init__(self, days_per_month: int = SALARY_DAYS_PER_MONTH):
        if int(days_per_month) <= 0:
            raise ValueError("days_per_month must be positive")
        self._days_per_month = int(days_per_month)

    def salary(self, *, base_salary: float, present_days: int) -> float:
        if present_days <= 0 or base_salary <= 0:
            return 0.0
        return round(float(base_salary) / self._days_per_month * int(present_days), 2)
