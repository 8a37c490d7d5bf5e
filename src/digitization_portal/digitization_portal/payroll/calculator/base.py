from __future__ import annotations

from abc import ABC, abstractmethod


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def salary(self, *, base_salary: float, present_days: int) -> float:
        raise NotImplementedError
