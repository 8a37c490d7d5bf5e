from __future__ import annotations

from dataclasses import dataclass


ADMIN_ROLE = "Admin"


@dataclass(frozen=True)
class Employee:
    """Staff member as seen by attendance and payroll.

    Role is a free-text label (e.g. "Library-Employee") used to look up the base salary.
    """

    employee_id: str
    full_name: str
    role: str
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
