from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: str,
        work_date: date,
        status: AttendanceStatus,
        check_in: Optional[time],
        check_out: Optional[time],
        reason: Optional[str] = None,
    ) -> int:
        """Insert or replace the row for (user_id, work_date)."""

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out: time) -> bool:
        raise NotImplementedError

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError
