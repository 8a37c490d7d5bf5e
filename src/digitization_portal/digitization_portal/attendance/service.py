from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_month
from ..common.validators import clean_optional, require_non_empty
from ..core.constants import DEFAULT_LEAVE_REASON
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a YYYY-MM month."""
    try:
        parse_month(month)
    except ValueError:
        raise ValidationError(f"Invalid month '{month}', expected YYYY-MM")
    year, mon = (int(p) for p in month.split("-"))
    return date(year, mon, 1), date(year, mon, calendar.monthrange(year, mon)[1])


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._attendance = attendance
        self._clock = clock or now_local

    def clock_in(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        user_id = require_non_empty(user_id, "User")
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_user_and_date(user_id, today)
        self._attendance.upsert(
            user_id=user_id,
            work_date=today,
            status=AttendanceStatus.PRESENT,
            check_in=now.time().replace(microsecond=0),
            check_out=existing.check_out if existing else None,
            reason=None,
        )
        logger.info("User %s clocked in on %s", user_id, today)
        return self._today(user_id, today)

    def clock_out(self, user_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        user_id = require_non_empty(user_id, "User")
        now = now or self._clock()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            raise ValidationError("No clock-in record found for today")

        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out=now.time().replace(microsecond=0),
        )
        logger.info("User %s clocked out on %s", user_id, today)
        return self._today(user_id, today)

    def mark_leave(
        self,
        user_id: str,
        *,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        user_id = require_non_empty(user_id, "User")
        today = (now or self._clock()).date()

        self._attendance.upsert(
            user_id=user_id,
            work_date=today,
            status=AttendanceStatus.LEAVE,
            check_in=None,
            check_out=None,
            reason=clean_optional(reason) or DEFAULT_LEAVE_REASON,
        )
        logger.info("User %s marked leave on %s", user_id, today)
        return self._today(user_id, today)

    def correct(
        self,
        *,
        user_id: str,
        work_date: date,
        status: Optional[str] = None,
        check_in: Optional[time] = None,
        check_out: Optional[time] = None,
        reason: Optional[str] = None,
    ) -> AttendanceRecord:
        """Admin correction of an existing row. Unspecified fields are kept."""
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if not record:
            raise ValidationError("Attendance record does not exist")

        new_status = record.status
        if status is not None:
            try:
                new_status = AttendanceStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown attendance status '{status}'")

        self._attendance.upsert(
            user_id=record.user_id,
            work_date=record.work_date,
            status=new_status,
            check_in=check_in if check_in is not None else record.check_in,
            check_out=check_out if check_out is not None else record.check_out,
            reason=clean_optional(reason) if reason is not None else record.reason,
        )
        return self._today(record.user_id, record.work_date)

    def list_records(self, *, month: Optional[str] = None, user_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        if month:
            start, end = month_bounds(month)
            return self._attendance.list_records(start_date=start, end_date=end, user_id=user_id)
        return self._attendance.list_records(user_id=user_id)

    def _today(self, user_id: str, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if not record:
            raise ValidationError("Attendance record was not saved")
        return record
