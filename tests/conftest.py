from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from typing import Optional, Sequence

import pytest

from src.digitization_portal.digitization_portal.attendance.model import AttendanceRecord
from src.digitization_portal.digitization_portal.catalog.model import CatalogRecord, NewCatalogRecord
from src.digitization_portal.digitization_portal.catalog.reconciler import normalize_key
from src.digitization_portal.digitization_portal.core.enums import AttendanceStatus, Stage
from src.digitization_portal.digitization_portal.core.exceptions import StorageError
from src.digitization_portal.digitization_portal.reports.model import EmployeeReport, NewEmployeeReport
from src.digitization_portal.digitization_portal.users.model import Employee


class InMemoryAttendance:
    def __init__(self):
        self._by_user_date: dict[tuple[str, date], AttendanceRecord] = {}
        self._id = 0

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

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
        existing = self._by_user_date.get((user_id, work_date))
        if existing:
            attendance_id = existing.attendance_id
        else:
            self._id += 1
            attendance_id = self._id
        self._by_user_date[(user_id, work_date)] = AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            status=status,
            reason=reason,
        )
        return attendance_id

    def update_checkout(self, *, attendance_id: int, check_out: time) -> bool:
        for key, rec in self._by_user_date.items():
            if rec.attendance_id == attendance_id:
                self._by_user_date[key] = dataclasses.replace(rec, check_out=check_out)
                return True
        return False

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        items = [
            r
            for r in self._by_user_date.values()
            if (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (user_id is None or r.user_id == user_id)
        ]
        items.sort(key=lambda r: (r.work_date, r.user_id), reverse=True)
        return items


class InMemoryEmployees:
    def __init__(self, employees: Sequence[Employee]):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_active(self) -> Sequence[Employee]:
        return sorted((e for e in self._by_id.values() if e.is_active), key=lambda e: e.full_name)


class InMemoryCatalog:
    def __init__(self, existing: Sequence[str] = ()):
        self._records: dict[int, CatalogRecord] = {}
        self._id = 0
        self.insert_many_calls = 0
        self.list_all_calls = 0
        self.fail_insert = False
        self.fail_list_all = False
        for name in existing:
            self.insert_one(NewCatalogRecord(file_name=name, book_name=name, author_name="", year=""))

    def list_file_names(self) -> Sequence[str]:
        return [r.file_name for r in self._records.values()]

    def exists_file_name(self, file_name: str) -> bool:
        return any(normalize_key(r.file_name) == normalize_key(file_name) for r in self._records.values())

    def insert_one(self, record: NewCatalogRecord) -> int:
        self._id += 1
        self._records[self._id] = CatalogRecord(record_id=self._id, **dataclasses.asdict(record))
        return self._id

    def insert_many(self, records: Sequence[NewCatalogRecord]) -> int:
        self.insert_many_calls += 1
        if self.fail_insert:
            raise StorageError("Duplicate entry for key 'uq_digitization_file_key'")
        for r in records:
            self.insert_one(r)
        return len(records)

    def get_by_id(self, record_id: int) -> Optional[CatalogRecord]:
        return self._records.get(record_id)

    def list_all(self) -> Sequence[CatalogRecord]:
        self.list_all_calls += 1
        if self.fail_list_all:
            raise StorageError("connection lost")
        return sorted(self._records.values(), key=lambda r: r.record_id, reverse=True)

    def update_fields(
        self,
        *,
        record_id: int,
        last_edited_by: Optional[str],
        stage: Optional[Stage] = None,
        assignee: Optional[str] = None,
        scanned_by: Optional[str] = None,
        digitized_by: Optional[str] = None,
        deadline: Optional[date] = None,
        clear: Sequence[str] = (),
    ) -> bool:
        current = self._records.get(record_id)
        if not current:
            return False
        changes = {
            "stage": stage,
            "assignee": assignee,
            "scanned_by": scanned_by,
            "digitized_by": digitized_by,
            "deadline": deadline,
        }
        self._records[record_id] = dataclasses.replace(
            current,
            last_edited_by=last_edited_by,
            **{k: v for k, v in changes.items() if v is not None},
            **{k: None for k in clear},
        )
        return True



class InMemoryReports:
    def __init__(self):
        self._by_id: dict[int, EmployeeReport] = {}
        self._id = 0

    def insert(self, report: NewEmployeeReport) -> int:
        self._id += 1
        self._by_id[self._id] = EmployeeReport(report_id=self._id, **dataclasses.asdict(report))
        return self._id

    def get_by_id(self, report_id: int) -> Optional[EmployeeReport]:
        return self._by_id.get(report_id)

    def list_reports(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[EmployeeReport]:
        items = [
            r
            for r in self._by_id.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (start_date is None or r.submitted_date >= start_date)
            and (end_date is None or r.submitted_date <= end_date)
        ]
        items.sort(key=lambda r: (r.submitted_date, r.submitted_time, r.report_id), reverse=True)
        return items

    def delete(self, *, report_id: int, employee_id: str) -> bool:
        report = self._by_id.get(report_id)
        if not report or report.employee_id != employee_id:
            return False
        del self._by_id[report_id]
        return True

@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 15, 30)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(employee_id="u1", full_name="Ayesha Memon", role="I.T & Scanning-Employee"),
            Employee(employee_id="u2", full_name="Bilal Soomro", role="Library-Employee"),
            Employee(employee_id="u3", full_name="Chief Admin", role="Admin"),
            Employee(employee_id="u4", full_name="Dur Muhammad", role="Volunteer"),
            Employee(employee_id="u5", full_name="Former Staff", role="Library-Employee", is_active=False),
        ]
    )


@pytest.fixture
def catalog_factory():
    return InMemoryCatalog


@pytest.fixture
def catalog_repo() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def reports_repo() -> InMemoryReports:
    return InMemoryReports()
