from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.digitization_portal.digitization_portal.core.enums import ReportType, Stage
from src.digitization_portal.digitization_portal.core.exceptions import ValidationError
from src.digitization_portal.digitization_portal.reports.service import ReportService, report_quantity, report_stage


@pytest.fixture
def service(reports_repo, employees_repo, fixed_now):
    return ReportService(reports_repo, employees_repo, clock=lambda: fixed_now)


def test_submit_defaults_to_today_and_uses_employee_name(service):
    report = service.submit("u1", stage="Scanning", report_type="Pages", quantity="120")

    assert report.submitted_date == date(2025, 3, 10)
    assert report.submitted_time == time(9, 15)
    assert report.employee_name == "Ayesha Memon"
    assert report.stage == Stage.SCANNING
    assert report.report_type == ReportType.PAGES
    assert report.quantity == 120
    assert report.to_dict()["time"] == "09:15"


def test_submit_for_an_explicit_date(service):
    report = service.submit("u2", stage="PDF Q-C", report_type="books", quantity=3, work_date="2025-03-01")

    assert report.submitted_date == date(2025, 3, 1)
    assert report.stage == Stage.PDF_QC
    assert report.report_type == ReportType.BOOKS


def test_submit_rejects_bad_input(service, reports_repo):
    with pytest.raises(ValidationError, match="Unknown employee"):
        service.submit("nobody", stage="Scanning", report_type="Pages", quantity=1)
    with pytest.raises(ValidationError, match="greater than zero"):
        service.submit("u1", stage="Scanning", report_type="Pages", quantity=0)
    with pytest.raises(ValidationError, match="Type"):
        service.submit("u1", stage="Scanning", report_type="", quantity=1)
    with pytest.raises(ValidationError, match="Unknown report type"):
        service.submit("u1", stage="Scanning", report_type="Chapters", quantity=1)
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        service.submit("u1", stage="Scanning", report_type="Pages", quantity=1, work_date="yesterday")

    assert reports_repo.list_reports() == []


def test_report_stage_accepts_form_labels_but_not_pending():
    assert report_stage("Scanning Q-C") == Stage.SCANNING_QC
    assert report_stage("PDF Uploading") == Stage.UPLOADING
    assert report_stage("Completed") == Stage.COMPLETED

    with pytest.raises(ValidationError):
        report_stage("Pending")
    with pytest.raises(ValidationError):
        report_stage("Binding")
    with pytest.raises(ValidationError):
        report_stage(None)


def test_report_quantity_must_be_whole_and_positive():
    assert report_quantity(" 15 ") == 15

    for bad in ("1.5", "ten", -2, True, None):
        with pytest.raises(ValidationError):
            report_quantity(bad)


def test_list_mine_is_newest_first_by_date_then_time(service):
    service.submit("u1", stage="Scanning", report_type="Pages", quantity=10, now=datetime(2025, 3, 9, 17, 0))
    service.submit("u1", stage="Scanning", report_type="Pages", quantity=20, now=datetime(2025, 3, 10, 8, 0))
    service.submit("u1", stage="Scanning", report_type="Pages", quantity=30, now=datetime(2025, 3, 10, 12, 30))
    service.submit("u2", stage="Scanning", report_type="Books", quantity=1)

    assert [r.quantity for r in service.list_mine("u1")] == [30, 20, 10]


def test_reports_by_employee_filters_month_and_name_and_totals(service):
    service.submit("u1", stage="Scanning", report_type="Pages", quantity=100, work_date="2025-03-02")
    service.submit("u1", stage="PDF Pages", report_type="Pages", quantity=50, work_date="2025-03-05")
    service.submit("u1", stage="Completed", report_type="Books", quantity=2, work_date="2025-03-05")
    service.submit("u2", stage="Scanning", report_type="Books", quantity=4, work_date="2025-03-06")
    service.submit("u2", stage="Scanning", report_type="Books", quantity=9, work_date="2025-02-27")

    march = service.reports_by_employee(month="2025-03")
    by_id = {g.employee_id: g for g in march}
    assert by_id["u1"].to_dict()["total_pages"] == 150
    assert by_id["u1"].to_dict()["total_books"] == 2
    assert by_id["u2"].total(ReportType.BOOKS) == 4

    only_bilal = service.reports_by_employee(month="2025-03", search="bilal")
    assert [g.employee_name for g in only_bilal] == ["Bilal Soomro"]

    with pytest.raises(ValidationError):
        service.reports_by_employee(month="March")


def test_delete_only_own_report(service, reports_repo):
    report = service.submit("u1", stage="Scanning", report_type="Pages", quantity=5)

    with pytest.raises(ValidationError):
        service.delete(report_id=report.report_id, employee_id="u2")
    assert reports_repo.get_by_id(report.report_id) is not None

    service.delete(report_id=report.report_id, employee_id="u1")
    assert service.list_mine("u1") == []
