from __future__ import annotations

import io
from datetime import date

import pytest

from src.digitization_portal.digitization_portal.catalog.service import CatalogService
from src.digitization_portal.digitization_portal.core.enums import Stage
from src.digitization_portal.digitization_portal.core.exceptions import DuplicateError, ValidationError


def test_add_record_fills_fields_from_file_name(catalog_repo):
    svc = CatalogService(catalog_repo)

    rec = svc.add_record(file_name="  Kitab_Jo_Naam-Lekhak-2005-PDF_QC.pdf ", actor="ali")

    assert rec.file_name == "Kitab_Jo_Naam-Lekhak-2005-PDF_QC.pdf"
    assert rec.book_name == "Kitab Jo Naam"
    assert rec.author_name == "Lekhak"
    assert rec.year == "2005"
    assert rec.stage == Stage.PDF_QC
    assert rec.created_by == "ali"


def test_add_record_overrides_win(catalog_repo):
    svc = CatalogService(catalog_repo)

    rec = svc.add_record(file_name="A-B-1999", actor="ali", author_name="Someone Else", stage="Completed")

    assert rec.author_name == "Someone Else"
    assert rec.stage == Stage.COMPLETED


def test_add_record_duplicate_is_rejected_without_write(catalog_factory):
    repo = catalog_factory(existing=["Book-Author-2001"])
    svc = CatalogService(repo)

    with pytest.raises(DuplicateError, match="already exists"):
        svc.add_record(file_name="book-author-2001", actor="ali")

    assert len(repo.list_file_names()) == 1


def test_add_record_requires_file_name(catalog_repo):
    with pytest.raises(ValidationError):
        CatalogService(catalog_repo).add_record(file_name="   ", actor="ali")


def test_list_records_search_is_case_insensitive(catalog_repo):
    svc = CatalogService(catalog_repo)
    svc.add_record(file_name="Shah_Jo_Risalo-Shah_Latif-1866", actor=None)
    svc.add_record(file_name="Sur_Kalyan-Bhittai-1900", actor=None)

    assert [r.book_name for r in svc.list_records(search="LATIF")] == ["Shah Jo Risalo"]
    assert [r.book_name for r in svc.list_records()] == ["Sur Kalyan", "Shah Jo Risalo"]


def test_update_record_changes_only_given_fields(catalog_repo):
    svc = CatalogService(catalog_repo)
    rec = svc.add_record(file_name="A-B-1999", actor="ali")

    updated = svc.update_record(
        record_id=rec.record_id,
        actor="sara",
        stage="scanning qc",
        assignee="  Bilal ",
        deadline=date(2025, 4, 1),
    )

    assert updated.stage == Stage.SCANNING_QC
    assert updated.assignee == "Bilal"
    assert updated.deadline == date(2025, 4, 1)
    assert updated.book_name == "A"
    assert updated.last_edited_by == "sara"


def test_update_record_rejects_unknown_stage_and_missing_record(catalog_repo):
    svc = CatalogService(catalog_repo)
    rec = svc.add_record(file_name="A-B-1999", actor="ali")

    with pytest.raises(ValidationError):
        svc.update_record(record_id=rec.record_id, actor="ali", stage="Binding")
    with pytest.raises(ValidationError):
        svc.update_record(record_id=999, actor="ali", stage="Scanning")


def test_mark_completed(catalog_repo):
    svc = CatalogService(catalog_repo)
    rec = svc.add_record(file_name="A-B-1999", actor="ali")

    assert svc.mark_completed(record_id=rec.record_id, actor="ali").stage == Stage.COMPLETED


def test_tasks_grouped_by_assignee(catalog_repo):
    svc = CatalogService(catalog_repo)
    a = svc.add_record(file_name="A-X-1999", actor=None)
    b = svc.add_record(file_name="B-Y-2000", actor=None)
    svc.add_record(file_name="C-Z-2001", actor=None)
    svc.update_record(record_id=a.record_id, actor=None, assignee="Bilal")
    svc.update_record(record_id=b.record_id, actor=None, assignee="Sara")

    groups = svc.tasks_by_assignee()
    assert [(g.assignee, [t.book_name for t in g.tasks]) for g in groups] == [("Sara", ["B"]), ("Bilal", ["A"])]

    only_bilal = svc.tasks_by_assignee(assignee="bilal")
    assert [g.assignee for g in only_bilal] == ["Bilal"]


def test_import_file_refreshes_catalog(catalog_repo):
    svc = CatalogService(catalog_repo)
    data = "File Name\nA-B-1999\nC-D-2000\n".encode("utf-8")

    result = svc.import_file(io.BytesIO(data), "books.csv", actor="ali")

    assert result.inserted == 2
    assert catalog_repo.list_all_calls == 1
    assert {r.created_by for r in result.catalog} == {"ali"}


def test_update_record_blank_values_clear_assignee_and_deadline(catalog_repo):
    svc = CatalogService(catalog_repo)
    rec = svc.add_record(file_name="A-B-1999", actor="ali")
    svc.update_record(record_id=rec.record_id, actor="sara", assignee="Bilal", deadline="2025-04-01")

    cleared = svc.update_record(record_id=rec.record_id, actor="sara", assignee="  ", deadline="")

    assert cleared.assignee is None
    assert cleared.deadline is None
    assert svc.tasks_by_assignee() == []


def test_update_record_none_keeps_assignee_and_deadline(catalog_repo):
    svc = CatalogService(catalog_repo)
    rec = svc.add_record(file_name="A-B-1999", actor="ali")
    svc.update_record(record_id=rec.record_id, actor="sara", assignee="Bilal", deadline=date(2025, 4, 1))

    kept = svc.update_record(record_id=rec.record_id, actor="sara", stage="Scanning")

    assert kept.assignee == "Bilal"
    assert kept.deadline == date(2025, 4, 1)


def test_update_record_parses_text_deadline(catalog_repo):
    svc = CatalogService(catalog_repo)
    rec = svc.add_record(file_name="A-B-1999", actor="ali")

    updated = svc.update_record(record_id=rec.record_id, actor="sara", deadline=" 2025-04-01 ")
    assert updated.deadline == date(2025, 4, 1)

    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        svc.update_record(record_id=rec.record_id, actor="sara", deadline="next week")
