from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Union

from ..common.datetime_utils import parse_iso_date
from ..common.validators import clean_optional, require_non_empty
from ..core.enums import Stage
from ..core.exceptions import DuplicateError, ValidationError
from .importer import BatchImportPipeline, ImportResult, Source
from .model import BilingualFields, CatalogRecord, NewCatalogRecord, ParsedFileName
from .parsing import parse_and_translate, parse_filename
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssigneeTasks:
    assignee: str
    tasks: list[CatalogRecord]


class CatalogService:
    """Use cases for the digitization catalog."""

    def __init__(self, catalog: CatalogRepository):
        self._catalog = catalog

    def preview(self, file_name: str) -> ParsedFileName:
        return parse_filename(require_non_empty(file_name, "File name"))

    def parse_and_translate(self, file_name: str) -> BilingualFields:
        return parse_and_translate(file_name)

    def add_record(
        self,
        *,
        file_name: str,
        actor: Optional[str],
        book_name: Optional[str] = None,
        author_name: Optional[str] = None,
        year: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> CatalogRecord:
        """Manual single entry. Raises DuplicateError if the file name exists."""
        file_name = require_non_empty(file_name, "File name")
        parsed = parse_filename(file_name)

        if self._catalog.exists_file_name(file_name):
            raise DuplicateError(f'The file "{file_name}" already exists in the records.')

        record = NewCatalogRecord(
            file_name=file_name,
            book_name=clean_optional(book_name) or parsed.book_name,
            author_name=clean_optional(author_name) or parsed.author_name,
            year=clean_optional(year) or parsed.year,
            stage=Stage.from_label(stage) or parsed.stage or Stage.PENDING,
            created_by=actor,
            last_edited_by=actor,
        )
        record_id = self._catalog.insert_one(record)
        logger.info("Catalog record %s added for %s", record_id, file_name)

        stored = self._catalog.get_by_id(record_id)
        if not stored:
            raise ValidationError("Record was not saved")
        return stored

    def import_file(self, source: Source, file_name: str, *, actor: Optional[str]) -> ImportResult:
        pipeline = BatchImportPipeline(self._catalog, on_refresh=self._catalog.list_all)
        return pipeline.run(source, file_name, actor=actor)

    def list_records(self, *, search: Optional[str] = None) -> Sequence[CatalogRecord]:
        records = self._catalog.list_all()
        term = (search or "").strip().casefold()
        if not term:
            return list(records)
        return [
            r
            for r in records
            if term in (r.file_name or "").casefold()
            or term in (r.book_name or "").casefold()
            or term in (r.author_name or "").casefold()
        ]

    def update_record(
        self,
        *,
        record_id: int,
        actor: Optional[str],
        stage: Optional[str] = None,
        assignee: Optional[str] = None,
        scanned_by: Optional[str] = None,
        digitized_by: Optional[str] = None,
        deadline: Union[date, str, None] = None,
    ) -> CatalogRecord:
        """Stage transition or reassignment.

        None leaves a field unchanged; a blank string clears it (unassign,
        drop the deadline). A string deadline must be YYYY-MM-DD.
        """
        if not self._catalog.get_by_id(int(record_id)):
            raise ValidationError("Record does not exist")

        new_stage = None
        if stage is not None:
            new_stage = Stage.from_label(stage)
            if new_stage is None:
                raise ValidationError(f"Unknown stage '{stage}'")

        clear: list[str] = []
        people: dict[str, Optional[str]] = {}
        for name, value in (("assignee", assignee), ("scanned_by", scanned_by), ("digitized_by", digitized_by)):
            people[name] = clean_optional(value)
            if value is not None and people[name] is None:
                clear.append(name)

        new_deadline: Optional[date] = None
        if isinstance(deadline, date):
            new_deadline = deadline
        elif deadline is not None:
            text = clean_optional(deadline)
            if text is None:
                clear.append("deadline")
            else:
                try:
                    new_deadline = parse_iso_date(text)
                except ValueError:
                    raise ValidationError("Deadline must be YYYY-MM-DD")

        self._catalog.update_fields(
            record_id=int(record_id),
            last_edited_by=actor,
            stage=new_stage,
            deadline=new_deadline,
            clear=clear,
            **people,
        )

        updated = self._catalog.get_by_id(int(record_id))
        if not updated:
            raise ValidationError("Record does not exist")
        return updated

    def mark_completed(self, *, record_id: int, actor: Optional[str]) -> CatalogRecord:
        return self.update_record(record_id=record_id, actor=actor, stage=Stage.COMPLETED.value)

    def tasks_by_assignee(self, *, assignee: Optional[str] = None, search: Optional[str] = None) -> list[AssigneeTasks]:
        """Assigned records grouped by assignee, in first-seen (newest first) order."""
        only = (assignee or "").strip().casefold()
        term = (search or "").strip().casefold()
        groups: dict[str, list[CatalogRecord]] = {}
        for r in self._catalog.list_all():
            name = (r.assignee or "").strip()
            if not name:
                continue
            if only and name.casefold() != only:
                continue
            if term and term not in (r.book_name or "").casefold() and term not in name.casefold():
                continue
            groups.setdefault(name, []).append(r)
        return [AssigneeTasks(assignee=name, tasks=tasks) for name, tasks in groups.items()]
