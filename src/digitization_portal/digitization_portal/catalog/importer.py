from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Callable, Mapping, Optional, Sequence, Union

import pandas as pd

from ..common.validators import clean_optional
from ..core.constants import ALLOWED_IMPORT_EXTENSIONS
from ..core.enums import ImportState, Stage
from ..core.exceptions import DomainError, FormatError, ValidationError
from .model import CatalogRecord, NewCatalogRecord
from .parsing import parse_filename
from .reconciler import DuplicateReconciler
from .repository import CatalogRepository

logger = logging.getLogger(__name__)

Source = Union[str, Path, IO[bytes]]
Row = Mapping[str, Any]

FILE_NAME_COLUMNS = ("File Name", "file_name")
BOOK_NAME_COLUMNS = ("Book Name", "book_name")
AUTHOR_NAME_COLUMNS = ("Author Name", "author_name")
YEAR_COLUMNS = ("Year", "year")
STAGE_COLUMNS = ("Stage", "stage")

# Explicit engines: pandas cannot guess one from a file-like upload.
_EXCEL_ENGINES = {
    "xlsx": "openpyxl",
    "ods": "odf",
    "xls": "xlrd",
}


def import_extension(file_name: Optional[str]) -> str:
    """Return the lower-cased extension or raise FormatError if not a spreadsheet."""
    ext = Path(file_name or "").suffix.lower().lstrip(".")
    if ext not in ALLOWED_IMPORT_EXTENSIONS:
        allowed = ", ".join(f".{e}" for e in sorted(ALLOWED_IMPORT_EXTENSIONS))
        raise FormatError(f"Unsupported file type '{file_name}'. Allowed: {allowed}")
    return ext


def read_table(source: Source, extension: str) -> list[dict[str, str]]:
    """Read the first sheet of a tabular file as text rows keyed by header."""
    if extension == "csv":
        df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    else:
        df = pd.read_excel(
            source,
            sheet_name=0,
            dtype=str,
            keep_default_na=False,
            engine=_EXCEL_ENGINES[extension],
        )

    df.columns = [str(c).strip() for c in df.columns]
    rows: list[dict[str, str]] = []
    for record in df.to_dict(orient="records"):
        row = {k: str(v).strip() for k, v in record.items()}
        if any(row.values()):
            rows.append(row)
    return rows


def _column(row: Row, aliases: Sequence[str]) -> Optional[str]:
    for alias in aliases:
        value = clean_optional(row.get(alias))
        if value:
            return value
    return None


def build_record(row: Row, *, actor: Optional[str]) -> Optional[NewCatalogRecord]:
    """Map one spreadsheet row to a record.

    Returns None when the row has no file name. Explicit columns win over
    values parsed from the file name.
    """
    file_name = _column(row, FILE_NAME_COLUMNS)
    if not file_name:
        return None

    parsed = parse_filename(file_name)
    stage = Stage.from_label(_column(row, STAGE_COLUMNS)) or parsed.stage or Stage.PENDING

    return NewCatalogRecord(
        file_name=file_name,
        book_name=_column(row, BOOK_NAME_COLUMNS) or parsed.book_name,
        author_name=_column(row, AUTHOR_NAME_COLUMNS) or parsed.author_name,
        year=_column(row, YEAR_COLUMNS) or parsed.year,
        stage=stage,
        created_by=actor,
        last_edited_by=actor,
    )



def _count_unrecognised_stages(rows: Sequence[Row], candidates: Sequence[Optional[NewCatalogRecord]]) -> int:
    """Log and count rows whose Stage column names no known stage."""
    count = 0
    for row, candidate in zip(rows, candidates):
        label = _column(row, STAGE_COLUMNS)
        if candidate is None or not label or Stage.from_label(label) is not None:
            continue
        count += 1
        logger.warning(
            "Unrecognised stage %r for %s, stored as %s",
            label,
            candidate.file_name,
            candidate.stage.value,
        )
    return count


@dataclass(frozen=True)
class ImportResult:
    total_rows: int
    inserted: int
    skipped_duplicates: int
    dropped_rows: int
    message: str
    unrecognised_stages: int = 0
    catalog: Sequence[CatalogRecord] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "inserted": self.inserted,
            "skipped_duplicates": self.skipped_duplicates,
            "dropped_rows": self.dropped_rows,
            "unrecognised_stages": self.unrecognised_stages,
            "message": self.message,
        }


class BatchImportPipeline:
    """Bulk catalog import: read, parse, reconcile, insert once.

    States move Idle -> Reading -> Parsing -> Reconciling -> Inserting -> Idle,
    or to Failed from any of them. Nothing is written unless the whole batch
    is inserted.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        *,
        reader: Callable[[Source, str], list[dict[str, str]]] = read_table,
        on_refresh: Optional[Callable[[], Sequence[CatalogRecord]]] = None,
    ):
        self._catalog = catalog
        self._reader = reader
        self._on_refresh = on_refresh
        self.state = ImportState.IDLE
        self.history: list[ImportState] = [ImportState.IDLE]

    def _enter(self, state: ImportState) -> None:
        self.state = state
        self.history.append(state)

    def run(self, source: Source, file_name: str, *, actor: Optional[str] = None) -> ImportResult:
        self.state = ImportState.IDLE
        self.history = [ImportState.IDLE]
        try:
            result = self._run(source, file_name, actor=actor)
        except DomainError as e:
            logger.warning("Import of %s failed in state %s: %s", file_name, self.state.value, e)
            self._enter(ImportState.FAILED)
            raise
        except Exception:
            logger.exception("Import of %s failed in state %s", file_name, self.state.value)
            self._enter(ImportState.FAILED)
            raise
        self._enter(ImportState.IDLE)
        return result

    def _run(self, source: Source, file_name: str, *, actor: Optional[str]) -> ImportResult:
        extension = import_extension(file_name)

        self._enter(ImportState.READING)
        try:
            rows = self._reader(source, extension)
        except pd.errors.EmptyDataError as e:
            raise ValidationError("Import file is empty") from e
        except (ValueError, OSError, KeyError, zipfile.BadZipFile) as e:
            raise ValidationError(f"Could not read import file: {e}") from e
        if not rows:
            raise ValidationError("Import file is empty")

        self._enter(ImportState.PARSING)
        candidates = [build_record(row, actor=actor) for row in rows]
        dropped = sum(1 for c in candidates if c is None)
        unrecognised = _count_unrecognised_stages(rows, candidates)

        self._enter(ImportState.RECONCILING)
        reconciler = DuplicateReconciler(self._catalog.list_file_names())
        accepted = [c for c in candidates if c is not None and reconciler.accept(c.file_name)]

        if not accepted:
            logger.info("Import of %s: no new records (%d duplicates)", file_name, reconciler.rejected)
            return ImportResult(
                total_rows=len(rows),
                inserted=0,
                skipped_duplicates=reconciler.rejected,
                dropped_rows=dropped,
                unrecognised_stages=unrecognised,
                message="No new records. Duplicate files detected, nothing to add.",
            )

        self._enter(ImportState.INSERTING)
        inserted = self._catalog.insert_many(accepted)
        logger.info(
            "Imported %d records from %s (%d duplicates skipped, %d rows without file name)",
            inserted,
            file_name,
            reconciler.rejected,
            dropped,
        )

        catalog: Sequence[CatalogRecord] = ()
        if self._on_refresh is not None:
            try:
                catalog = tuple(self._on_refresh())
            except DomainError:
                # The batch is already committed; a failed re-read does not undo it.
                logger.exception("Catalog refresh after import of %s failed", file_name)

        return ImportResult(
            total_rows=len(rows),
            inserted=inserted,
            skipped_duplicates=reconciler.rejected,
            dropped_rows=dropped,
            unrecognised_stages=unrecognised,
            message=f"{inserted} records imported.",
            catalog=catalog,
        )
