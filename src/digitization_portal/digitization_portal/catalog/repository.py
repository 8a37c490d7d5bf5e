from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Stage
from .model import CatalogRecord, NewCatalogRecord

# Optional columns that an update may reset to NULL.
CLEARABLE_FIELDS = frozenset({"assignee", "scanned_by", "digitized_by", "deadline"})


class CatalogRepository(Protocol):
    """Persistence boundary for digitization records.

    The service layer depends on this interface only; implementations raise
    StorageError when the backing store fails.
    """

    def list_file_names(self) -> Sequence[str]:
        raise NotImplementedError

    def exists_file_name(self, file_name: str) -> bool:
        """Case-insensitive existence check on file_name."""

        raise NotImplementedError

    def insert_one(self, record: NewCatalogRecord) -> int:
        raise NotImplementedError

    def insert_many(self, records: Sequence[NewCatalogRecord]) -> int:
        """Insert all records in one transaction; either all or none are written."""

        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[CatalogRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[CatalogRecord]:
        """Newest first."""

        raise NotImplementedError

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
        """Update only the fields that are not None; set the ones named in `clear` to NULL."""

        raise NotImplementedError
