from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Stage


@dataclass(frozen=True)
class ParsedFileName:
    """Fields derived from a `Title-Author-Year[-Stage]` filename."""

    book_name: str
    author_name: str
    year: str
    stage: Optional[Stage] = None


@dataclass(frozen=True)
class BilingualFields:
    """Title/author routed into English or Sindhi slots by script."""

    title_english: str
    title_sindhi: str
    author_english: str
    author_sindhi: str
    year: str


@dataclass(frozen=True)
class NewCatalogRecord:
    """A record ready to be written (no storage-assigned fields yet)."""

    file_name: str
    book_name: str
    author_name: str
    year: str
    stage: Stage = Stage.PENDING
    assignee: Optional[str] = None
    scanned_by: Optional[str] = None
    digitized_by: Optional[str] = None
    deadline: Optional[date] = None
    created_by: Optional[str] = None
    last_edited_by: Optional[str] = None


@dataclass(frozen=True)
class CatalogRecord:
    """One work tracked through the digitization pipeline."""

    record_id: int
    file_name: str
    book_name: str
    author_name: str
    year: str
    stage: Stage
    assignee: Optional[str] = None
    scanned_by: Optional[str] = None
    digitized_by: Optional[str] = None
    deadline: Optional[date] = None
    created_by: Optional[str] = None
    last_edited_by: Optional[str] = None
    created_at: Optional[datetime] = None
    last_edited_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "file_name": self.file_name,
            "book_name": self.book_name,
            "author_name": self.author_name,
            "year": self.year,
            "stage": self.stage.value,
            "assignee": self.assignee,
            "scanned_by": self.scanned_by,
            "digitized_by": self.digitized_by,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "created_by": self.created_by,
            "last_edited_by": self.last_edited_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
