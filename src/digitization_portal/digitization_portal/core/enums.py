from __future__ import annotations

import re
from enum import Enum
from typing import Optional


_LABEL_NOISE = re.compile(r"[\s_\-]+")


def _label_key(value: str) -> str:
    return _LABEL_NOISE.sub("", value).casefold()


class Stage(str, Enum):
    """Linear position of a work in the digitization pipeline."""

    PENDING = "Pending"
    SCANNING = "Scanning"
    SCANNING_QC = "Scanning-QC"
    PDF_PAGES = "PDF Pages"
    PDF_QC = "PDF-QC"
    UPLOADING = "Uploading"
    COMPLETED = "Completed"

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["Stage"]:
        """Match a free-text label, ignoring case, spaces, underscores and hyphens.

        Returns None for empty or unrecognised labels.
        """
        if not label:
            return None
        key = _label_key(str(label))
        if not key:
            return None
        for stage in cls:
            if _label_key(stage.value) == key:
                return stage
        return None


class ReportType(str, Enum):
    """Unit a staff work report is counted in."""

    PAGES = "Pages"
    BOOKS = "Books"

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["ReportType"]:
        if not label:
            return None
        key = _label_key(str(label))
        for report_type in cls:
            if _label_key(report_type.value) == key:
                return report_type
        return None


class AttendanceStatus(str, Enum):
    """Attendance status stored in the database."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    NOT_MARKED = "Not Marked"


class ImportState(str, Enum):
    """States of the batch import pipeline."""

    IDLE = "Idle"
    READING = "Reading"
    PARSING = "Parsing"
    RECONCILING = "Reconciling"
    INSERTING = "Inserting"
    FAILED = "Failed"
