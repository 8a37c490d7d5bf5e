"""Filename parsing for the digitization catalog.

Filenames follow ``Title-Author-Year[-Stage]`` with underscores standing in
for spaces, e.g. ``Kitab_Jo_Naam-Lekhak_Jo_Naam-2005-Scanning.pdf``.
Every caller (manual entry, batch import, bilingual preview) goes through
this module.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import (
    FILENAME_DELIMITER,
    SECONDARY_SCRIPT_END,
    SECONDARY_SCRIPT_START,
    UNKNOWN_SENTINEL,
)
from ..core.enums import Stage
from .model import BilingualFields, ParsedFileName

_EXTENSION = re.compile(r"\.[^/.]+$")
_DIGITS = re.compile(r"[0-9]+")

_STAGE_TOKEN_INDEX = 3


def strip_extension(raw: str) -> str:
    return _EXTENSION.sub("", raw)


def tokenize_filename(raw: str) -> list[str]:
    """Split a filename into normalized tokens.

    The extension is dropped, the rest is split on ``-`` and each segment has
    underscores turned into spaces and is trimmed. Empty input gives ``[""]``.
    """
    base = strip_extension(raw or "")
    return [segment.replace("_", " ").strip() for segment in base.split(FILENAME_DELIMITER)]


def is_decimal(token: str) -> bool:
    return bool(_DIGITS.fullmatch(token))


def classify_tokens(tokens: Sequence[str], *, original: str = "") -> ParsedFileName:
    """Map tokens positionally to book, author and year.

    Position 1 is the year when purely numeric (author stays unknown), the
    author otherwise. Position 2 only counts when numeric. Anything after
    position 2 is ignored here.
    """
    book = tokens[0] if tokens and tokens[0] else original
    author = UNKNOWN_SENTINEL
    year = UNKNOWN_SENTINEL

    if len(tokens) > 1 and tokens[1]:
        if is_decimal(tokens[1]):
            year = tokens[1]
        else:
            author = tokens[1]

    if len(tokens) > 2 and is_decimal(tokens[2]):
        year = tokens[2]

    return ParsedFileName(book_name=book, author_name=author, year=year)


def infer_stage(tokens: Sequence[str]) -> Optional[Stage]:
    """Read a pipeline stage from the fourth token, if there is one."""
    if len(tokens) <= _STAGE_TOKEN_INDEX:
        return None
    return Stage.from_label(tokens[_STAGE_TOKEN_INDEX])


def parse_filename(raw: str) -> ParsedFileName:
    tokens = tokenize_filename(raw)
    parsed = classify_tokens(tokens, original=strip_extension(raw or "").strip())
    stage = infer_stage(tokens)
    if stage is None:
        return parsed
    return ParsedFileName(
        book_name=parsed.book_name,
        author_name=parsed.author_name,
        year=parsed.year,
        stage=stage,
    )


def contains_secondary_script(text: Optional[str]) -> bool:
    """True if any character falls in the Arabic block (Sindhi script)."""
    if not text:
        return False
    return any(SECONDARY_SCRIPT_START <= ord(ch) <= SECONDARY_SCRIPT_END for ch in text)


def parse_and_translate(raw: str) -> BilingualFields:
    """Route the parsed title and author into English or Sindhi slots.

    Nothing is translated; a fragment goes to the Sindhi slot when it contains
    Sindhi script and to the English slot otherwise. Unknown author and year
    come back empty.
    """
    raw = require_non_empty(raw, "File name")
    parsed = parse_filename(raw)

    title = parsed.book_name
    author = "" if parsed.author_name == UNKNOWN_SENTINEL else parsed.author_name
    year = "" if parsed.year == UNKNOWN_SENTINEL else parsed.year

    title_is_sindhi = contains_secondary_script(title)
    author_is_sindhi = contains_secondary_script(author)
    return BilingualFields(
        title_english="" if title_is_sindhi else title,
        title_sindhi=title if title_is_sindhi else "",
        author_english="" if author_is_sindhi else author,
        author_sindhi=author if author_is_sindhi else "",
        year=year,
    )
