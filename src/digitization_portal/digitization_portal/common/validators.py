from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def clean_optional(value: Any) -> Optional[str]:
    """Strip a free-text value; blank and None become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
