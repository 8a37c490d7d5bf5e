from __future__ import annotations

from typing import Iterable, Optional


def normalize_key(file_name: Optional[str]) -> str:
    """Comparison key for catalog file names: trimmed and case-folded."""
    return (file_name or "").strip().casefold()


class DuplicateReconciler:
    """Decide which candidate file names are new.

    Built from an explicit snapshot of existing keys taken when the decision
    starts. Every accepted candidate joins the running set, so a later row of
    the same batch with the same key is rejected too.
    """

    def __init__(self, existing: Iterable[Optional[str]] = ()):
        self._seen = {normalize_key(name) for name in existing if normalize_key(name)}
        self.accepted = 0
        self.rejected = 0

    def is_duplicate(self, file_name: str) -> bool:
        return normalize_key(file_name) in self._seen

    def accept(self, file_name: str) -> bool:
        """Record the candidate if new; return False (and count it) if not."""
        key = normalize_key(file_name)
        if key in self._seen:
            self.rejected += 1
            return False
        self._seen.add(key)
        self.accepted += 1
        return True
