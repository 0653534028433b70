"""Substring search over buffer lines."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .state import Cursor
from .sync import SearchMatch


def find_matches(
    lines: Sequence[str], query: str, *, case_sensitive: bool = True
) -> List[SearchMatch]:
    """Return every occurrence of ``query`` in document order.

    The scan resumes one character after each hit, so occurrences that
    overlap (``"aa"`` in ``"aaa"``) are all reported.
    """

    if not query:
        return []
    width = len(query)
    matches: List[SearchMatch] = []
    for row, line in enumerate(lines):
        if case_sensitive:
            start = 0
            while True:
                found = line.find(query, start)
                if found < 0:
                    break
                matches.append((row, found, found + width))
                start = found + 1
            continue
        # Columns index the original line; its lowered form may differ in length.
        needle = query.lower()
        for col in range(len(line) - width + 1):
            if line[col : col + width].lower() == needle:
                matches.append((row, col, col + width))
    return matches


class SearchIndex:
    """Match list from the last search plus a saturating cursor into it."""

    def __init__(self) -> None:
        self.query: str = ""
        self.case_sensitive: bool = True
        self._matches: List[SearchMatch] = []
        self.current: Optional[int] = None

    @property
    def matches(self) -> Tuple[SearchMatch, ...]:
        return tuple(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def run(self, lines: Sequence[str], query: str, *, case_sensitive: bool) -> int:
        self.query = query
        self.case_sensitive = case_sensitive
        self._matches = find_matches(lines, query, case_sensitive=case_sensitive)
        self.current = 0 if self._matches else None
        return len(self._matches)

    def current_position(self) -> Optional[Cursor]:
        if self.current is None:
            return None
        row, col, _ = self._matches[self.current]
        return (row, col)

    def step(self, delta: int) -> bool:
        if self.current is None:
            return False
        target = self.current + delta
        if target < 0 or target >= len(self._matches):
            return False
        self.current = target
        return True

    def select_before(self, cursor: Cursor) -> bool:
        """Point at the last match that starts strictly before ``cursor``."""

        candidates = [
            index
            for index, (row, col, _) in enumerate(self._matches)
            if (row, col) < cursor
        ]
        if not candidates:
            return False
        self.current = candidates[-1]
        return True

    def clear(self) -> None:
        self.query = ""
        self._matches = []
        self.current = None
