"""Boundary types for handing committed buffer state to hosts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

from .state import Cursor, Selection, VisualVariant

SearchMatch = Tuple[int, int, int]  # (row, start_col, end_col)


@dataclass(frozen=True, slots=True)
class BufferMirror:
    """Read-only snapshot a renderer draws from.

    Built after an input event is fully processed, so it never reflects a
    half-applied edit.
    """

    lines: Tuple[str, ...]
    cursor: Cursor
    selection: Optional[Selection] = None
    visual_mode: VisualVariant = VisualVariant.CHAR
    search_matches: Tuple[SearchMatch, ...] = ()
    current_match: Optional[int] = None
    version: int = 0
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class BufferSync(Protocol):
    """How hosts pull render snapshots out of the core."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a caller hands the buffer an out-of-range row or cursor.

    This signals a bug in the gating logic, not a user-recoverable state.
    """

    def __init__(
        self,
        message: str,
        *,
        cursor: Cursor | None = None,
        row: int | None = None,
    ) -> None:
        super().__init__(message)
        self.cursor = cursor
        self.row = row if row is not None else (cursor[0] if cursor else None)
