"""Line storage for zorforge buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from .sync import BufferValidationError


@dataclass(slots=True)
class BufferDocument:
    """Mutable list-of-lines text store.

    The store never becomes empty: a zero-byte document is a single empty
    line. Every mutation bumps ``version`` so renderers can cheaply detect
    that a committed snapshot changed.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    def __post_init__(self) -> None:
        if not self._lines:
            self._lines = [""]

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls(_lines=list(lines))

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=text.split("\n"))

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, row: int) -> str:
        self._check_row(row)
        return self._lines[row]

    def line_length(self, row: int) -> int:
        return len(self.get_line(row))

    def set_line(self, row: int, text: str) -> None:
        self._check_row(row)
        self._lines[row] = text
        self.version += 1

    def insert_line(self, row: int, text: str) -> None:
        if row < 0 or row > len(self._lines):
            raise BufferValidationError("Row out of range", row=row)
        self._lines.insert(row, text)
        self.version += 1

    def remove_line(self, row: int) -> str:
        """Remove ``row``; removing the only line leaves one empty line."""

        self._check_row(row)
        removed = self._lines.pop(row)
        if not self._lines:
            self._lines.append("")
        self.version += 1
        return removed

    def insert_text(self, row: int, col: int, text: str) -> None:
        line = self.get_line(row)
        self._check_col(row, col, line)
        self.set_line(row, line[:col] + text + line[col:])

    def remove_text(self, row: int, col: int, length: int) -> str:
        line = self.get_line(row)
        self._check_col(row, col, line)
        removed = line[col : col + length]
        self.set_line(row, line[:col] + line[col + length :])
        return removed

    def split_line(self, row: int, col: int) -> str:
        """Break ``row`` at ``col``; the tail moves to a new line below."""

        line = self.get_line(row)
        self._check_col(row, col, line)
        self._lines[row] = line[:col]
        self._lines.insert(row + 1, line[col:])
        self.version += 1
        return line[col:]

    def join_lines(self, row: int) -> str:
        """Append line ``row + 1`` onto ``row`` and drop it."""

        self._check_row(row + 1)
        following = self._lines.pop(row + 1)
        self._lines[row] += following
        self.version += 1
        return following

    def _check_row(self, row: int) -> None:
        if row < 0 or row >= len(self._lines):
            raise BufferValidationError("Row out of range", row=row)

    @staticmethod
    def _check_col(row: int, col: int, line: str) -> None:
        if col < 0 or col > len(line):
            raise BufferValidationError("Column out of range", cursor=(row, col))
