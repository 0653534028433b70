"""Invertible change records and the undo/redo log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .document import BufferDocument
from .state import Cursor


@dataclass(frozen=True, slots=True)
class Insert:
    """``content`` (single line) was inserted at ``position``."""

    position: Cursor
    content: str

    def apply(self, document: BufferDocument) -> None:
        document.insert_text(*self.position, self.content)

    def revert(self, document: BufferDocument) -> "BufferChange":
        document.remove_text(*self.position, len(self.content))
        return Delete(self.position, self.content)


@dataclass(frozen=True, slots=True)
class Delete:
    """``content`` (single line) was removed starting at ``position``."""

    position: Cursor
    content: str

    def apply(self, document: BufferDocument) -> None:
        document.remove_text(*self.position, len(self.content))

    def revert(self, document: BufferDocument) -> "BufferChange":
        document.insert_text(*self.position, self.content)
        return Insert(self.position, self.content)


@dataclass(frozen=True, slots=True)
class NewLine:
    """The line at ``position`` was split; ``content`` is the moved tail."""

    position: Cursor
    content: str

    def apply(self, document: BufferDocument) -> None:
        document.split_line(*self.position)

    def revert(self, document: BufferDocument) -> "BufferChange":
        row = self.position[0]
        document.join_lines(row)
        return DeleteLine(row, self.content)


@dataclass(frozen=True, slots=True)
class DeleteLine:
    """The break after ``position`` was removed; ``content`` is the joined text."""

    position: int
    content: str

    def apply(self, document: BufferDocument) -> None:
        document.join_lines(self.position)

    def revert(self, document: BufferDocument) -> "BufferChange":
        line = document.get_line(self.position)
        col = len(line) - len(self.content)
        document.split_line(self.position, col)
        return NewLine((self.position, col), self.content)


@dataclass(frozen=True, slots=True)
class InsertLine:
    """A whole line ``content`` was inserted at index ``position``."""

    position: int
    content: str

    def apply(self, document: BufferDocument) -> None:
        document.insert_line(self.position, self.content)

    def revert(self, document: BufferDocument) -> "BufferChange":
        document.remove_line(self.position)
        return RemoveLine(self.position, self.content)


@dataclass(frozen=True, slots=True)
class RemoveLine:
    """The whole line at index ``position`` was removed.

    Never recorded for the last remaining line; that case is a ``Delete``.
    """

    position: int
    content: str

    def apply(self, document: BufferDocument) -> None:
        document.remove_line(self.position)

    def revert(self, document: BufferDocument) -> "BufferChange":
        document.insert_line(self.position, self.content)
        return InsertLine(self.position, self.content)


@dataclass(frozen=True, slots=True)
class Compound:
    """Several changes applied in order and undone as one step."""

    changes: Tuple["BufferChange", ...]

    def apply(self, document: BufferDocument) -> None:
        for change in self.changes:
            change.apply(document)

    def revert(self, document: BufferDocument) -> "BufferChange":
        return Compound(
            tuple(change.revert(document) for change in reversed(self.changes))
        )


BufferChange = Union[Insert, Delete, NewLine, DeleteLine, InsertLine, RemoveLine, Compound]


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    change: BufferChange
    cursor_before: Cursor
    change_id: int


class ChangeLog:
    """Paired undo/redo stacks with monotonically increasing change ids."""

    def __init__(self) -> None:
        self.undo_stack: List[ChangeRecord] = []
        self.redo_stack: List[ChangeRecord] = []
        self.change_counter: int = 0

    def record(self, change: BufferChange, cursor_before: Cursor) -> ChangeRecord:
        """Push a fresh edit; any redo history is discarded."""

        entry = self.push_undo(change, cursor_before)
        self.redo_stack.clear()
        return entry

    def push_undo(self, change: BufferChange, cursor_before: Cursor) -> ChangeRecord:
        entry = ChangeRecord(change, cursor_before, self._next_id())
        self.undo_stack.append(entry)
        return entry

    def push_redo(self, change: BufferChange, cursor_before: Cursor) -> ChangeRecord:
        entry = ChangeRecord(change, cursor_before, self._next_id())
        self.redo_stack.append(entry)
        return entry

    def pop_undo(self) -> Optional[ChangeRecord]:
        return self.undo_stack.pop() if self.undo_stack else None

    def pop_redo(self) -> Optional[ChangeRecord]:
        return self.redo_stack.pop() if self.redo_stack else None

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def top_id(self) -> int:
        """Id of the newest undoable record, ``0`` for a pristine log."""

        return self.undo_stack[-1].change_id if self.undo_stack else 0

    def _next_id(self) -> int:
        self.change_counter += 1
        return self.change_counter


__all__ = [
    "Insert",
    "Delete",
    "NewLine",
    "DeleteLine",
    "InsertLine",
    "RemoveLine",
    "Compound",
    "BufferChange",
    "ChangeRecord",
    "ChangeLog",
]
