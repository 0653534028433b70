"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Cursor
from .sync import BufferValidationError


def ensure_cursor(document: BufferDocument, cursor: Cursor) -> Cursor:
    row, col = cursor
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", cursor=cursor)
    if col < 0 or col > len(document.get_line(row)):
        raise BufferValidationError("Column out of range", cursor=cursor)
    return cursor


def ensure_row(document: BufferDocument, row: int) -> int:
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", row=row)
    return row


def clamp_cursor(document: BufferDocument, row: int, col: int) -> Cursor:
    row = max(0, min(row, document.line_count - 1))
    col = max(0, min(col, len(document.get_line(row))))
    return (row, col)
