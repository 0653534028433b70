"""Buffer abstractions, clipboard, search, and undo/redo data structures."""

from .buffer import DEFAULT_PAGE_SIZE, DEFAULT_TAB_SIZE, Buffer, Transaction
from .changes import (
    BufferChange,
    ChangeLog,
    ChangeRecord,
    Compound,
    Delete,
    DeleteLine,
    Insert,
    InsertLine,
    NewLine,
    RemoveLine,
)
from .clipboard import DEFAULT_MAX_HISTORY, Clipboard
from .document import BufferDocument
from .manager import BufferId, BufferManager
from .search import SearchIndex, find_matches
from .state import Cursor, Direction, Selection, SelectionType, VisualVariant
from .sync import BufferMirror, BufferSync, BufferValidationError, SearchMatch
from .text_objects import TextSpan, find_text_object
from .validation import clamp_cursor, ensure_cursor, ensure_row

__all__ = [
    "Buffer",
    "BufferChange",
    "BufferDocument",
    "BufferId",
    "BufferManager",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "ChangeLog",
    "ChangeRecord",
    "Clipboard",
    "Compound",
    "Cursor",
    "DEFAULT_MAX_HISTORY",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TAB_SIZE",
    "Delete",
    "DeleteLine",
    "Direction",
    "Insert",
    "InsertLine",
    "NewLine",
    "RemoveLine",
    "SearchIndex",
    "SearchMatch",
    "Selection",
    "SelectionType",
    "TextSpan",
    "Transaction",
    "VisualVariant",
    "clamp_cursor",
    "ensure_cursor",
    "ensure_row",
    "find_matches",
    "find_text_object",
]
