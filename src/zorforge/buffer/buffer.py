"""Buffer façade combining document, cursor, selection, search, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Iterable, List, Optional, Sequence, Tuple

from zorforge.runtime import telemetry

from .changes import (
    BufferChange,
    ChangeLog,
    Compound,
    Delete,
    DeleteLine,
    Insert,
    InsertLine,
    NewLine,
    RemoveLine,
)
from .clipboard import Clipboard
from .document import BufferDocument
from .search import SearchIndex
from .state import Cursor, Direction, Selection, SelectionType, VisualVariant, ordered
from .sync import BufferMirror, SearchMatch
from .text_objects import find_text_object
from .validation import clamp_cursor, ensure_row

DEFAULT_TAB_SIZE = 4
DEFAULT_PAGE_SIZE = 20


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


class Buffer:
    """A mutable line-oriented document with a reversible change log.

    Columns count Python code points. Every successful mutator applies one
    change, moves the cursor, and pushes exactly one record onto the undo
    stack (clearing redo). Mutators called at a document boundary are silent
    no-ops that return ``False`` and record nothing.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        clipboard: Optional[Clipboard] = None,
        tab_size: int = DEFAULT_TAB_SIZE,
        path: Optional[str] = None,
    ) -> None:
        if tab_size < 1:
            raise ValueError("tab_size must be positive")
        self.name = name
        self.path = path
        self.document = document or BufferDocument()
        self.clipboard = clipboard if clipboard is not None else Clipboard()
        self.tab_size = tab_size
        self.cursor: Cursor = (0, 0)
        self.visual_start: Optional[Cursor] = None
        self.visual_mode = VisualVariant.CHAR
        self.changes = ChangeLog()
        self.search_index = SearchIndex()
        self.last_save_change_id = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str], **kwargs: object) -> "Buffer":
        return cls(document=BufferDocument.from_lines(lines), **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_text(cls, text: str, **kwargs: object) -> "Buffer":
        return cls(document=BufferDocument.from_text(text), **kwargs)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def get_content(self) -> Sequence[str]:
        return self.document.snapshot()

    def get_line(self, row: int) -> str:
        return self.document.get_line(row)

    def get_current_line(self) -> str:
        return self.document.get_line(self.cursor[0])

    def line_count(self) -> int:
        return self.document.line_count

    def get_cursor_position(self) -> Cursor:
        return self.cursor

    def get_char_before_cursor(self) -> Optional[str]:
        row, col = self.cursor
        if col == 0:
            return None
        return self.document.get_line(row)[col - 1]

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            lines=tuple(self.document.snapshot()),
            cursor=self.cursor,
            selection=self.get_visual_selection(),
            visual_mode=self.visual_mode,
            search_matches=self.search_matches,
            current_match=self.current_match,
            version=self.document.version,
            attributes=dict(attributes or {}),
        )

    # ------------------------------------------------------------------
    # Cursor motion (never recorded)
    # ------------------------------------------------------------------

    def set_cursor_position(self, row: int, col: int) -> None:
        if 0 <= row < self.document.line_count:
            self.cursor = (row, max(0, min(col, self.document.line_length(row))))

    def move_cursor(self, direction: Direction) -> None:
        row, col = self.cursor
        last_row = self.document.line_count - 1
        if direction is Direction.LEFT:
            col = max(0, col - 1)
        elif direction is Direction.RIGHT:
            col = min(col + 1, self.document.line_length(row))
        elif direction is Direction.UP:
            if row > 0:
                row -= 1
                col = min(col, self.document.line_length(row))
        elif direction is Direction.DOWN:
            if row < last_row:
                row += 1
                col = min(col, self.document.line_length(row))
        elif direction is Direction.TOP:
            row, col = 0, 0
        elif direction is Direction.BOTTOM:
            row, col = last_row, 0
        elif direction is Direction.LINE_START:
            col = 0
        elif direction is Direction.LINE_END:
            col = self.document.line_length(row)
        self.cursor = (row, col)

    def move_page_up(self, lines: int = DEFAULT_PAGE_SIZE) -> None:
        for _ in range(lines):
            self.move_cursor(Direction.UP)

    def move_page_down(self, lines: int = DEFAULT_PAGE_SIZE) -> None:
        for _ in range(lines):
            self.move_cursor(Direction.DOWN)

    def move_word_forward(self) -> None:
        """Skip the rest of the current word and the blanks after it."""

        row, col = self.cursor
        line = self.document.get_line(row)
        while col < len(line) and not line[col].isspace():
            col += 1
        while col < len(line) and line[col].isspace():
            col += 1
        self.cursor = (row, col)

    def move_word_backward(self) -> None:
        row, col = self.cursor
        self.cursor = (row, self._word_start_before(row, col))

    def _word_start_before(self, row: int, col: int) -> int:
        line = self.document.get_line(row)
        while col > 0 and line[col - 1].isspace():
            col -= 1
        while col > 0 and not line[col - 1].isspace():
            col -= 1
        return col

    def prepare_append(self) -> None:
        """``a``: step past the character under the cursor."""

        if self.get_current_line():
            self.move_cursor(Direction.RIGHT)

    def prepare_append_end_of_line(self) -> None:
        self.move_cursor(Direction.LINE_END)

    def prepare_insert_start_of_line(self) -> None:
        """``I``: jump to the first non-blank character."""

        row = self.cursor[0]
        self.cursor = (row, len(_leading_whitespace(self.get_current_line())))

    # ------------------------------------------------------------------
    # Edit primitives
    # ------------------------------------------------------------------

    def insert_char(self, char: str) -> bool:
        if len(char) != 1 or char == "\n":
            raise ValueError("insert_char expects a single non-newline character")
        row, col = self.cursor
        return self._commit("insert_char", Insert((row, col), char), (row, col + 1))

    def insert_char_replace(self, char: str) -> bool:
        """Replace-mode input: overwrite under the cursor, append at line end."""

        if len(char) != 1 or char == "\n":
            raise ValueError("insert_char_replace expects a single character")
        row, col = self.cursor
        line = self.get_current_line()
        change: BufferChange = Insert((row, col), char)
        if col < len(line):
            change = Compound((Delete((row, col), line[col]), change))
        return self._commit("insert_char_replace", change, (row, col + 1))

    def insert_text(self, text: str) -> bool:
        """Insert ``text`` at the cursor; embedded line breaks split lines."""

        if not text:
            return False
        changes, cursor_after = self._insertion_changes(self.cursor, text)
        return self._commit("insert_text", Compound(tuple(changes)), cursor_after)

    def delete_char(self) -> bool:
        """Backspace: remove the character before the cursor or join upward."""

        row, col = self.cursor
        if col > 0:
            line = self.get_current_line()
            return self._commit(
                "delete_char", Delete((row, col - 1), line[col - 1]), (row, col - 1)
            )
        if row > 0:
            previous_length = self.document.line_length(row - 1)
            change = DeleteLine(row - 1, self.get_current_line())
            return self._commit("delete_char", change, (row - 1, previous_length))
        return False

    def delete_char_forward(self) -> bool:
        """Delete key: remove the character under the cursor or join the next line."""

        return self._delete_forward("delete_char_forward") is not None

    def cut_char(self) -> bool:
        """``x``: forward delete that yanks the removed character."""

        removed = self._delete_forward("cut_char")
        if removed:
            self.clipboard.yank(removed)
        return removed is not None

    def _delete_forward(self, label: str) -> Optional[str]:
        row, col = self.cursor
        line = self.get_current_line()
        if col < len(line):
            self._commit(label, Delete((row, col), line[col]), (row, col))
            return line[col]
        if row < self.document.line_count - 1:
            self._commit(label, DeleteLine(row, self.document.get_line(row + 1)), (row, col))
            return ""
        return None

    def insert_newline_auto_indent(self) -> bool:
        """Split at the cursor; the new line inherits the current indentation."""

        row, col = self.cursor
        line = self.get_current_line()
        indent = _leading_whitespace(line)
        change: BufferChange = NewLine((row, col), line[col:])
        if indent:
            change = Compound((change, Insert((row + 1, 0), indent)))
        return self._commit("insert_newline", change, (row + 1, len(indent)))

    def insert_line(self) -> bool:
        """Split at the cursor without carrying indentation."""

        row, col = self.cursor
        change = NewLine((row, col), self.get_current_line()[col:])
        return self._commit("insert_line", change, (row + 1, 0))

    def insert_line_below(self) -> bool:
        """``o``: open an indented line under the cursor line."""

        row = self.cursor[0]
        indent = _leading_whitespace(self.get_current_line())
        return self._commit(
            "insert_line_below", InsertLine(row + 1, indent), (row + 1, len(indent))
        )

    def insert_line_above(self) -> bool:
        """``O``: open an indented line above the cursor line."""

        row = self.cursor[0]
        indent = _leading_whitespace(self.get_current_line())
        return self._commit(
            "insert_line_above", InsertLine(row, indent), (row, len(indent))
        )

    def delete_line(self) -> bool:
        """``dd``: yank and remove the cursor line."""

        row = self.cursor[0]
        line = self.get_current_line()
        if self.document.line_count == 1:
            if not line:
                return False
            self.clipboard.yank(line)
            return self._commit("delete_line", Delete((0, 0), line), (0, 0))
        self.clipboard.yank(line)
        target_row = min(row, self.document.line_count - 2)
        return self._commit("delete_line", RemoveLine(row, line), (target_row, 0))

    def yank_line(self) -> None:
        self.clipboard.yank(self.get_current_line())

    def paste(self) -> bool:
        payload = self.clipboard.peek()
        if payload is None:
            return False
        changes, cursor_after = self._insertion_changes(self.cursor, payload)
        return self._commit("paste", Compound(tuple(changes)), cursor_after)

    def delete_word_backward(self) -> bool:
        """Ctrl-W: remove from the previous word start up to the cursor."""

        row, col = self.cursor
        start = self._word_start_before(row, col)
        if start == col:
            return False
        removed = self.get_current_line()[start:col]
        return self._commit("delete_word_backward", Delete((row, start), removed), (row, start))

    def delete_to_line_start(self) -> bool:
        """Ctrl-U: remove everything left of the cursor."""

        row, col = self.cursor
        if col == 0:
            return False
        removed = self.get_current_line()[:col]
        return self._commit("delete_to_line_start", Delete((row, 0), removed), (row, 0))

    def indent_line(self) -> bool:
        row, col = self.cursor
        spaces = " " * self.tab_size
        return self._commit("indent_line", Insert((row, 0), spaces), (row, col + self.tab_size))

    def dedent_line(self) -> bool:
        row, col = self.cursor
        change = self._dedent_change(row)
        if change is None:
            return False
        return self._commit("dedent_line", change, (row, max(0, col - len(change.content))))

    def _dedent_change(self, row: int) -> Optional[Delete]:
        line = self.document.get_line(row)
        count = min(len(_leading_whitespace(line)), self.tab_size)
        if count == 0:
            return None
        return Delete((row, 0), line[:count])

    # ------------------------------------------------------------------
    # Visual selection
    # ------------------------------------------------------------------

    def start_visual(self, variant: VisualVariant = VisualVariant.CHAR) -> None:
        self.visual_start = self.cursor
        self.visual_mode = variant

    def clear_visual(self) -> None:
        self.visual_start = None

    def set_visual_mode(self, variant: VisualVariant) -> None:
        """Switch the selection shape, keeping the anchor."""

        if self.visual_start is None:
            self.visual_start = self.cursor
        self.visual_mode = variant

    def select_all(self) -> None:
        last = self.document.line_count - 1
        self.visual_start = (0, 0)
        self.visual_mode = VisualVariant.CHAR
        self.cursor = (last, self.document.line_length(last))

    def swap_visual_anchor(self) -> bool:
        if self.visual_start is None:
            return False
        anchor = clamp_cursor(self.document, *self.visual_start)
        self.visual_start = self.cursor
        self.cursor = anchor
        return True

    def get_visual_selection(self) -> Optional[Selection]:
        if self.visual_start is None:
            return None
        anchor = clamp_cursor(self.document, *self.visual_start)
        return (anchor, self.cursor)

    def get_selection_bounds(self) -> Optional[Selection]:
        """Normalize (anchor, cursor) according to the visual mode."""

        selection = self.get_visual_selection()
        if selection is None:
            return None
        anchor, cursor = selection
        start_row = min(anchor[0], cursor[0])
        end_row = max(anchor[0], cursor[0])
        if self.visual_mode is VisualVariant.LINE:
            return (start_row, 0), (end_row, self.document.line_length(end_row))
        if self.visual_mode is VisualVariant.BLOCK:
            return (start_row, min(anchor[1], cursor[1])), (end_row, max(anchor[1], cursor[1]))
        return ordered(anchor, cursor)

    def get_selected_text(self) -> Optional[str]:
        bounds = self.get_selection_bounds()
        if bounds is None:
            return None
        (start_row, start_col), (end_row, end_col) = bounds
        lines = self.document.snapshot()
        if self.visual_mode is VisualVariant.LINE:
            return "\n".join(lines[start_row : end_row + 1])
        if self.visual_mode is VisualVariant.BLOCK:
            return "\n".join(
                line[start_col:end_col] for line in lines[start_row : end_row + 1]
            )
        if start_row == end_row:
            return lines[start_row][start_col:end_col]
        parts = [lines[start_row][start_col:]]
        parts.extend(lines[start_row + 1 : end_row])
        parts.append(lines[end_row][:end_col])
        return "\n".join(parts)

    def yank_selection(self) -> Optional[str]:
        text = self.get_selected_text()
        if text:
            self.clipboard.yank(text)
        return text

    def delete_selection(self) -> Optional[str]:
        """Remove the selected region; the cursor lands on its start."""

        text = self.get_selected_text()
        bounds = self.get_selection_bounds()
        if text is None or bounds is None:
            return None
        changes, cursor_after = self._selection_removal(bounds)
        self.clear_visual()
        if changes:
            self._commit("delete_selection", Compound(tuple(changes)), cursor_after)
        return text

    def paste_over_selection(self) -> bool:
        """Replace the selection with the newest clipboard entry."""

        payload = self.clipboard.peek()
        bounds = self.get_selection_bounds()
        if payload is None or bounds is None:
            return False
        mode = self.visual_mode
        cursor_before = self.cursor
        (start_row, _), (end_row, _) = bounds
        whole = self._covers_document(start_row, end_row)

        with Transaction(self, "paste_over_selection") as tx:
            removal, cursor_after = self._selection_removal(bounds)
            Compound(tuple(removal)).apply(self.document)
            if mode is VisualVariant.BLOCK:
                insertion, cursor_after = self._block_insertion(bounds, payload)
            elif mode is VisualVariant.LINE and not whole:
                insertion, cursor_after = self._line_insertion(start_row, payload)
            else:
                insertion, cursor_after = self._insertion_changes(cursor_after, payload)
            Compound(tuple(insertion)).apply(self.document)
            self.cursor = cursor_after
            self.clear_visual()
            tx.commit(Compound(tuple(removal + insertion)), cursor_before)
        return True

    def indent_selection(self) -> bool:
        bounds = self.get_selection_bounds()
        if bounds is None:
            return False
        (start_row, _), (end_row, _) = bounds
        spaces = " " * self.tab_size
        changes: List[BufferChange] = [
            Insert((row, 0), spaces) for row in range(start_row, end_row + 1)
        ]
        shifts = {row: self.tab_size for row in range(start_row, end_row + 1)}
        return self._commit_shift("indent_selection", changes, shifts)

    def dedent_selection(self) -> bool:
        bounds = self.get_selection_bounds()
        if bounds is None:
            return False
        (start_row, _), (end_row, _) = bounds
        changes: List[BufferChange] = []
        shifts = {}
        for row in range(start_row, end_row + 1):
            change = self._dedent_change(row)
            if change is not None:
                changes.append(change)
                shifts[row] = -len(change.content)
        if not changes:
            return False
        return self._commit_shift("dedent_selection", changes, shifts)

    def _commit_shift(
        self, label: str, changes: List[BufferChange], shifts: dict[int, int]
    ) -> bool:
        def shifted(position: Cursor) -> Cursor:
            row, col = position
            return (row, max(0, col + shifts.get(row, 0)))

        if self.visual_start is not None:
            self.visual_start = shifted(self.visual_start)
        return self._commit(label, Compound(tuple(changes)), shifted(self.cursor))

    def select_text_object(self, key: str, selection: SelectionType) -> bool:
        """Select the text object named by ``key`` around the cursor."""

        span = find_text_object(self.document.snapshot(), self.cursor, key, selection)
        if span is None:
            return False
        self.visual_start = span.start
        self.visual_mode = VisualVariant.LINE if span.linewise else VisualVariant.CHAR
        self.cursor = span.end
        return True

    def _selection_removal(self, bounds: Selection) -> Tuple[List[BufferChange], Cursor]:
        (start_row, start_col), (end_row, end_col) = bounds
        lines = self.document.snapshot()
        changes: List[BufferChange] = []

        if self.visual_mode is VisualVariant.LINE:
            if self._covers_document(start_row, end_row):
                # The last line is never removed, only emptied.
                for row in range(1, end_row + 1):
                    changes.append(RemoveLine(1, lines[row]))
                if lines[0]:
                    changes.append(Delete((0, 0), lines[0]))
                return changes, (0, 0)
            for row in range(start_row, end_row + 1):
                changes.append(RemoveLine(start_row, lines[row]))
            remaining = len(lines) - (end_row + 1 - start_row)
            return changes, (min(start_row, remaining - 1), 0)

        if self.visual_mode is VisualVariant.BLOCK:
            for row in range(start_row, end_row + 1):
                segment = lines[row][start_col:end_col]
                if segment:
                    changes.append(Delete((row, start_col), segment))
            return changes, (start_row, min(start_col, len(lines[start_row])))

        if start_row == end_row:
            segment = lines[start_row][start_col:end_col]
            if segment:
                changes.append(Delete((start_row, start_col), segment))
            return changes, (start_row, start_col)

        head_tail = lines[start_row][start_col:]
        if head_tail:
            changes.append(Delete((start_row, start_col), head_tail))
        last_head = lines[end_row][:end_col]
        if last_head:
            changes.append(Delete((end_row, 0), last_head))
        for row in range(start_row + 1, end_row):
            changes.append(RemoveLine(start_row + 1, lines[row]))
        changes.append(DeleteLine(start_row, lines[end_row][end_col:]))
        return changes, (start_row, start_col)

    def _insertion_changes(self, cursor: Cursor, text: str) -> Tuple[List[BufferChange], Cursor]:
        row, col = cursor
        tail = self.document.get_line(row)[col:]
        changes: List[BufferChange] = []
        for index, part in enumerate(text.split("\n")):
            if index:
                changes.append(NewLine((row, col), tail))
                row, col = row + 1, 0
            if part:
                changes.append(Insert((row, col), part))
                col += len(part)
        return changes, (row, col)

    def _line_insertion(self, row: int, payload: str) -> Tuple[List[BufferChange], Cursor]:
        parts = payload.split("\n")
        changes: List[BufferChange] = [
            InsertLine(row + offset, part) for offset, part in enumerate(parts)
        ]
        return changes, (row, 0)

    def _block_insertion(self, bounds: Selection, payload: str) -> Tuple[List[BufferChange], Cursor]:
        (start_row, start_col), _ = bounds
        changes: List[BufferChange] = []
        line_count = self.document.line_count
        for offset, part in enumerate(payload.split("\n")):
            row = start_row + offset
            if row >= line_count:
                changes.append(InsertLine(row, " " * start_col + part))
                continue
            length = self.document.line_length(row)
            if length < start_col:
                changes.append(Insert((row, length), " " * (start_col - length)))
            if part:
                changes.append(Insert((row, start_col), part))
        return changes, (start_row, start_col)

    def _covers_document(self, start_row: int, end_row: int) -> bool:
        return start_row == 0 and end_row == self.document.line_count - 1

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    @property
    def search_matches(self) -> Tuple[SearchMatch, ...]:
        return self.search_index.matches

    @property
    def current_match(self) -> Optional[int]:
        return self.search_index.current

    def search(self, query: str, case_sensitive: bool = True) -> int:
        count = self.search_index.run(
            self.document.snapshot(), query, case_sensitive=case_sensitive
        )
        telemetry.record_event(
            "buffer.search",
            level="debug",
            data={"buffer": self.name, "query": query, "matches": count},
        )
        self._jump_to_current_match()
        return count

    def search_backward(self, query: str, case_sensitive: bool = True) -> int:
        """Like ``search`` but lands on the last match before the cursor."""

        origin = self.cursor
        count = self.search_index.run(
            self.document.snapshot(), query, case_sensitive=case_sensitive
        )
        if count and not self.search_index.select_before(origin):
            self.search_index.current = count - 1
        self._jump_to_current_match()
        return count

    def next_match(self) -> bool:
        if not self.search_index.step(1):
            return False
        self._jump_to_current_match()
        return True

    def previous_match(self) -> bool:
        if not self.search_index.step(-1):
            return False
        self._jump_to_current_match()
        return True

    def clear_search(self) -> None:
        self.search_index.clear()

    def _jump_to_current_match(self) -> None:
        position = self.search_index.current_position()
        if position is not None:
            self.cursor = clamp_cursor(self.document, *position)

    # ------------------------------------------------------------------
    # Undo / redo and dirty tracking
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        entry = self.changes.pop_undo()
        if entry is None:
            return False
        with telemetry.span("buffer::undo", component="buffer", metadata={"buffer": self.name}):
            inverse = entry.change.revert(self.document)
            self.changes.push_redo(inverse, self.cursor)
            self.cursor = entry.cursor_before
        return True

    def redo(self) -> bool:
        entry = self.changes.pop_redo()
        if entry is None:
            return False
        with telemetry.span("buffer::redo", component="buffer", metadata={"buffer": self.name}):
            original = entry.change.revert(self.document)
            self.changes.push_undo(original, self.cursor)
            self.cursor = entry.cursor_before
        return True

    def has_unsaved_changes(self) -> bool:
        return self.changes.top_id() != self.last_save_change_id

    def mark_saved(self) -> None:
        self.last_save_change_id = self.changes.top_id()

    # ------------------------------------------------------------------

    def _commit(self, label: str, change: BufferChange, cursor_after: Cursor) -> bool:
        with Transaction(self, label) as tx:
            cursor_before = self.cursor
            change.apply(self.document)
            self.cursor = cursor_after
            tx.commit(change, cursor_before)
        return True


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one buffer mutation in a telemetry span and records it."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, change: BufferChange, cursor_before: Cursor) -> None:
        ensure_row(self.buffer.document, self.buffer.cursor[0])
        self.buffer.changes.record(change, cursor_before)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "Transaction", "DEFAULT_TAB_SIZE", "DEFAULT_PAGE_SIZE"]
