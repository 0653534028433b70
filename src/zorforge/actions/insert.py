"""Actions available while Insert mode is active."""

from __future__ import annotations

from typing import TYPE_CHECKING

from zorforge.buffer.state import Direction
from zorforge.input.keys import Binding
from zorforge.modes.bus import ModeResult
from zorforge.modes.mode import InsertVariant

from .core import blocked

if TYPE_CHECKING:  # pragma: no cover - typing only
    from zorforge.session import EditorSession


def _edited(changed: bool, status: str) -> ModeResult:
    return ModeResult(consumed=True, status=status if changed else "noop")


def prepare_insert(session: "EditorSession", variant: InsertVariant) -> None:
    """Position the cursor (or open a line) for the way Insert was entered."""

    if not session.mode.allows_text_input():
        return
    buffer = session.buffer
    if variant is InsertVariant.APPEND:
        buffer.prepare_append()
    elif variant is InsertVariant.APPEND_END:
        buffer.prepare_append_end_of_line()
    elif variant is InsertVariant.LINE_START:
        buffer.prepare_insert_start_of_line()
    elif variant is InsertVariant.LINE_BELOW:
        buffer.insert_line_below()
    elif variant is InsertVariant.LINE_ABOVE:
        buffer.insert_line_above()


def exit_insert(session: "EditorSession", binding: Binding) -> ModeResult:
    """Leaving Insert steps back onto the last inserted character."""

    del binding
    buffer = session.buffer
    if session.mode.allows_cursor_movement() and buffer.cursor[1] > 0:
        buffer.move_cursor(Direction.LEFT)
    return ModeResult(consumed=True, status="mode")


def insert_char(session: "EditorSession", binding: Binding) -> ModeResult:
    if not session.mode.allows_text_input():
        return blocked("text_input")
    char = binding.argument or ""
    if session.mode.insert_variant() is InsertVariant.REPLACE:
        changed = session.buffer.insert_char_replace(char)
    else:
        changed = session.buffer.insert_char(char)
    return _edited(changed, "insert")


def newline(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_text_input():
        return blocked("text_input")
    if session.config.auto_indent:
        changed = session.buffer.insert_newline_auto_indent()
    else:
        changed = session.buffer.insert_line()
    return _edited(changed, "newline")


def delete_backward(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_deletion():
        return blocked("deletion")
    return _edited(session.buffer.delete_char(), "delete")


def delete_forward(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_deletion():
        return blocked("deletion")
    return _edited(session.buffer.delete_char_forward(), "delete")


def delete_word(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_deletion():
        return blocked("deletion")
    return _edited(session.buffer.delete_word_backward(), "delete_word")


def delete_to_line_start(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_deletion():
        return blocked("deletion")
    return _edited(session.buffer.delete_to_line_start(), "delete_line")


def tab(session: "EditorSession", binding: Binding) -> ModeResult:
    """Insert ``tab_size`` spaces at the cursor."""

    del binding
    if not session.mode.allows_text_input():
        return blocked("text_input")
    spaces = " " * session.buffer.tab_size
    return _edited(session.buffer.insert_text(spaces), "tab")


def indent(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_indent():
        return blocked("indent")
    return _edited(session.buffer.indent_line(), "indent")


def dedent(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_indent():
        return blocked("indent")
    return _edited(session.buffer.dedent_line(), "dedent")


__all__ = [
    "delete_backward",
    "delete_forward",
    "delete_to_line_start",
    "delete_word",
    "dedent",
    "exit_insert",
    "indent",
    "insert_char",
    "newline",
    "prepare_insert",
    "tab",
]
