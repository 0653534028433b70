"""Core action implementations shared across modes.

Every action receives the session and the binding that fired it and returns
a ``ModeResult``. Actions consult the mode's ``allows_*`` predicates before
calling into the buffer and skip the call entirely when the mode forbids it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from zorforge.buffer.state import Direction
from zorforge.input.keys import Binding
from zorforge.modes.bus import ModeResult

if TYPE_CHECKING:  # pragma: no cover - typing only
    from zorforge.session import EditorSession

Action = Callable[["EditorSession", Binding], ModeResult]

UNSAVED_WARNING = "Warning: Unsaved changes. Use :q! to force quit."


def blocked(reason: str) -> ModeResult:
    return ModeResult(consumed=True, status=f"blocked:{reason}")


def _moved(session: "EditorSession") -> ModeResult:
    if session.mode.is_visual:
        session.emit_selection()
    return ModeResult(consumed=True, status="move")


def enter_mode(session: "EditorSession", binding: Binding) -> ModeResult:
    """Mode entry keys do their work through the binding's trigger."""

    del session, binding
    return ModeResult(consumed=True, status="mode")


def move(session: "EditorSession", binding: Binding) -> ModeResult:
    if not session.mode.allows_cursor_movement():
        return blocked("cursor_movement")
    session.buffer.move_cursor(Direction(binding.argument))
    return _moved(session)


def word_forward(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_word_movement():
        return blocked("word_movement")
    session.buffer.move_word_forward()
    return _moved(session)


def word_backward(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_word_movement():
        return blocked("word_movement")
    session.buffer.move_word_backward()
    return _moved(session)


def page_up(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_page_movement():
        return blocked("page_movement")
    session.buffer.move_page_up(session.config.page_size)
    return _moved(session)


def page_down(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_page_movement():
        return blocked("page_movement")
    session.buffer.move_page_down(session.config.page_size)
    return _moved(session)


def undo(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_undo():
        return blocked("undo")
    if not session.buffer.undo():
        return session.show("Already at oldest change", status="undo_empty")
    return ModeResult(consumed=True, status="undo")


def redo(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_undo():
        return blocked("undo")
    if not session.buffer.redo():
        return session.show("Already at newest change", status="redo_empty")
    return ModeResult(consumed=True, status="redo")


def cut_char(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_cut():
        return blocked("cut")
    changed = session.buffer.cut_char()
    return ModeResult(consumed=True, status="cut" if changed else "noop")


def delete_forward(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_deletion():
        return blocked("deletion")
    changed = session.buffer.delete_char_forward()
    return ModeResult(consumed=True, status="delete" if changed else "noop")


def delete_line(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_deletion():
        return blocked("deletion")
    changed = session.buffer.delete_line()
    return ModeResult(consumed=True, status="delete_line" if changed else "noop")


def yank_line(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_cut():
        return blocked("clipboard")
    session.buffer.yank_line()
    session.bus.emit("clipboard.yank", session.clipboard.peek())
    return ModeResult(consumed=True, status="yank")


def paste(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_cut():
        return blocked("clipboard")
    changed = session.buffer.paste()
    return ModeResult(consumed=True, status="paste" if changed else "noop")


def indent_line(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_indent():
        return blocked("indent")
    session.buffer.indent_line()
    return ModeResult(consumed=True, status="indent")


def dedent_line(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_indent():
        return blocked("indent")
    changed = session.buffer.dedent_line()
    return ModeResult(consumed=True, status="dedent" if changed else "noop")


def next_match(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    return session.repeat_search(reverse=False)


def previous_match(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    return session.repeat_search(reverse=True)


def quit_editor(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if session.buffer.has_unsaved_changes():
        return session.show(UNSAVED_WARNING, status="quit_refused")
    session.request_quit()
    return ModeResult(consumed=True, status="quit")


__all__ = [
    "Action",
    "UNSAVED_WARNING",
    "blocked",
    "cut_char",
    "dedent_line",
    "delete_forward",
    "delete_line",
    "enter_mode",
    "indent_line",
    "move",
    "next_match",
    "page_down",
    "page_up",
    "paste",
    "previous_match",
    "quit_editor",
    "redo",
    "undo",
    "word_backward",
    "word_forward",
    "yank_line",
]
