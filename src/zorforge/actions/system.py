"""Clipboard shortcuts bound in the global table.

Each one prefers the visual selection and falls back to the cursor line.
Cut and paste still honour the current mode's permissions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zorforge.input.keys import Binding
from zorforge.modes.bus import ModeResult
from zorforge.modes.mode import ModeTrigger

from .core import blocked

if TYPE_CHECKING:  # pragma: no cover - typing only
    from zorforge.session import EditorSession


def _leave_visual(session: "EditorSession") -> None:
    if session.mode.is_visual:
        session.apply_trigger(ModeTrigger.ESCAPE)


def copy(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    buffer = session.buffer
    text = buffer.get_selected_text()
    if text is None:
        text = buffer.get_current_line()
    session.clipboard.yank(text)
    session.bus.emit("clipboard.yank", text)
    return ModeResult(consumed=True, status="copy")


def cut(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_cut():
        return blocked("cut")
    buffer = session.buffer
    if buffer.get_selected_text() is not None:
        buffer.yank_selection()
        buffer.delete_selection()
        _leave_visual(session)
    else:
        buffer.delete_line()
    return ModeResult(consumed=True, status="cut")


def paste(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    # Command mode owns no buffer cursor to paste at.
    if not session.mode.allows_cursor_movement():
        return blocked("paste")
    buffer = session.buffer
    if buffer.get_visual_selection() is not None:
        buffer.paste_over_selection()
        _leave_visual(session)
    else:
        buffer.paste()
    return ModeResult(consumed=True, status="paste")


__all__ = ["copy", "cut", "paste"]
