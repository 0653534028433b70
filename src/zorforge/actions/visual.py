"""Actions dedicated to Visual mode selection management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from zorforge.buffer.state import Direction, SelectionType, VisualVariant
from zorforge.input.keys import Binding
from zorforge.modes.bus import ModeResult
from zorforge.modes.mode import ModeTrigger

from .core import blocked

if TYPE_CHECKING:  # pragma: no cover - typing only
    from zorforge.session import EditorSession


def _ensure_anchor(session: "EditorSession") -> None:
    if session.buffer.visual_start is None:
        session.buffer.start_visual(session.mode.visual_variant() or VisualVariant.CHAR)


def extend(session: "EditorSession", binding: Binding) -> ModeResult:
    """Shift+arrow: anchor a selection if needed, then move the cursor."""

    if not session.mode.allows_selection():
        return blocked("selection")
    _ensure_anchor(session)
    session.buffer.move_cursor(Direction(binding.argument))
    session.emit_selection()
    return ModeResult(consumed=True, status="visual_select")


def select_all(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_selection():
        return blocked("selection")
    session.buffer.select_all()
    session.emit_selection()
    return ModeResult(consumed=True, status="visual_select")


def swap_anchor(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.buffer.swap_visual_anchor():
        return ModeResult(consumed=False, status="no_selection")
    session.emit_selection(swap=True)
    return ModeResult(consumed=True, status="visual_swap")


def yank(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    buffer = session.buffer
    bounds = buffer.get_selection_bounds()
    text = buffer.yank_selection()
    if text is None or bounds is None:
        return ModeResult(consumed=False, status="no_selection")
    buffer.set_cursor_position(*bounds[0])
    session.bus.emit("visual.yank", {"text": text, "range": bounds})
    return ModeResult(consumed=True, status="visual_yank", message=text)


def _cut(session: "EditorSession", label: str) -> Optional[str]:
    buffer = session.buffer
    bounds = buffer.get_selection_bounds()
    text = buffer.yank_selection()
    if text is None or bounds is None:
        return None
    buffer.delete_selection()
    session.bus.emit("visual.delete", {"label": label, "text": text, "range": bounds})
    return text


def delete(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_cut():
        return blocked("cut")
    text = _cut(session, "visual_delete")
    if text is None:
        return ModeResult(consumed=False, status="no_selection")
    return ModeResult(consumed=True, status="visual_delete", message=text)


def change(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if not session.mode.allows_cut():
        return blocked("cut")
    text = _cut(session, "visual_change")
    if text is None:
        return ModeResult(consumed=False, status="no_selection")
    return ModeResult(consumed=True, status="visual_change", message=text)


def indent(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    changed = session.buffer.indent_selection()
    return ModeResult(consumed=True, status="visual_indent" if changed else "noop")


def dedent(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    changed = session.buffer.dedent_selection()
    return ModeResult(consumed=True, status="visual_dedent" if changed else "noop")


def paste(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    if session.clipboard.is_empty():
        return session.show("Clipboard is empty", status="noop")
    changed = session.buffer.paste_over_selection()
    return ModeResult(consumed=True, status="visual_paste" if changed else "noop")


def _parse_object(argument: Optional[str]) -> Tuple[SelectionType, str]:
    kind, _, key = (argument or "").partition(":")
    return SelectionType(kind), key


_SHAPE_TRIGGERS = {
    VisualVariant.CHAR: ModeTrigger.VISUAL_CHAR,
    VisualVariant.LINE: ModeTrigger.VISUAL_LINE,
    VisualVariant.BLOCK: ModeTrigger.VISUAL_BLOCK,
}


def select_object(session: "EditorSession", binding: Binding) -> ModeResult:
    """``iw``, ``a(``, ``i"``... replace the selection with a text object."""

    selection, key = _parse_object(binding.argument)
    buffer = session.buffer
    if not buffer.select_text_object(key, selection):
        return ModeResult(consumed=True, status="no_object")
    # Paragraphs select whole lines; keep the mode's shape in step.
    if session.mode.visual_variant() is not buffer.visual_mode:
        session.apply_trigger(_SHAPE_TRIGGERS[buffer.visual_mode])
    session.emit_selection()
    return ModeResult(consumed=True, status="visual_select")


__all__ = [
    "change",
    "dedent",
    "delete",
    "extend",
    "indent",
    "paste",
    "select_all",
    "select_object",
    "swap_anchor",
    "yank",
]
