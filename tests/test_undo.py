from __future__ import annotations

from typing import Callable, List

from zorforge.buffer import Buffer, Clipboard, VisualVariant


def _state(buffer: Buffer) -> tuple:
    return tuple(buffer.get_content()), buffer.get_cursor_position()


EDITS: List[Callable[[Buffer], object]] = [
    lambda b: b.insert_char("x"),
    lambda b: b.insert_newline_auto_indent(),
    lambda b: b.insert_text("hello"),
    lambda b: b.delete_char(),
    lambda b: b.insert_line_below(),
    lambda b: b.indent_line(),
    lambda b: b.insert_char_replace("Q"),
    lambda b: b.delete_word_backward(),
    lambda b: b.insert_line_above(),
    lambda b: b.delete_line(),
    lambda b: b.paste(),
    lambda b: b.dedent_line(),
]


def test_undo_sequence_restores_original_state() -> None:
    clipboard = Clipboard()
    clipboard.yank("a\nb")
    buffer = Buffer.from_lines(["  one", "two"], clipboard=clipboard)
    buffer.set_cursor_position(0, 3)
    snapshots = [_state(buffer)]

    applied = 0
    for edit in EDITS:
        if edit(buffer):
            applied += 1
            snapshots.append(_state(buffer))

    for expected in reversed(snapshots[:-1]):
        assert buffer.undo() is True
        assert _state(buffer) == expected
    assert applied == len(snapshots) - 1
    assert buffer.undo() is False


def test_redo_after_undo_is_identity() -> None:
    buffer = Buffer.from_lines(["abc"])
    buffer.set_cursor_position(0, 1)
    buffer.insert_newline_auto_indent()
    after_edit = _state(buffer)

    buffer.undo()
    assert buffer.redo() is True
    assert _state(buffer) == after_edit
    assert buffer.redo() is False


def test_new_edit_clears_redo() -> None:
    buffer = Buffer()
    buffer.insert_char("a")
    buffer.undo()

    buffer.insert_char("b")

    assert buffer.changes.can_redo() is False
    assert list(buffer.get_content()) == ["b"]


def test_selection_edits_are_single_records() -> None:
    clipboard = Clipboard()
    clipboard.yank("ZZ")
    buffer = Buffer.from_lines(["alpha", "beta", "gamma"], clipboard=clipboard)
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(1, 0)
    before = _state(buffer)

    buffer.indent_selection()
    assert list(buffer.get_content())[:2] == ["    alpha", "    beta"]
    buffer.paste_over_selection()

    assert buffer.undo() is True
    assert buffer.undo() is True
    assert _state(buffer) == before


def test_dirty_tracking() -> None:
    buffer = Buffer.from_lines(["text"])
    assert not buffer.has_unsaved_changes()

    buffer.insert_char("!")
    assert buffer.has_unsaved_changes()

    buffer.mark_saved()
    assert not buffer.has_unsaved_changes()

    buffer.undo()
    assert buffer.has_unsaved_changes()
    buffer.redo()
    assert buffer.has_unsaved_changes()


def test_undo_back_to_pristine_is_clean() -> None:
    buffer = Buffer.from_lines(["text"])

    buffer.insert_char("!")
    buffer.undo()

    assert not buffer.has_unsaved_changes()


def test_boundary_noops_record_nothing() -> None:
    buffer = Buffer()

    buffer.delete_char()
    buffer.delete_char_forward()
    buffer.dedent_line()
    buffer.delete_word_backward()

    assert buffer.changes.can_undo() is False
    assert not buffer.has_unsaved_changes()
