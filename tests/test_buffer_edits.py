from __future__ import annotations

import pytest

from zorforge.buffer import Buffer, BufferValidationError, Clipboard, Direction


def test_typing_advances_cursor() -> None:
    buffer = Buffer()

    buffer.insert_char("a")
    buffer.insert_char("b")

    assert list(buffer.get_content()) == ["ab"]
    assert buffer.get_cursor_position() == (0, 2)


def test_newline_keeps_indentation() -> None:
    buffer = Buffer.from_lines(["    first line"])
    buffer.set_cursor_position(0, 8)

    buffer.insert_newline_auto_indent()

    assert list(buffer.get_content()) == ["    firs", "    t line"]
    assert buffer.get_cursor_position() == (1, 4)


def test_plain_insert_line_drops_indentation() -> None:
    buffer = Buffer.from_lines(["    ab"])
    buffer.set_cursor_position(0, 5)

    buffer.insert_line()

    assert list(buffer.get_content()) == ["    a", "b"]
    assert buffer.get_cursor_position() == (1, 0)


def test_open_line_below_and_above() -> None:
    buffer = Buffer.from_lines(["a"])

    buffer.insert_line_below()
    assert list(buffer.get_content()) == ["a", ""]
    assert buffer.get_cursor_position() == (1, 0)

    indented = Buffer.from_lines(["  x"])
    indented.insert_line_above()
    assert list(indented.get_content()) == ["  ", "  x"]
    assert indented.get_cursor_position() == (0, 2)


def test_backspace_joins_lines_and_stops_at_origin() -> None:
    buffer = Buffer.from_lines(["ab", "cd"])
    buffer.set_cursor_position(1, 0)

    assert buffer.delete_char() is True
    assert list(buffer.get_content()) == ["abcd"]
    assert buffer.get_cursor_position() == (0, 2)

    buffer.set_cursor_position(0, 0)
    assert buffer.delete_char() is False
    assert len(buffer.changes.undo_stack) == 1


def test_forward_delete_at_document_end_is_noop() -> None:
    buffer = Buffer.from_lines(["ab"])
    buffer.set_cursor_position(0, 2)

    assert buffer.delete_char_forward() is False
    assert list(buffer.get_content()) == ["ab"]


def test_forward_delete_joins_next_line() -> None:
    buffer = Buffer.from_lines(["ab", "cd"])
    buffer.set_cursor_position(0, 2)

    assert buffer.delete_char_forward() is True
    assert list(buffer.get_content()) == ["abcd"]
    assert buffer.get_cursor_position() == (0, 2)


def test_cut_char_yanks_removed_character() -> None:
    clipboard = Clipboard()
    buffer = Buffer.from_lines(["xyz"], clipboard=clipboard)

    buffer.cut_char()

    assert list(buffer.get_content()) == ["yz"]
    assert clipboard.peek() == "x"


def test_replace_overwrites_then_appends() -> None:
    buffer = Buffer.from_lines(["ab"])

    buffer.insert_char_replace("X")
    buffer.insert_char_replace("Y")
    buffer.insert_char_replace("Z")

    assert list(buffer.get_content()) == ["XYZ"]


def test_delete_line_yanks_and_keeps_one_line() -> None:
    clipboard = Clipboard()
    buffer = Buffer.from_lines(["only"], clipboard=clipboard)

    assert buffer.delete_line() is True
    assert list(buffer.get_content()) == [""]
    assert clipboard.peek() == "only"
    assert buffer.delete_line() is False


def test_delete_last_line_moves_cursor_up() -> None:
    buffer = Buffer.from_lines(["one", "two"])
    buffer.set_cursor_position(1, 2)

    buffer.delete_line()

    assert list(buffer.get_content()) == ["one"]
    assert buffer.get_cursor_position() == (0, 0)


def test_paste_splits_multiline_payload() -> None:
    clipboard = Clipboard()
    clipboard.yank("12\n34")
    buffer = Buffer.from_lines(["ab"], clipboard=clipboard)
    buffer.set_cursor_position(0, 1)

    assert buffer.paste() is True
    assert list(buffer.get_content()) == ["a12", "34b"]


def test_paste_with_empty_clipboard_is_noop() -> None:
    buffer = Buffer.from_lines(["ab"])

    assert buffer.paste() is False
    assert not buffer.has_unsaved_changes()


def test_ctrl_w_and_ctrl_u() -> None:
    buffer = Buffer.from_lines(["foo bar baz"])
    buffer.set_cursor_position(0, 11)

    buffer.delete_word_backward()
    assert list(buffer.get_content()) == ["foo bar "]

    buffer.delete_to_line_start()
    assert list(buffer.get_content()) == [""]
    assert buffer.delete_to_line_start() is False


def test_indent_and_dedent_never_remove_text() -> None:
    buffer = Buffer.from_lines(["  x"], tab_size=4)
    buffer.set_cursor_position(0, 2)

    buffer.indent_line()
    assert list(buffer.get_content()) == ["      x"]
    assert buffer.get_cursor_position() == (0, 6)

    buffer.dedent_line()
    buffer.dedent_line()
    assert list(buffer.get_content()) == ["x"]
    assert buffer.dedent_line() is False


def test_cursor_stays_in_bounds() -> None:
    buffer = Buffer.from_lines(["long line", "ab"])
    buffer.move_cursor(Direction.LINE_END)
    buffer.move_cursor(Direction.DOWN)

    assert buffer.get_cursor_position() == (1, 2)
    for direction in (Direction.DOWN, Direction.RIGHT, Direction.RIGHT):
        buffer.move_cursor(direction)
    assert buffer.get_cursor_position() == (1, 2)
    buffer.move_cursor(Direction.TOP)
    buffer.move_cursor(Direction.UP)
    buffer.move_cursor(Direction.LEFT)
    assert buffer.get_cursor_position() == (0, 0)


def test_word_motions_stay_on_line() -> None:
    buffer = Buffer.from_lines(["foo  bar baz"])

    buffer.move_word_forward()
    assert buffer.get_cursor_position() == (0, 5)
    buffer.move_word_forward()
    buffer.move_word_forward()
    assert buffer.get_cursor_position() == (0, 12)
    buffer.move_word_backward()
    assert buffer.get_cursor_position() == (0, 9)


def test_insert_preparations() -> None:
    buffer = Buffer.from_lines(["   text"])

    buffer.prepare_insert_start_of_line()
    assert buffer.get_cursor_position() == (0, 3)
    buffer.prepare_append()
    assert buffer.get_cursor_position() == (0, 4)
    buffer.prepare_append_end_of_line()
    assert buffer.get_cursor_position() == (0, 7)


def test_invalid_row_fails_fast() -> None:
    buffer = Buffer()

    with pytest.raises(BufferValidationError) as info:
        buffer.get_line(3)
    assert info.value.row == 3


def test_multichar_insert_is_rejected() -> None:
    with pytest.raises(ValueError):
        Buffer().insert_char("ab")


def test_char_before_cursor() -> None:
    buffer = Buffer.from_lines(["xy"])

    assert buffer.get_char_before_cursor() is None
    buffer.set_cursor_position(0, 2)
    assert buffer.get_char_before_cursor() == "y"
