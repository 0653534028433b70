from __future__ import annotations

from zorforge.buffer import Buffer, Clipboard, VisualVariant


def test_char_selection_delete() -> None:
    buffer = Buffer.from_lines(["abc"])
    buffer.start_visual(VisualVariant.CHAR)
    buffer.set_cursor_position(0, 3)

    assert buffer.get_selected_text() == "abc"
    assert buffer.delete_selection() == "abc"
    assert list(buffer.get_content()) == [""]
    assert buffer.get_cursor_position() == (0, 0)
    assert buffer.get_visual_selection() is None


def test_backward_selection_is_normalized() -> None:
    buffer = Buffer.from_lines(["hello world"])
    buffer.set_cursor_position(0, 8)
    buffer.start_visual()
    buffer.set_cursor_position(0, 2)

    assert buffer.get_selection_bounds() == ((0, 2), (0, 8))
    assert buffer.get_selected_text() == "llo wo"


def test_multiline_char_selection() -> None:
    buffer = Buffer.from_lines(["one", "two", "three"])
    buffer.set_cursor_position(0, 1)
    buffer.start_visual()
    buffer.set_cursor_position(2, 2)

    assert buffer.get_selected_text() == "ne\ntwo\nth"
    buffer.delete_selection()
    assert list(buffer.get_content()) == ["oree"]
    assert buffer.get_cursor_position() == (0, 1)


def test_line_selection_yank_and_delete() -> None:
    clipboard = Clipboard()
    buffer = Buffer.from_lines(["a", "b", "c"], clipboard=clipboard)
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(1, 0)

    assert buffer.yank_selection() == "a\nb"
    assert clipboard.peek() == "a\nb"
    buffer.delete_selection()
    assert list(buffer.get_content()) == ["c"]


def test_line_selection_of_whole_document_leaves_empty_line() -> None:
    buffer = Buffer.from_lines(["a", "b"])
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(1, 0)

    buffer.delete_selection()

    assert list(buffer.get_content()) == [""]
    assert buffer.get_cursor_position() == (0, 0)


def test_block_selection() -> None:
    buffer = Buffer.from_lines(["abcd", "efgh", "ijkl"])
    buffer.set_cursor_position(0, 1)
    buffer.start_visual(VisualVariant.BLOCK)
    buffer.set_cursor_position(2, 3)

    assert buffer.get_selected_text() == "bc\nfg\njk"
    buffer.delete_selection()
    assert list(buffer.get_content()) == ["ad", "eh", "il"]


def test_block_paste_pads_short_rows() -> None:
    clipboard = Clipboard()
    clipboard.yank("X\nY\nZ")
    buffer = Buffer.from_lines(["abcd", "", "abcd"], clipboard=clipboard)
    buffer.set_cursor_position(0, 2)
    buffer.start_visual(VisualVariant.BLOCK)
    buffer.set_cursor_position(2, 3)

    assert buffer.paste_over_selection() is True
    assert list(buffer.get_content()) == ["abXd", "  Y", "abZd"]


def test_paste_over_char_selection_uses_clipboard_snapshot() -> None:
    clipboard = Clipboard()
    clipboard.yank("new")
    buffer = Buffer.from_lines(["old text"], clipboard=clipboard)
    buffer.start_visual()
    buffer.set_cursor_position(0, 3)

    buffer.paste_over_selection()

    assert list(buffer.get_content()) == ["new text"]
    assert clipboard.peek() == "new"


def test_set_visual_mode_keeps_anchor() -> None:
    buffer = Buffer.from_lines(["abc", "def"])
    buffer.set_cursor_position(0, 1)
    buffer.start_visual()
    buffer.set_cursor_position(1, 1)

    buffer.set_visual_mode(VisualVariant.LINE)

    assert buffer.get_visual_selection() == ((0, 1), (1, 1))
    assert buffer.get_selected_text() == "abc\ndef"


def test_indent_and_dedent_selection() -> None:
    buffer = Buffer.from_lines(["a", "  b"], tab_size=2)
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(1, 0)

    buffer.indent_selection()
    assert list(buffer.get_content()) == ["  a", "    b"]
    buffer.dedent_selection()
    buffer.dedent_selection()
    assert list(buffer.get_content()) == ["a", "b"]
    assert buffer.dedent_selection() is False


def test_select_all_and_swap_anchor() -> None:
    buffer = Buffer.from_lines(["ab", "cde"])

    buffer.select_all()
    assert buffer.get_selected_text() == "ab\ncde"

    buffer.swap_visual_anchor()
    assert buffer.get_cursor_position() == (0, 0)
    assert buffer.visual_start == (1, 3)


def test_stale_anchor_is_clamped() -> None:
    buffer = Buffer.from_lines(["abcdef"])
    buffer.set_cursor_position(0, 6)
    buffer.start_visual()
    buffer.delete_line()

    assert buffer.get_visual_selection() == ((0, 0), (0, 0))


def make_lines_buffer(clipboard: Clipboard | None = None) -> Buffer:
    if clipboard is None:
        clipboard = Clipboard()
    return Buffer.from_lines(["a", "b", "c"], clipboard=clipboard)


def test_line_delete_of_middle_row_keeps_neighbours() -> None:
    buffer = make_lines_buffer()
    buffer.set_cursor_position(1, 0)
    buffer.start_visual(VisualVariant.LINE)

    assert buffer.delete_selection() == "b"
    assert list(buffer.get_content()) == ["a", "c"]
    assert buffer.get_cursor_position() == (1, 0)

    assert buffer.undo() is True
    assert list(buffer.get_content()) == ["a", "b", "c"]
    assert buffer.get_cursor_position() == (1, 0)


def test_line_delete_from_second_row_to_end() -> None:
    buffer = make_lines_buffer()
    buffer.set_cursor_position(1, 0)
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(2, 0)

    assert buffer.delete_selection() == "b\nc"
    assert list(buffer.get_content()) == ["a"]
    assert buffer.get_cursor_position() == (0, 0)

    buffer.undo()
    assert list(buffer.get_content()) == ["a", "b", "c"]
    assert buffer.get_cursor_position() == (2, 0)


def test_line_paste_over_rows_at_end_of_document() -> None:
    clipboard = Clipboard()
    buffer = make_lines_buffer(clipboard)
    clipboard.yank("X")
    buffer.set_cursor_position(1, 0)
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(2, 0)

    assert buffer.paste_over_selection() is True
    assert list(buffer.get_content()) == ["a", "X"]
    assert buffer.get_cursor_position() == (1, 0)
    assert buffer.get_visual_selection() is None

    buffer.undo()
    assert list(buffer.get_content()) == ["a", "b", "c"]
    assert buffer.get_cursor_position() == (2, 0)


def test_line_paste_over_middle_row() -> None:
    clipboard = Clipboard()
    buffer = make_lines_buffer(clipboard)
    clipboard.yank("X\nY")
    buffer.set_cursor_position(1, 0)
    buffer.start_visual(VisualVariant.LINE)

    buffer.paste_over_selection()

    assert list(buffer.get_content()) == ["a", "X", "Y", "c"]
    assert buffer.get_cursor_position() == (1, 0)
    buffer.undo()
    assert list(buffer.get_content()) == ["a", "b", "c"]
    assert buffer.get_cursor_position() == (1, 0)


def test_line_paste_over_whole_document() -> None:
    clipboard = Clipboard()
    buffer = make_lines_buffer(clipboard)
    clipboard.yank("X\nY")
    buffer.start_visual(VisualVariant.LINE)
    buffer.set_cursor_position(2, 0)

    buffer.paste_over_selection()

    assert list(buffer.get_content()) == ["X", "Y"]
    buffer.undo()
    assert list(buffer.get_content()) == ["a", "b", "c"]
    assert buffer.get_cursor_position() == (2, 0)
