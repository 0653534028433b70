from __future__ import annotations

from zorforge.buffer import Buffer, SelectionType, TextSpan, VisualVariant, find_text_object

INNER = SelectionType.INNER
AROUND = SelectionType.AROUND


def test_inner_and_around_word() -> None:
    lines = ["foo bar baz"]

    assert find_text_object(lines, (0, 5), "w", INNER) == TextSpan((0, 4), (0, 7))
    assert find_text_object(lines, (0, 5), "w", AROUND) == TextSpan((0, 4), (0, 8))
    # The last word has no trailing blanks, so the leading ones are taken.
    assert find_text_object(lines, (0, 9), "w", AROUND) == TextSpan((0, 7), (0, 11))


def test_word_on_empty_line_is_missing() -> None:
    assert find_text_object([""], (0, 0), "w", INNER) is None


def test_paragraphs_are_linewise() -> None:
    lines = ["a", "b", "", "c"]

    inner = find_text_object(lines, (0, 0), "p", INNER)
    around = find_text_object(lines, (0, 0), "p", AROUND)

    assert inner == TextSpan((0, 0), (1, 1), linewise=True)
    assert around == TextSpan((0, 0), (2, 0), linewise=True)


def test_parentheses_inner_and_around() -> None:
    lines = ["call(a, (b))"]

    assert find_text_object(lines, (0, 6), "(", INNER) == TextSpan((0, 5), (0, 11))
    assert find_text_object(lines, (0, 6), "b", AROUND) == TextSpan((0, 4), (0, 12))
    assert find_text_object(lines, (0, 9), ")", INNER) == TextSpan((0, 9), (0, 10))


def test_pairs_span_lines() -> None:
    lines = ["if {", "  body", "}"]

    span = find_text_object(lines, (1, 3), "{", AROUND)

    assert span is not None
    assert span.start == (0, 3)
    assert span.end == (2, 1)


def test_unterminated_pair_is_missing() -> None:
    assert find_text_object(["(abc"], (0, 2), "(", INNER) is None
    assert find_text_object(["abc)"], (0, 1), ")", AROUND) is None


def test_quotes() -> None:
    lines = ['say "hi there" now']

    assert find_text_object(lines, (0, 7), '"', INNER) == TextSpan((0, 5), (0, 13))
    assert find_text_object(lines, (0, 7), '"', AROUND) == TextSpan((0, 4), (0, 14))


def test_unknown_object_is_missing() -> None:
    assert find_text_object(["abc"], (0, 0), "z", INNER) is None


def test_buffer_selects_text_object() -> None:
    buffer = Buffer.from_lines(["x = [1, 2]"])
    buffer.set_cursor_position(0, 6)

    assert buffer.select_text_object("[", INNER) is True
    assert buffer.get_selected_text() == "1, 2"
    assert buffer.visual_mode is VisualVariant.CHAR

    buffer.set_cursor_position(0, 0)
    assert buffer.select_text_object("p", AROUND) is True
    assert buffer.visual_mode is VisualVariant.LINE
