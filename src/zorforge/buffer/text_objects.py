"""Text object span finders.

Text objects are cursor-relative regions: the ``w`` in ``viw``, the ``(`` in
``va(``. Every finder is a pure function over the buffer lines that returns a
``TextSpan`` (end exclusive) or ``None`` when the object does not exist at the
cursor. None of them raise for unbalanced or unterminated input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

from .state import Cursor, SelectionType


@dataclass(frozen=True, slots=True)
class TextSpan:
    start: Cursor
    end: Cursor  # exclusive
    linewise: bool = False


TextObjectFinder = Callable[[Sequence[str], Cursor, SelectionType], Optional[TextSpan]]


# ─────────────────────────────────────────────────────────────────
# Words (iw, aw)
# ─────────────────────────────────────────────────────────────────


def _run_bounds(line: str, col: int) -> Tuple[int, int]:
    """Bounds of the whitespace or non-whitespace run containing ``col``."""

    blank = line[col].isspace()
    start = col
    end = col + 1
    while start > 0 and line[start - 1].isspace() == blank:
        start -= 1
    while end < len(line) and line[end].isspace() == blank:
        end += 1
    return start, end


def word(
    lines: Sequence[str], cursor: Cursor, selection: SelectionType
) -> Optional[TextSpan]:
    row, col = cursor
    line = lines[row]
    if not line:
        return None
    col = min(col, len(line) - 1)
    start, end = _run_bounds(line, col)

    if selection is SelectionType.AROUND:
        if line[col].isspace():
            # Leading blanks plus the word that follows them.
            if end < len(line):
                end = _run_bounds(line, end)[1]
        elif end < len(line):
            end = _run_bounds(line, end)[1]
        elif start > 0:
            start = _run_bounds(line, start - 1)[0]

    return TextSpan((row, start), (row, end))


# ─────────────────────────────────────────────────────────────────
# Paragraphs (ip, ap)
# ─────────────────────────────────────────────────────────────────


def _is_blank(line: str) -> bool:
    return not line.strip()


def paragraph(
    lines: Sequence[str], cursor: Cursor, selection: SelectionType
) -> Optional[TextSpan]:
    row = cursor[0]
    blank = _is_blank(lines[row])
    first = row
    last = row
    while first > 0 and _is_blank(lines[first - 1]) == blank:
        first -= 1
    while last < len(lines) - 1 and _is_blank(lines[last + 1]) == blank:
        last += 1

    if selection is SelectionType.AROUND:
        if last < len(lines) - 1:
            while last < len(lines) - 1 and _is_blank(lines[last + 1]) != blank:
                last += 1
        else:
            while first > 0 and _is_blank(lines[first - 1]) != blank:
                first -= 1

    return TextSpan((first, 0), (last, len(lines[last])), linewise=True)


# ─────────────────────────────────────────────────────────────────
# Paired delimiters: (), [], {}, <>
# ─────────────────────────────────────────────────────────────────


def _forward(lines: Sequence[str], start: Cursor) -> Iterator[Tuple[Cursor, str]]:
    row, col = start
    while row < len(lines):
        line = lines[row]
        while col < len(line):
            yield (row, col), line[col]
            col += 1
        row += 1
        col = 0


def _backward(lines: Sequence[str], start: Cursor) -> Iterator[Tuple[Cursor, str]]:
    row, col = start
    while row >= 0:
        line = lines[row]
        col = min(col, len(line) - 1)
        while col >= 0:
            yield (row, col), line[col]
            col -= 1
        row -= 1
        if row >= 0:
            col = len(lines[row]) - 1


def _char_at(lines: Sequence[str], cursor: Cursor) -> str:
    row, col = cursor
    line = lines[row]
    return line[col] if col < len(line) else ""


def _after(cursor: Cursor) -> Cursor:
    return (cursor[0], cursor[1] + 1)


def find_enclosing_pair(
    lines: Sequence[str], cursor: Cursor, open_char: str, close_char: str
) -> Optional[Tuple[Cursor, Cursor]]:
    """Locate the innermost balanced ``open_char``/``close_char`` pair.

    Scans forward from the cursor with a depth stack until a closer that is
    not balanced by an opener seen on the way, then walks back to its
    opener. A cursor resting on an opener selects that opener's pair.
    """

    scan_from = cursor
    if _char_at(lines, cursor) == open_char:
        scan_from = _after(cursor)

    stack: list[Cursor] = []
    closer: Optional[Cursor] = None
    for position, char in _forward(lines, scan_from):
        if char == open_char:
            stack.append(position)
        elif char == close_char:
            if stack:
                stack.pop()
            else:
                closer = position
                break
    if closer is None:
        return None

    depth = 0
    for position, char in _backward(lines, closer):
        if position == closer:
            continue
        if char == close_char:
            depth += 1
        elif char == open_char:
            if depth == 0:
                return position, closer
            depth -= 1
    return None


def _pair_finder(open_char: str, close_char: str) -> TextObjectFinder:
    def finder(
        lines: Sequence[str], cursor: Cursor, selection: SelectionType
    ) -> Optional[TextSpan]:
        pair = find_enclosing_pair(lines, cursor, open_char, close_char)
        if pair is None:
            return None
        opener, closer = pair
        if selection is SelectionType.INNER:
            return TextSpan(_after(opener), closer)
        return TextSpan(opener, _after(closer))

    return finder


# ─────────────────────────────────────────────────────────────────
# Quotes: '', "", ``
# ─────────────────────────────────────────────────────────────────


def _quote_finder(quote: str) -> TextObjectFinder:
    def finder(
        lines: Sequence[str], cursor: Cursor, selection: SelectionType
    ) -> Optional[TextSpan]:
        row, col = cursor
        line = lines[row]
        positions = [index for index, char in enumerate(line) if char == quote]
        # Quotes pair up left to right on the cursor line.
        for opener, closer in zip(positions[::2], positions[1::2]):
            if col <= closer:
                if selection is SelectionType.INNER:
                    return TextSpan((row, opener + 1), (row, closer))
                return TextSpan((row, opener), (row, closer + 1))
        return None

    return finder


TEXT_OBJECTS: Dict[str, TextObjectFinder] = {
    "w": word,
    "p": paragraph,
    "(": _pair_finder("(", ")"),
    ")": _pair_finder("(", ")"),
    "b": _pair_finder("(", ")"),
    "[": _pair_finder("[", "]"),
    "]": _pair_finder("[", "]"),
    "{": _pair_finder("{", "}"),
    "}": _pair_finder("{", "}"),
    "B": _pair_finder("{", "}"),
    "<": _pair_finder("<", ">"),
    ">": _pair_finder("<", ">"),
    "'": _quote_finder("'"),
    '"': _quote_finder('"'),
    "`": _quote_finder("`"),
}


def find_text_object(
    lines: Sequence[str], cursor: Cursor, key: str, selection: SelectionType
) -> Optional[TextSpan]:
    finder = TEXT_OBJECTS.get(key)
    if finder is None:
        return None
    return finder(lines, cursor, selection)


__all__ = [
    "TextSpan",
    "TEXT_OBJECTS",
    "find_enclosing_pair",
    "find_text_object",
    "paragraph",
    "word",
]
