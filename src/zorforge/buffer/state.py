"""Cursor, selection shape, and motion vocabulary shared by buffer services."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

Cursor = Tuple[int, int]  # (row, column)
Selection = Tuple[Cursor, Cursor]  # (anchor, cursor), unordered


class VisualVariant(str, Enum):
    """Shape used to interpret an (anchor, cursor) pair as a region."""

    CHAR = "char"
    LINE = "line"
    BLOCK = "block"


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    TOP = "top"
    BOTTOM = "bottom"
    LINE_START = "line_start"
    LINE_END = "line_end"


class SelectionType(str, Enum):
    """Whether a text object excludes (inner) or includes (around) its edges."""

    INNER = "inner"
    AROUND = "around"


def ordered(first: Cursor, second: Cursor) -> Selection:
    if first <= second:
        return first, second
    return second, first


__all__ = [
    "Cursor",
    "Selection",
    "VisualVariant",
    "Direction",
    "SelectionType",
    "ordered",
]
