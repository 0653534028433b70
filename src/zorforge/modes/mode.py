"""Editor mode value object and its pure transition function.

``Mode`` is an immutable ``(kind, variant)`` pair. Everything the input layer
needs to know about a mode (whether it accepts text, whether deletion is
routed through the selection, which cursor glyph to draw) is derived from that
pair by predicate methods; nothing is stored alongside it.

``transition(mode, trigger)`` never touches a buffer. Callers apply buffer
side effects themselves, gated by the predicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

from zorforge.buffer.state import VisualVariant


class ModeKind(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    COMMAND = "command"


class InsertVariant(str, Enum):
    """How Insert mode was entered; decides the cursor preparation."""

    INSERT = "insert"  # i
    APPEND = "append"  # a
    APPEND_END = "append_end"  # A
    LINE_START = "line_start"  # I
    LINE_BELOW = "line_below"  # o
    LINE_ABOVE = "line_above"  # O
    REPLACE = "replace"  # R


class CommandType(str, Enum):
    REGULAR = "regular"  # :
    SEARCH = "search"  # /
    BACKWARD = "backward"  # ?


class CursorStyle(str, Enum):
    BLOCK = "block"
    LINE = "line"
    UNDERLINE = "underline"

    @property
    def glyph(self) -> str:
        return _CURSOR_GLYPHS[self]


_CURSOR_GLYPHS = {
    CursorStyle.BLOCK: "█",
    CursorStyle.LINE: "│",
    CursorStyle.UNDERLINE: "_",
}


class ModeTrigger(str, Enum):
    """Closed vocabulary of events that may change the mode."""

    ESCAPE = "escape"
    ENTER = "enter"
    UNDO = "undo"
    REDO = "redo"

    INSERT_NORMAL = "insert_normal"
    INSERT_APPEND = "insert_append"
    INSERT_APPEND_END = "insert_append_end"
    INSERT_LINE_START = "insert_line_start"
    INSERT_LINE_BELOW = "insert_line_below"
    INSERT_LINE_ABOVE = "insert_line_above"
    INSERT_REPLACE = "insert_replace"

    VISUAL_CHAR = "visual_char"
    VISUAL_LINE = "visual_line"
    VISUAL_BLOCK = "visual_block"
    COMMAND_MODE = "command_mode"
    SEARCH_FORWARD = "search_forward"
    SEARCH_BACKWARD = "search_backward"

    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    WORD_FORWARD = "word_forward"
    WORD_BACKWARD = "word_backward"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    LINE_START = "line_start"
    LINE_END = "line_end"
    DOCUMENT_START = "document_start"
    DOCUMENT_END = "document_end"

    SYSTEM_COPY = "system_copy"
    SYSTEM_PASTE = "system_paste"
    SYSTEM_CUT = "system_cut"

    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"

    MOUSE_CLICK = "mouse_click"
    MOUSE_DOUBLE_CLICK = "mouse_double_click"
    MOUSE_TRIPLE_CLICK = "mouse_triple_click"
    MOUSE_DRAG = "mouse_drag"

    CHAR_INPUT = "char_input"
    DELETE_BACKWARD = "delete_backward"
    DELETE_FORWARD = "delete_forward"
    DELETE_WORD = "delete_word"
    DELETE_LINE = "delete_line"
    INSERT_TAB = "insert_tab"
    INSERT_BACK_TAB = "insert_back_tab"
    INSERT_NEWLINE = "insert_newline"
    COMPLETION = "completion"

    VISUAL_YANK = "visual_yank"
    VISUAL_DELETE = "visual_delete"
    VISUAL_CHANGE = "visual_change"
    VISUAL_INDENT = "visual_indent"
    VISUAL_DEDENT = "visual_dedent"

    SELECT_LEFT = "select_left"
    SELECT_RIGHT = "select_right"
    SELECT_UP = "select_up"
    SELECT_DOWN = "select_down"
    SELECT_ALL = "select_all"

    CUT_CHAR = "cut_char"


ModeVariant = Union[InsertVariant, VisualVariant, CommandType]

CURSOR_TRIGGERS: FrozenSet[ModeTrigger] = frozenset(
    {
        ModeTrigger.MOVE_LEFT,
        ModeTrigger.MOVE_RIGHT,
        ModeTrigger.MOVE_UP,
        ModeTrigger.MOVE_DOWN,
        ModeTrigger.LINE_START,
        ModeTrigger.LINE_END,
        ModeTrigger.DOCUMENT_START,
        ModeTrigger.DOCUMENT_END,
    }
)
WORD_TRIGGERS: FrozenSet[ModeTrigger] = frozenset(
    {ModeTrigger.WORD_FORWARD, ModeTrigger.WORD_BACKWARD}
)
PAGE_TRIGGERS: FrozenSet[ModeTrigger] = frozenset(
    {ModeTrigger.PAGE_UP, ModeTrigger.PAGE_DOWN}
)
MOVEMENT_TRIGGERS: FrozenSet[ModeTrigger] = CURSOR_TRIGGERS | WORD_TRIGGERS | PAGE_TRIGGERS
CLIPBOARD_TRIGGERS: FrozenSet[ModeTrigger] = frozenset(
    {ModeTrigger.SYSTEM_COPY, ModeTrigger.SYSTEM_PASTE, ModeTrigger.SYSTEM_CUT}
)
SCROLL_TRIGGERS: FrozenSet[ModeTrigger] = frozenset(
    {ModeTrigger.SCROLL_UP, ModeTrigger.SCROLL_DOWN}
)
INSERT_OPERATIONS: FrozenSet[ModeTrigger] = frozenset(
    {
        ModeTrigger.CHAR_INPUT,
        ModeTrigger.DELETE_BACKWARD,
        ModeTrigger.DELETE_FORWARD,
        ModeTrigger.DELETE_WORD,
        ModeTrigger.DELETE_LINE,
        ModeTrigger.INSERT_TAB,
        ModeTrigger.INSERT_BACK_TAB,
        ModeTrigger.INSERT_NEWLINE,
        ModeTrigger.COMPLETION,
    }
)
SELECTION_TRIGGERS: FrozenSet[ModeTrigger] = frozenset(
    {
        ModeTrigger.SELECT_LEFT,
        ModeTrigger.SELECT_RIGHT,
        ModeTrigger.SELECT_UP,
        ModeTrigger.SELECT_DOWN,
        ModeTrigger.SELECT_ALL,
    }
)

INSERT_ENTRY: Dict[ModeTrigger, InsertVariant] = {
    ModeTrigger.INSERT_NORMAL: InsertVariant.INSERT,
    ModeTrigger.INSERT_APPEND: InsertVariant.APPEND,
    ModeTrigger.INSERT_APPEND_END: InsertVariant.APPEND_END,
    ModeTrigger.INSERT_LINE_START: InsertVariant.LINE_START,
    ModeTrigger.INSERT_LINE_BELOW: InsertVariant.LINE_BELOW,
    ModeTrigger.INSERT_LINE_ABOVE: InsertVariant.LINE_ABOVE,
    ModeTrigger.INSERT_REPLACE: InsertVariant.REPLACE,
}
VISUAL_ENTRY: Dict[ModeTrigger, VisualVariant] = {
    ModeTrigger.VISUAL_CHAR: VisualVariant.CHAR,
    ModeTrigger.VISUAL_LINE: VisualVariant.LINE,
    ModeTrigger.VISUAL_BLOCK: VisualVariant.BLOCK,
}
COMMAND_ENTRY: Dict[ModeTrigger, CommandType] = {
    ModeTrigger.COMMAND_MODE: CommandType.REGULAR,
    ModeTrigger.SEARCH_FORWARD: CommandType.SEARCH,
    ModeTrigger.SEARCH_BACKWARD: CommandType.BACKWARD,
}

_VARIANT_TYPES = {
    ModeKind.NORMAL: type(None),
    ModeKind.INSERT: InsertVariant,
    ModeKind.VISUAL: VisualVariant,
    ModeKind.COMMAND: CommandType,
}

_INSERT_NAMES = {
    InsertVariant.INSERT: "INSERT",
    InsertVariant.APPEND: "INSERT (APPEND)",
    InsertVariant.APPEND_END: "INSERT (APPEND END)",
    InsertVariant.LINE_START: "INSERT (LINE START)",
    InsertVariant.LINE_BELOW: "INSERT (BELOW)",
    InsertVariant.LINE_ABOVE: "INSERT (ABOVE)",
    InsertVariant.REPLACE: "REPLACE",
}
_VISUAL_NAMES = {
    VisualVariant.CHAR: "VISUAL",
    VisualVariant.LINE: "VISUAL LINE",
    VisualVariant.BLOCK: "VISUAL BLOCK",
}
_COMMAND_NAMES = {
    CommandType.REGULAR: "COMMAND",
    CommandType.SEARCH: "SEARCH",
    CommandType.BACKWARD: "SEARCH BACKWARD",
}
_COMMAND_PREFIXES = {
    CommandType.REGULAR: ":",
    CommandType.SEARCH: "/",
    CommandType.BACKWARD: "?",
}


@dataclass(frozen=True, slots=True)
class Mode:
    """Current editor mode; compare by value."""

    kind: ModeKind = ModeKind.NORMAL
    variant: Optional[ModeVariant] = None

    def __post_init__(self) -> None:
        expected = _VARIANT_TYPES[self.kind]
        if not isinstance(self.variant, expected):
            raise ValueError(
                f"{self.kind.value} mode does not accept variant {self.variant!r}"
            )

    @classmethod
    def normal(cls) -> "Mode":
        return cls(ModeKind.NORMAL)

    @classmethod
    def insert(cls, variant: InsertVariant = InsertVariant.INSERT) -> "Mode":
        return cls(ModeKind.INSERT, variant)

    @classmethod
    def visual(cls, variant: VisualVariant = VisualVariant.CHAR) -> "Mode":
        return cls(ModeKind.VISUAL, variant)

    @classmethod
    def command(cls, command_type: CommandType = CommandType.REGULAR) -> "Mode":
        return cls(ModeKind.COMMAND, command_type)

    @property
    def is_normal(self) -> bool:
        return self.kind is ModeKind.NORMAL

    @property
    def is_insert(self) -> bool:
        return self.kind is ModeKind.INSERT

    @property
    def is_visual(self) -> bool:
        return self.kind is ModeKind.VISUAL

    @property
    def is_command(self) -> bool:
        return self.kind is ModeKind.COMMAND

    def transition(self, trigger: ModeTrigger) -> "Mode":
        return transition(self, trigger)

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def allows_text_input(self) -> bool:
        return self.kind in (ModeKind.INSERT, ModeKind.COMMAND)

    def allows_cursor_movement(self) -> bool:
        return not self.is_command

    def allows_deletion(self) -> bool:
        # Visual mode deletes through the selection instead.
        return not self.is_visual

    def allows_cut(self) -> bool:
        return self.kind in (ModeKind.NORMAL, ModeKind.VISUAL)

    def allows_undo(self) -> bool:
        return self.is_normal

    def allows_selection(self) -> bool:
        return not self.is_command

    def allows_scrolling(self) -> bool:
        return not self.is_command

    def allows_mouse(self) -> bool:
        return not self.is_command

    def allows_word_movement(self) -> bool:
        return not self.is_command

    def allows_page_movement(self) -> bool:
        return not self.is_command

    def allows_indent(self) -> bool:
        return self.kind in (ModeKind.NORMAL, ModeKind.INSERT)

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    def display_name(self) -> str:
        if self.is_normal:
            return "NORMAL"
        if self.is_insert:
            return _INSERT_NAMES[self.variant]  # type: ignore[index]
        if self.is_visual:
            return _VISUAL_NAMES[self.variant]  # type: ignore[index]
        return _COMMAND_NAMES[self.variant]  # type: ignore[index]

    def cursor_style(self) -> CursorStyle:
        if self.variant is InsertVariant.REPLACE:
            return CursorStyle.BLOCK
        if self.kind in (ModeKind.INSERT, ModeKind.COMMAND):
            return CursorStyle.LINE
        return CursorStyle.BLOCK

    def command_prefix(self) -> str:
        if self.is_command:
            return _COMMAND_PREFIXES[self.variant]  # type: ignore[index]
        return ""

    def is_search_mode(self) -> bool:
        return self.variant in (CommandType.SEARCH, CommandType.BACKWARD)

    def insert_variant(self) -> Optional[InsertVariant]:
        """The variant whose cursor preparation should run, if inserting."""

        return self.variant if self.is_insert else None  # type: ignore[return-value]

    def visual_variant(self) -> Optional[VisualVariant]:
        return self.variant if self.is_visual else None  # type: ignore[return-value]

    def __str__(self) -> str:
        return self.display_name()


def _permits(mode: Mode, trigger: ModeTrigger) -> bool:
    if trigger in CURSOR_TRIGGERS:
        return mode.allows_cursor_movement()
    if trigger in WORD_TRIGGERS:
        return mode.allows_word_movement()
    if trigger in PAGE_TRIGGERS:
        return mode.allows_page_movement()
    if trigger is ModeTrigger.SYSTEM_CUT:
        return mode.allows_cut()
    if trigger in CLIPBOARD_TRIGGERS:
        return mode.allows_selection()
    if trigger in SCROLL_TRIGGERS:
        return mode.allows_scrolling()
    return False


def transition(current: Mode, trigger: ModeTrigger) -> Mode:
    """Return the mode that follows ``current`` once ``trigger`` fires.

    Rules are checked in priority order; the first that applies wins and an
    unrecognized pair leaves the mode unchanged.
    """

    if trigger is ModeTrigger.ESCAPE:
        return Mode.normal()

    if current.is_command and trigger is ModeTrigger.ENTER:
        return Mode.normal()

    if _permits(current, trigger):
        return current

    if trigger is ModeTrigger.MOUSE_DOUBLE_CLICK:
        return Mode.visual(VisualVariant.CHAR)
    if trigger is ModeTrigger.MOUSE_TRIPLE_CLICK:
        return Mode.visual(VisualVariant.LINE)
    if trigger is ModeTrigger.MOUSE_DRAG:
        return current if current.is_visual else Mode.visual(VisualVariant.CHAR)

    if current.is_normal:
        if trigger in INSERT_ENTRY:
            return Mode.insert(INSERT_ENTRY[trigger])
        if trigger in VISUAL_ENTRY:
            return Mode.visual(VISUAL_ENTRY[trigger])
        if trigger in COMMAND_ENTRY:
            return Mode.command(COMMAND_ENTRY[trigger])

    if current.is_insert and trigger in INSERT_OPERATIONS:
        return current

    if current.is_visual:
        if trigger in VISUAL_ENTRY:
            return Mode.visual(VISUAL_ENTRY[trigger])
        if trigger in (ModeTrigger.VISUAL_YANK, ModeTrigger.VISUAL_DELETE):
            return Mode.normal()
        if trigger is ModeTrigger.VISUAL_CHANGE:
            return Mode.insert(InsertVariant.INSERT)
        if trigger in (ModeTrigger.VISUAL_INDENT, ModeTrigger.VISUAL_DEDENT):
            return current

    if trigger in SELECTION_TRIGGERS and current.allows_selection():
        return Mode.visual(VisualVariant.CHAR) if current.is_normal else current

    return current


__all__ = [
    "CLIPBOARD_TRIGGERS",
    "COMMAND_ENTRY",
    "CommandType",
    "CursorStyle",
    "INSERT_ENTRY",
    "INSERT_OPERATIONS",
    "InsertVariant",
    "MOVEMENT_TRIGGERS",
    "Mode",
    "ModeKind",
    "ModeTrigger",
    "ModeVariant",
    "SCROLL_TRIGGERS",
    "SELECTION_TRIGGERS",
    "VISUAL_ENTRY",
    "VisualVariant",
    "transition",
]
