"""Key events, bindings, and trie-based sequence resolution per mode."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Literal, Optional, Sequence, Tuple

from zorforge.buffer.text_objects import TEXT_OBJECTS
from zorforge.modes.mode import ModeKind, ModeTrigger
from zorforge.runtime.telemetry import span

_MODIFIER_ORDER = ("CTRL", "ALT", "SHIFT")


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to the session."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


def key_to_token(key: KeyInput) -> str:
    """Render ``key`` as ``CTRL+SHIFT+x`` style text, modifiers in fixed order."""

    present = {modifier.upper() for modifier in key.modifiers}
    ordered = [modifier for modifier in _MODIFIER_ORDER if modifier in present]
    ordered.extend(sorted(present.difference(_MODIFIER_ORDER)))
    if ordered:
        return "+".join(ordered) + "+" + key.key
    return key.key


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence with an action and the trigger it fires."""

    sequence: Tuple[str, ...]
    action: str
    trigger: Optional[ModeTrigger] = None
    argument: Optional[str] = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.sequence:
            raise ValueError("Binding requires at least one key")
        if not self.action:
            raise ValueError("Binding action cannot be empty")

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence)


@dataclass(slots=True)
class TrieNode:
    binding: Optional[Binding] = None
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    def child(self, token: str) -> "TrieNode":
        return self.children.setdefault(token, TrieNode())

    def next_tokens(self) -> Tuple[str, ...]:
        return tuple(sorted(self.children))


@dataclass(frozen=True, slots=True)
class Resolution:
    status: Literal["match", "pending", "miss"]
    binding: Optional[Binding] = None
    consumed: int = 0
    next_expected: Tuple[str, ...] = ()


class KeyTable:
    """Bindings for one mode, stored as a token trie."""

    def __init__(self, name: str, bindings: Iterable[Binding] = ()) -> None:
        self.name = name
        self._root = TrieNode()
        self._count = 0
        for binding in bindings:
            self.bind(binding)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Binding]:
        stack = [self._root]
        while stack:
            node = stack.pop()
            if node.binding is not None:
                yield node.binding
            stack.extend(node.children.values())

    def bind(self, binding: Binding, *, replace: bool = False) -> Binding:
        node = self._root
        for token in binding.sequence:
            node = node.child(token)
        if node.binding is not None and not replace:
            raise ValueError(
                f"'{binding.key_signature}' is already bound to "
                f"'{node.binding.action}' in {self.name}"
            )
        if node.binding is None:
            self._count += 1
        node.binding = binding
        return binding

    def resolve(self, tokens: Sequence[str]) -> Resolution:
        with span(
            "keys::resolve",
            component="keys",
            metadata={"table": self.name, "length": len(tokens)},
        ) as handle:
            node = self._root
            consumed = 0
            for token in tokens:
                child = node.children.get(token)
                if child is None:
                    handle.add_metadata("status", "miss")
                    return Resolution(status="miss", consumed=consumed)
                node = child
                consumed += 1

            # A complete binding wins over longer sequences sharing its prefix.
            if node.binding is not None:
                handle.add_metadata("status", "match")
                return Resolution(status="match", binding=node.binding, consumed=consumed)
            if node.children:
                handle.add_metadata("status", "pending")
                return Resolution(
                    status="pending",
                    consumed=consumed,
                    next_expected=node.next_tokens(),
                )
            handle.add_metadata("status", "miss")
            return Resolution(status="miss", consumed=consumed)


def _bind(
    keys: str | Sequence[str],
    action: str,
    trigger: Optional[ModeTrigger] = None,
    argument: Optional[str] = None,
    description: str = "",
) -> Binding:
    sequence = (keys,) if isinstance(keys, str) else tuple(keys)
    return Binding(sequence, action, trigger, argument, description)


def _motion_bindings() -> list[Binding]:
    """Cursor motions shared by Normal and Visual mode."""

    return [
        _bind("h", "core.move", ModeTrigger.MOVE_LEFT, "left"),
        _bind("LEFT", "core.move", ModeTrigger.MOVE_LEFT, "left"),
        _bind("l", "core.move", ModeTrigger.MOVE_RIGHT, "right"),
        _bind("RIGHT", "core.move", ModeTrigger.MOVE_RIGHT, "right"),
        _bind("k", "core.move", ModeTrigger.MOVE_UP, "up"),
        _bind("UP", "core.move", ModeTrigger.MOVE_UP, "up"),
        _bind("j", "core.move", ModeTrigger.MOVE_DOWN, "down"),
        _bind("DOWN", "core.move", ModeTrigger.MOVE_DOWN, "down"),
        _bind("0", "core.move", ModeTrigger.LINE_START, "line_start"),
        _bind("^", "core.move", ModeTrigger.LINE_START, "line_start"),
        _bind("HOME", "core.move", ModeTrigger.LINE_START, "line_start"),
        _bind("$", "core.move", ModeTrigger.LINE_END, "line_end"),
        _bind("END", "core.move", ModeTrigger.LINE_END, "line_end"),
        _bind(("g", "g"), "core.move", ModeTrigger.DOCUMENT_START, "top"),
        _bind("G", "core.move", ModeTrigger.DOCUMENT_END, "bottom"),
        _bind("w", "core.word_forward", ModeTrigger.WORD_FORWARD),
        _bind("b", "core.word_backward", ModeTrigger.WORD_BACKWARD),
        _bind("PAGEUP", "core.page_up", ModeTrigger.PAGE_UP),
        _bind("CTRL+b", "core.page_up", ModeTrigger.PAGE_UP),
        _bind("PAGEDOWN", "core.page_down", ModeTrigger.PAGE_DOWN),
        _bind("CTRL+f", "core.page_down", ModeTrigger.PAGE_DOWN),
        _bind("SHIFT+LEFT", "visual.extend", ModeTrigger.SELECT_LEFT, "left"),
        _bind("SHIFT+RIGHT", "visual.extend", ModeTrigger.SELECT_RIGHT, "right"),
        _bind("SHIFT+UP", "visual.extend", ModeTrigger.SELECT_UP, "up"),
        _bind("SHIFT+DOWN", "visual.extend", ModeTrigger.SELECT_DOWN, "down"),
        _bind("CTRL+a", "visual.select_all", ModeTrigger.SELECT_ALL),
    ]


def normal_bindings() -> list[Binding]:
    return _motion_bindings() + [
        _bind("ESC", "core.enter_mode", ModeTrigger.ESCAPE),
        _bind("i", "core.enter_mode", ModeTrigger.INSERT_NORMAL),
        _bind("a", "core.enter_mode", ModeTrigger.INSERT_APPEND),
        _bind("A", "core.enter_mode", ModeTrigger.INSERT_APPEND_END),
        _bind("I", "core.enter_mode", ModeTrigger.INSERT_LINE_START),
        _bind("o", "core.enter_mode", ModeTrigger.INSERT_LINE_BELOW),
        _bind("O", "core.enter_mode", ModeTrigger.INSERT_LINE_ABOVE),
        _bind("R", "core.enter_mode", ModeTrigger.INSERT_REPLACE),
        _bind("v", "core.enter_mode", ModeTrigger.VISUAL_CHAR),
        _bind("V", "core.enter_mode", ModeTrigger.VISUAL_LINE),
        _bind("CTRL+v", "core.enter_mode", ModeTrigger.VISUAL_BLOCK),
        _bind(":", "core.enter_mode", ModeTrigger.COMMAND_MODE),
        _bind("/", "core.enter_mode", ModeTrigger.SEARCH_FORWARD),
        _bind("?", "core.enter_mode", ModeTrigger.SEARCH_BACKWARD),
        _bind("u", "core.undo", ModeTrigger.UNDO),
        _bind("CTRL+r", "core.redo", ModeTrigger.REDO),
        _bind("x", "core.cut_char", ModeTrigger.CUT_CHAR),
        _bind("DELETE", "core.delete_forward"),
        _bind(("d", "d"), "core.delete_line"),
        _bind(("y", "y"), "core.yank_line", ModeTrigger.SYSTEM_COPY),
        _bind("p", "core.paste", ModeTrigger.SYSTEM_PASTE),
        _bind((">", ">"), "core.indent_line"),
        _bind(("<", "<"), "core.dedent_line"),
        _bind("n", "core.next_match"),
        _bind("N", "core.previous_match"),
    ]


def insert_bindings() -> list[Binding]:
    return [
        _bind("ESC", "insert.exit", ModeTrigger.ESCAPE),
        _bind("ENTER", "insert.newline", ModeTrigger.INSERT_NEWLINE),
        _bind("CTRL+j", "insert.newline", ModeTrigger.INSERT_NEWLINE),
        _bind("CTRL+m", "insert.newline", ModeTrigger.INSERT_NEWLINE),
        _bind("BACKSPACE", "insert.delete_backward", ModeTrigger.DELETE_BACKWARD),
        _bind("CTRL+h", "insert.delete_backward", ModeTrigger.DELETE_BACKWARD),
        _bind("DELETE", "insert.delete_forward", ModeTrigger.DELETE_FORWARD),
        _bind("TAB", "insert.tab", ModeTrigger.INSERT_TAB),
        _bind("SHIFT+TAB", "insert.dedent", ModeTrigger.INSERT_BACK_TAB),
        _bind("CTRL+t", "insert.indent", ModeTrigger.INSERT_TAB),
        _bind("CTRL+d", "insert.dedent", ModeTrigger.INSERT_BACK_TAB),
        _bind("CTRL+w", "insert.delete_word", ModeTrigger.DELETE_WORD),
        _bind("CTRL+u", "insert.delete_to_line_start", ModeTrigger.DELETE_LINE),
        _bind("LEFT", "core.move", ModeTrigger.MOVE_LEFT, "left"),
        _bind("RIGHT", "core.move", ModeTrigger.MOVE_RIGHT, "right"),
        _bind("UP", "core.move", ModeTrigger.MOVE_UP, "up"),
        _bind("DOWN", "core.move", ModeTrigger.MOVE_DOWN, "down"),
        _bind("HOME", "core.move", ModeTrigger.LINE_START, "line_start"),
        _bind("END", "core.move", ModeTrigger.LINE_END, "line_end"),
        _bind("CTRL+HOME", "core.move", ModeTrigger.DOCUMENT_START, "top"),
        _bind("CTRL+END", "core.move", ModeTrigger.DOCUMENT_END, "bottom"),
        _bind("CTRL+LEFT", "core.word_backward", ModeTrigger.WORD_BACKWARD),
        _bind("CTRL+RIGHT", "core.word_forward", ModeTrigger.WORD_FORWARD),
        _bind("PAGEUP", "core.page_up", ModeTrigger.PAGE_UP),
        _bind("PAGEDOWN", "core.page_down", ModeTrigger.PAGE_DOWN),
    ]


def visual_bindings() -> list[Binding]:
    bindings = _motion_bindings() + [
        _bind("ESC", "core.enter_mode", ModeTrigger.ESCAPE),
        _bind("v", "core.enter_mode", ModeTrigger.VISUAL_CHAR),
        _bind("V", "core.enter_mode", ModeTrigger.VISUAL_LINE),
        _bind("CTRL+v", "core.enter_mode", ModeTrigger.VISUAL_BLOCK),
        _bind("y", "visual.yank", ModeTrigger.VISUAL_YANK),
        _bind("d", "visual.delete", ModeTrigger.VISUAL_DELETE),
        _bind("x", "visual.delete", ModeTrigger.VISUAL_DELETE),
        _bind("c", "visual.change", ModeTrigger.VISUAL_CHANGE),
        _bind(">", "visual.indent", ModeTrigger.VISUAL_INDENT),
        _bind("<", "visual.dedent", ModeTrigger.VISUAL_DEDENT),
        _bind("p", "visual.paste", ModeTrigger.ESCAPE),
        _bind("o", "visual.swap_anchor"),
    ]
    for key in TEXT_OBJECTS:
        bindings.append(_bind(("i", key), "visual.select_object", None, f"inner:{key}"))
        bindings.append(_bind(("a", key), "visual.select_object", None, f"around:{key}"))
    return bindings


def command_bindings() -> list[Binding]:
    return [
        _bind("ESC", "command.cancel", ModeTrigger.ESCAPE),
        _bind("ENTER", "command.submit", ModeTrigger.ENTER),
        _bind("BACKSPACE", "command.backspace", ModeTrigger.DELETE_BACKWARD),
    ]


def global_bindings() -> list[Binding]:
    """Bindings consulted before the mode table, in every mode."""

    return [
        _bind("CTRL+SHIFT+c", "global.copy", ModeTrigger.SYSTEM_COPY),
        _bind("CTRL+SHIFT+x", "global.cut", ModeTrigger.SYSTEM_CUT),
        _bind("CTRL+SHIFT+v", "global.paste", ModeTrigger.SYSTEM_PASTE),
        _bind("CTRL+z", "core.undo", ModeTrigger.UNDO),
        _bind("CTRL+SHIFT+z", "core.redo", ModeTrigger.REDO),
        _bind("CTRL+q", "core.quit"),
    ]


def default_tables() -> Dict[ModeKind, KeyTable]:
    return {
        ModeKind.NORMAL: KeyTable("normal", normal_bindings()),
        ModeKind.INSERT: KeyTable("insert", insert_bindings()),
        ModeKind.VISUAL: KeyTable("visual", visual_bindings()),
        ModeKind.COMMAND: KeyTable("command", command_bindings()),
    }


def default_global_table() -> KeyTable:
    return KeyTable("global", global_bindings())


__all__ = [
    "Binding",
    "KeyInput",
    "KeyTable",
    "Resolution",
    "default_global_table",
    "default_tables",
    "key_to_token",
]
