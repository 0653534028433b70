"""Bridge between an EditorSession and whatever Textual widgets draw it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from zorforge.buffer import BufferMirror
from zorforge.input import KeyInput
from zorforge.modes import ModeResult, ModeTrigger
from zorforge.session import EditorSession


def _ignore(*_args: Any) -> None:  # pragma: no cover - default hook
    return None


_NAMED_KEYS = {
    "esc": "ESC",
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "delete": "DELETE",
    "tab": "TAB",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
    "pageup": "PAGEUP",
    "pagedown": "PAGEDOWN",
}

# Bus events forwarded to the host.
FORWARDED_EVENTS = (
    "mode.switch",
    "message",
    "visual.selection",
    "visual.yank",
    "visual.delete",
    "clipboard.yank",
    "command.submit",
    "command.echo",
    "command.error",
    "search.result",
    "editor.quit",
)


def normalize_textual_key(key: str, character: Optional[str] = None) -> KeyInput:
    """Turn a Textual key name (``ctrl+shift+left``, ``backtab``) into a KeyInput.

    Printable characters are passed through as themselves so that ``:`` and
    ``A`` reach the key tables unchanged; Shift is then implied by the text.
    """

    *prefix, base = key.split("+") if key != "+" else ["+"]
    modifiers = [part.upper() for part in prefix]
    if base == "backtab":
        base = "tab"
        modifiers.append("SHIFT")
    named = _NAMED_KEYS.get(base.lower())
    if named is not None:
        return KeyInput(key=named, modifiers=tuple(modifiers))
    printable = (
        character is not None and len(character) == 1 and character.isprintable()
    )
    if printable and "CTRL" not in modifiers:
        kept = tuple(mod for mod in modifiers if mod != "SHIFT")
        return KeyInput(key=character, modifiers=kept, text=character)
    return KeyInput(key=base if len(base) == 1 else base.upper(), modifiers=tuple(modifiers))


@dataclass(slots=True)
class TextualUIHooks:
    """What the adapter calls to redraw; only ``update_buffer`` is required."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _ignore
    show_command: Callable[[str], None] = _ignore
    handle_event: Callable[[str, Any], None] = _ignore
    trace: Callable[[str], None] = _ignore


class TextualVimAdapter:
    """Feeds Textual input into a session and pushes its state back out."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        for name in FORWARDED_EVENTS:
            session.bus.subscribe(name, self._forwarder(name))
        self.refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        base = normalize_textual_key(key, text)
        extra = tuple(str(mod).upper() for mod in modifiers)
        key_input = KeyInput(
            key=base.key,
            modifiers=tuple(dict.fromkeys(base.modifiers + extra)),
            text=base.text,
        )
        self._trace("key", key_input)
        result = self.session.handle_key(key_input)
        self._trace("result", result)
        self.refresh()
        return result

    def handle_mouse(self, trigger: ModeTrigger, row: int, col: int) -> ModeResult:
        result = self.session.handle_mouse(trigger, row, col)
        self._trace("mouse", result)
        self.refresh()
        return result

    def refresh(self) -> None:
        """Redraw the buffer, status bar and command line."""

        session = self.session
        self.hooks.update_buffer(session.pull_buffer())
        self.hooks.update_status(self.status_text())
        if session.mode.is_command:
            self.hooks.show_command(session.mode.command_prefix() + session.command_line)
        else:
            self.hooks.show_command(session.message or "")

    def status_text(self) -> str:
        session = self.session
        buffer = session.buffer
        row, col = buffer.get_cursor_position()
        flags = ""
        if buffer.has_unsaved_changes():
            flags += " [+]"
        if session.readonly:
            flags += " [RO]"
        return f"-- {session.mode.display_name()} -- {buffer.name}{flags}  {row + 1}:{col + 1}"

    def _forwarder(self, name: str) -> Callable[[Any], None]:
        def forward(payload: Any) -> None:
            self.hooks.trace(f"event {name} {payload!r}")
            self.hooks.handle_event(name, payload)

        return forward

    def _trace(self, label: str, value: object) -> None:
        buffer = self.session.buffer
        self.hooks.trace(
            f"{label} {value!r} mode={self.session.mode} cursor={buffer.cursor}"
            f" version={buffer.document.version}"
        )


__all__ = ["FORWARDED_EVENTS", "TextualUIHooks", "TextualVimAdapter", "normalize_textual_key"]
