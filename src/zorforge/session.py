"""Editor session: owns the mode, the buffers, and key dispatch.

The session is the single place where key input becomes buffer edits. A key
is resolved against the global table first, then against the active mode's
table. The bound action runs under the current mode's permissions, after
which the binding's trigger is fed through ``transition`` and any mode change
applies its buffer side effects (selection anchoring, insert preparation).
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional

from zorforge.actions import ACTIONS, prepare_insert
from zorforge.buffer import (
    Buffer,
    BufferManager,
    BufferMirror,
    Clipboard,
    SelectionType,
    VisualVariant,
)
from zorforge.config import EditorConfig
from zorforge.files import (
    FileResult,
    describe_loaded,
    describe_written,
    read_lines,
    write_lines,
)
from zorforge.input.keys import (
    Binding,
    KeyInput,
    KeyTable,
    default_global_table,
    default_tables,
    key_to_token,
)
from zorforge.modes import Mode, ModeBus, ModeKind, ModeResult, ModeTrigger, transition
from zorforge.runtime import telemetry

READONLY_WARNING = "'readonly' option is set (add ! to override)"
NO_PREVIOUS_SEARCH = "No previous regular expression"


class EditorSession:
    """Everything one editor window needs, minus the rendering."""

    def __init__(
        self, config: Optional[EditorConfig] = None, *, readonly: bool = False
    ) -> None:
        self.config = config or EditorConfig()
        self.readonly = readonly
        self.mode = Mode.normal()
        self.bus = ModeBus()
        self.clipboard = Clipboard(self.config.clipboard_history)
        self.buffers = BufferManager(
            max_buffers=self.config.max_buffers,
            clipboard=self.clipboard,
            tab_size=self.config.tab_size,
        )
        self.buffers.create_buffer()
        self.message: Optional[str] = None
        self.command_line = ""
        self.command_history: List[str] = []
        self.quit_requested = False
        self.last_search: Optional[str] = None
        self.last_search_backward = False
        self.tables: Dict[ModeKind, KeyTable] = default_tables()
        self.global_table = default_global_table()
        self._pending: List[str] = []

    @property
    def buffer(self) -> Buffer:
        buffer = self.buffers.active_buffer
        if buffer is None:
            raise RuntimeError("Session has no active buffer")
        return buffer

    # ------------------------------------------------------------------
    # Key dispatch
    # ------------------------------------------------------------------

    def handle_key(self, key: KeyInput) -> ModeResult:
        self.message = None
        kind = self.mode.kind.value
        with telemetry.span(
            name=f"mode::{kind}",
            component=True,
            metadata={"key": key.key, "mode": kind},
        ):
            return self._dispatch(key)

    def _dispatch(self, key: KeyInput) -> ModeResult:
        token = key_to_token(key)
        if not self._pending:
            resolution = self.global_table.resolve((token,))
            if resolution.status == "match" and resolution.binding is not None:
                return self._execute(resolution.binding)

        self._pending.append(token)
        resolution = self.tables[self.mode.kind].resolve(tuple(self._pending))
        if resolution.status == "match" and resolution.binding is not None:
            self._pending.clear()
            return self._execute(resolution.binding)
        if resolution.status == "pending":
            return ModeResult(consumed=True, status="pending", message="awaiting_sequence")

        stale = len(self._pending) > 1
        self._pending.clear()
        if stale:
            # The sequence broke; let the last key start over on its own.
            return self._dispatch(key)
        return self._fallback(key, token)

    def _fallback(self, key: KeyInput, token: str) -> ModeResult:
        text = key.text
        typed = (
            text is not None
            and len(text) == 1
            and text.isprintable()
            and not {"CTRL", "ALT"} & {mod.upper() for mod in key.modifiers}
        )
        if typed and self.mode.is_insert:
            return self._execute(
                Binding((token,), "insert.char", ModeTrigger.CHAR_INPUT, text)
            )
        if typed and self.mode.is_command:
            return self._execute(Binding((token,), "command.text", None, text))
        return ModeResult(consumed=False, status="unbound")

    def _execute(self, binding: Binding) -> ModeResult:
        action = ACTIONS[binding.action]
        previous = self.mode
        with telemetry.span(
            "keys::execute",
            component="keys",
            metadata={"action": binding.action, "keys": binding.key_signature},
        ):
            result = action(self, binding)
        if binding.trigger is not None and not result.status.startswith("blocked"):
            self.apply_trigger(binding.trigger)
        if self.mode != previous:
            result.switch_to = self.mode.kind.value
        return result

    # ------------------------------------------------------------------
    # Mode changes
    # ------------------------------------------------------------------

    def apply_trigger(self, trigger: ModeTrigger) -> Mode:
        target = transition(self.mode, trigger)
        if target != self.mode:
            self._switch(target, trigger)
        return self.mode

    def _switch(self, target: Mode, trigger: ModeTrigger) -> None:
        previous = self.mode
        self.mode = target
        self._pending.clear()
        buffer = self.buffer

        if previous.is_visual and not target.is_visual:
            buffer.clear_visual()
        variant = target.visual_variant()
        if variant is not None:
            if buffer.visual_start is None:
                buffer.start_visual(variant)
            else:
                buffer.set_visual_mode(variant)
            self.emit_selection()
        insert_variant = target.insert_variant()
        if insert_variant is not None and previous.is_normal:
            prepare_insert(self, insert_variant)
        if previous.is_command or target.is_command:
            self.command_line = ""

        payload = {"from": str(previous), "to": str(target), "trigger": trigger.value}
        self.bus.emit("mode.switch", payload)
        telemetry.record_event("mode.switch", data=payload)

    def handle_mouse(self, trigger: ModeTrigger, row: int, col: int) -> ModeResult:
        """Place the cursor for a mouse event, then let ``trigger`` pick the mode."""

        if not self.mode.allows_mouse():
            return ModeResult(consumed=False, status="blocked:mouse")
        buffer = self.buffer
        previous = self.mode
        row = max(0, min(row, buffer.line_count() - 1))
        if trigger is ModeTrigger.MOUSE_DRAG and buffer.visual_start is None:
            buffer.start_visual()
        buffer.set_cursor_position(row, col)
        if trigger is ModeTrigger.MOUSE_DOUBLE_CLICK:
            buffer.select_text_object("w", SelectionType.INNER)
        elif trigger is ModeTrigger.MOUSE_TRIPLE_CLICK:
            buffer.start_visual(VisualVariant.LINE)
        self.apply_trigger(trigger)
        if self.mode.is_visual:
            self.emit_selection()
        switched = self.mode.kind.value if self.mode != previous else None
        return ModeResult(consumed=True, switch_to=switched, status="mouse")

    # ------------------------------------------------------------------
    # Messages and events
    # ------------------------------------------------------------------

    def show(self, message: str, *, status: str = "message") -> ModeResult:
        self.message = message
        self.bus.emit("message", message)
        return ModeResult(consumed=True, status=status, message=message)

    def emit_selection(self, *, swap: bool = False) -> None:
        buffer = self.buffer
        selection = buffer.get_visual_selection()
        if selection is None:
            return
        anchor, cursor = selection
        payload: Dict[str, object] = {
            "anchor": anchor,
            "cursor": cursor,
            "mode": buffer.visual_mode.value,
        }
        if swap:
            payload["swap"] = True
        self.bus.emit("visual.selection", payload)

    def request_quit(self) -> None:
        self.quit_requested = True
        self.bus.emit("editor.quit")
        telemetry.record_event("editor.quit", level="debug")

    # ------------------------------------------------------------------
    # Buffers and files
    # ------------------------------------------------------------------

    def switch_buffer(self, buffer_id: int) -> Buffer:
        self._leave_buffer()
        return self.buffers.switch_buffer(buffer_id)

    def close_buffer(self, buffer_id: int) -> bool:
        if buffer_id == self.buffers.active_id:
            self._leave_buffer()
        closed = self.buffers.close_buffer(buffer_id)
        if closed and not len(self.buffers):
            self.buffers.create_buffer()
        return closed

    def _leave_buffer(self) -> None:
        if self.mode.is_visual:
            self.apply_trigger(ModeTrigger.ESCAPE)

    def set_tab_size(self, tab_size: int) -> None:
        self.buffers.set_tab_size(tab_size)
        self.config = self.config.with_tab_size(tab_size)

    def save(self, path: Optional[str] = None, *, force: bool = False) -> FileResult:
        """Write the active buffer; failures come back as a message."""

        buffer = self.buffer
        target = path or buffer.path
        if target is None:
            return FileResult(False, "No file name")
        if self.readonly and not force:
            return FileResult(False, READONLY_WARNING, target)
        lines = list(buffer.get_content())
        try:
            with telemetry.span(
                "session::save", component="session", metadata={"path": target}
            ):
                size = write_lines(target, lines)
        except OSError as exc:
            return self._file_error("save", target, f"Can't open file for writing: {exc.strerror or exc}")

        if buffer.path is None:
            buffer.path = target
            buffer.name = os.path.basename(target)
        if os.path.abspath(target) == os.path.abspath(buffer.path):
            buffer.mark_saved()
        telemetry.record_event(
            "file.save", data={"path": target, "lines": len(lines), "bytes": size}
        )
        return FileResult(True, describe_written(target, lines, size), target)

    def open_file(self, path: str) -> FileResult:
        """Replace the active buffer with the contents of ``path``.

        A missing file opens as an empty buffer that will be created on save.
        """

        self._leave_buffer()
        buffer_id = self.buffers.active_id
        try:
            lines = read_lines(path)
        except FileNotFoundError:
            self.buffers.install(buffer_id, path=path)
            return FileResult(True, f'"{path}" [New File]', path)
        except (OSError, UnicodeDecodeError) as exc:
            return self._file_error("open", path, str(exc))
        self.buffers.install(buffer_id, path=path, lines=lines)
        telemetry.record_event("file.open", data={"path": path, "lines": len(lines)})
        return FileResult(True, describe_loaded(path, lines), path)

    async def open_file_async(self, path: str) -> FileResult:
        """Like ``open_file`` but reads off the event loop."""

        self._leave_buffer()
        buffer_id = self.buffers.active_id
        try:
            loaded = await self.buffers.load_file(path, buffer_id=buffer_id)
        except FileNotFoundError:
            if buffer_id in self.buffers:
                self.buffers.install(buffer_id, path=path)
            return FileResult(True, f'"{path}" [New File]', path)
        except (OSError, UnicodeDecodeError) as exc:
            return self._file_error("open", path, str(exc))
        if loaded is None:
            return FileResult(False, f'"{path}" discarded: buffer was closed', path)
        lines = self.buffers.get(loaded).get_content()
        return FileResult(True, describe_loaded(path, lines), path)

    def _file_error(self, operation: str, path: str, reason: str) -> FileResult:
        telemetry.record_event(
            "file.error",
            level="error",
            data={"operation": operation, "path": path, "reason": reason},
        )
        return FileResult(False, f'"{path}" {reason}', path)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def run_search(self, query: str, *, backward: bool = False) -> ModeResult:
        """Search the active buffer; an empty query repeats the last one."""

        if not query:
            if self.last_search is None:
                return self.show(NO_PREVIOUS_SEARCH, status="search_error")
            query = self.last_search
        self.last_search = query
        self.last_search_backward = backward
        buffer = self.buffer
        count = buffer.search_backward(query) if backward else buffer.search(query)
        self.bus.emit("search.result", {"query": query, "matches": count})
        if not count:
            return self.show(f"Pattern not found: {query}", status="search_miss")
        prefix = "?" if backward else "/"
        return self.show(f"{prefix}{query}", status="search")

    def repeat_search(self, *, reverse: bool = False) -> ModeResult:
        """``n`` / ``N``: step through matches in (or against) the search direction."""

        buffer = self.buffer
        if not buffer.search_matches:
            if self.last_search is None:
                return self.show(NO_PREVIOUS_SEARCH, status="search_error")
            return self.run_search(self.last_search, backward=self.last_search_backward)
        forward = reverse == self.last_search_backward
        if forward and not buffer.next_match():
            return self.show("Search hit BOTTOM", status="search_boundary")
        if not forward and not buffer.previous_match():
            return self.show("Search hit TOP", status="search_boundary")
        if self.mode.is_visual:
            self.emit_selection()
        return ModeResult(consumed=True, status="search")

    # ------------------------------------------------------------------
    # Host sync
    # ------------------------------------------------------------------

    def pull_buffer(self) -> BufferMirror:
        return self.buffer.mirror(
            attributes={
                "mode": self.mode.display_name(),
                "cursor_style": self.mode.cursor_style().value,
                "buffer": self.buffer.name,
                "modified": "+" if self.buffer.has_unsaved_changes() else "",
            }
        )


__all__ = ["EditorSession", "NO_PREVIOUS_SEARCH", "READONLY_WARNING"]
