"""Executable Textual app that hosts the editor session."""

from __future__ import annotations

import argparse
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use zorforge.adapters.textual.app"
    ) from exc

from zorforge.buffer import BufferMirror, VisualVariant
from zorforge.config import EditorConfig
from zorforge.modes import ModeTrigger
from zorforge.runtime import telemetry
from zorforge.session import EditorSession

from .controller import TextualUIHooks, TextualVimAdapter

_CLICK_TRIGGERS = {
    1: ModeTrigger.MOUSE_CLICK,
    2: ModeTrigger.MOUSE_DOUBLE_CLICK,
    3: ModeTrigger.MOUSE_TRIPLE_CLICK,
}

CURSOR_STYLE = "reverse"
SELECTION_STYLE = "on grey37"
MATCH_STYLE = "black on yellow"


def _in_selection(mirror: BufferMirror, row: int, col: int) -> bool:
    if mirror.selection is None:
        return False
    (a_row, a_col), (c_row, c_col) = mirror.selection
    if not min(a_row, c_row) <= row <= max(a_row, c_row):
        return False
    if mirror.visual_mode is VisualVariant.LINE:
        return True
    if mirror.visual_mode is VisualVariant.BLOCK:
        return min(a_col, c_col) <= col < max(a_col, c_col)
    start, end = sorted([(a_row, a_col), (c_row, c_col)])
    return start <= (row, col) < end


def render_mirror(mirror: BufferMirror, *, line_numbers: bool = True) -> Text:
    """Draw lines with a reversed cursor cell, selection and match highlights."""

    result = Text()
    width = len(str(len(mirror.lines)))
    matched = {
        (row, col)
        for row, start, end in mirror.search_matches
        for col in range(start, end)
    }
    cursor_row, cursor_col = mirror.cursor
    for row, line in enumerate(mirror.lines):
        if line_numbers:
            result.append(f"{row + 1:>{width}} ", style="dim")
        for col, char in enumerate(line):
            if (row, col) == (cursor_row, cursor_col):
                style = CURSOR_STYLE
            elif _in_selection(mirror, row, col):
                style = SELECTION_STYLE
            elif (row, col) in matched:
                style = MATCH_STYLE
            else:
                style = ""
            result.append(char, style=style)
        if row == cursor_row and cursor_col >= len(line):
            result.append(" ", style=CURSOR_STYLE)
        result.append("\n")
    return result


class BufferView(Static):
    """Renders buffer mirrors and reports mouse positions in buffer coordinates."""

    DEFAULT_CSS = """
    BufferView {
        height: 1fr;
        overflow-y: auto;
        border: solid $accent;
    }
    """

    def __init__(self, *, line_numbers: bool = True, id: str | None = None) -> None:
        super().__init__("", id=id)
        self.line_numbers = line_numbers
        self.line_count = 1

    def show(self, mirror: BufferMirror) -> None:
        self.line_count = len(mirror.lines)
        self.update(render_mirror(mirror, line_numbers=self.line_numbers))

    def to_buffer(self, event: events.MouseEvent) -> tuple[int, int]:
        offset = event.get_content_offset(self)
        x, y = (offset.x, offset.y) if offset is not None else (event.x, event.y)
        gutter = len(str(self.line_count)) + 1 if self.line_numbers else 0
        return y, max(0, x - gutter)


class ZorforgeApp(App[None]):
    """Minimal Textual UI embedding the editor session."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #status-line {
        height: 1;
        color: $text;
        background: $accent 30%;
    }
    #command-line {
        height: 1;
        color: $text-muted;
        background: $surface;
    }
    """
    TITLE = "zorforge"

    def __init__(
        self,
        *,
        path: Optional[str] = None,
        config: Optional[EditorConfig] = None,
        readonly: bool = False,
    ) -> None:
        super().__init__()
        self._path = path
        self.session = EditorSession(config or EditorConfig.from_env(), readonly=readonly)
        self.adapter: TextualVimAdapter | None = None
        self._dragging = False

    def compose(self) -> ComposeResult:
        yield BufferView(line_numbers=self.session.config.line_numbers, id="buffer-view")
        yield Static("", id="status-line")
        yield Static("", id="command-line")

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self.query_one("#status-line", Static).update,
            show_command=self.query_one("#command-line", Static).update,
            handle_event=self._handle_event,
        )
        self.adapter = TextualVimAdapter(self.session, hooks)
        if self._path:
            self.run_worker(self._open_initial(self._path), exclusive=True)

    async def _open_initial(self, path: str) -> None:
        result = await self.session.open_file_async(path)
        self.session.show(result.message)
        if self.adapter:
            self.adapter.refresh()

    async def action_quit(self) -> None:
        # Textual's own quit binding goes through the unsaved-changes check.
        if self.adapter:
            self.adapter.handle_textual_key("ctrl+q")

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        self.adapter.handle_textual_key(event.key, text=event.character)
        event.stop()

    def on_mouse_down(self, event: events.MouseDown) -> None:
        view = self.query_one(BufferView)
        if not self.adapter or event.widget is not view:
            return
        trigger = _CLICK_TRIGGERS.get(min(event.chain, 3), ModeTrigger.MOUSE_CLICK)
        self.adapter.handle_mouse(trigger, *view.to_buffer(event))
        self._dragging = True

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if not self.adapter or not self._dragging or not event.button:
            return
        view = self.query_one(BufferView)
        self.adapter.handle_mouse(ModeTrigger.MOUSE_DRAG, *view.to_buffer(event))

    def on_mouse_up(self, event: events.MouseUp) -> None:
        del event
        self._dragging = False

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        del event
        if self.adapter:
            self.adapter.handle_textual_key("down")

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        del event
        if self.adapter:
            self.adapter.handle_textual_key("up")

    def _update_buffer(self, mirror: BufferMirror) -> None:
        view = self.query_one(BufferView)
        # ``:set nonumber`` takes effect on the next frame.
        view.line_numbers = self.session.config.line_numbers
        view.show(mirror)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        del payload
        if name == "editor.quit":
            self.exit()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="zorforge", description="Modal text editor.")
    parser.add_argument("path", nargs="?", help="file to open")
    parser.add_argument(
        "-R",
        "--readonly",
        action="store_true",
        help="refuse writes unless forced with '!'",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        default=None,
        help="telelog preset to log with",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    ZorforgeApp(path=args.path, readonly=args.readonly).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
