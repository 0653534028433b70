"""Actions that edit and evaluate Ex-style command lines."""

from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from zorforge.input.keys import Binding
from zorforge.modes.bus import ModeResult
from zorforge.modes.mode import CommandType, ModeTrigger
from zorforge.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover - typing only
    from zorforge.session import EditorSession

CommandHandler = Callable[["EditorSession", List[str]], ModeResult]

NOT_SAVED = "No write since last change (add ! to override)"


def insert_text(session: "EditorSession", binding: Binding) -> ModeResult:
    session.command_line += binding.argument or ""
    return ModeResult(consumed=True, status="command_text")


def backspace(session: "EditorSession", binding: Binding) -> ModeResult:
    """Erase one character; on an empty line leave Command mode."""

    del binding
    if not session.command_line:
        session.apply_trigger(ModeTrigger.ESCAPE)
        return ModeResult(consumed=True, status="command_cancel")
    session.command_line = session.command_line[:-1]
    return ModeResult(consumed=True, status="command_text")


def cancel(session: "EditorSession", binding: Binding) -> ModeResult:
    del session, binding
    return ModeResult(consumed=True, status="command_cancel")


def submit_command_line(session: "EditorSession", binding: Binding) -> ModeResult:
    del binding
    text = session.command_line.strip()
    session.command_history.append(text)
    if session.mode.is_search_mode():
        backward = session.mode.variant is CommandType.BACKWARD
        return session.run_search(text, backward=backward)
    session.bus.emit("command.submit", text)
    if not text:
        return ModeResult(consumed=True, status="command_empty")
    return execute(session, text)


def execute(session: "EditorSession", text: str) -> ModeResult:
    """Run one command line such as ``w notes.txt`` or ``set ts=2``."""

    parts = text.split()
    command, args = parts[0], parts[1:]
    handler = _COMMAND_HANDLERS.get(command)
    if handler is None:
        return _command_error(session, command, f"Unknown command: {command}")
    with telemetry.span(
        f"command::{command}", component="command", metadata={"args": args}
    ):
        return handler(session, args)


def _command_error(session: "EditorSession", command: str, message: str) -> ModeResult:
    session.bus.emit("command.error", command)
    telemetry.record_event(
        "command.error",
        level="warning",
        data={"command": command, "message": message},
    )
    return session.show(message, status="command_error")


def _first(args: List[str]) -> Optional[str]:
    return args[0] if args else None


def _handle_echo(session: "EditorSession", args: List[str]) -> ModeResult:
    message = " ".join(args)
    session.bus.emit("command.echo", message)
    return session.show(message, status="command_echo")


def _handle_write(
    session: "EditorSession", args: List[str], *, force: bool = False
) -> ModeResult:
    result = session.save(_first(args), force=force)
    return session.show(
        result.message, status="command_write" if result.ok else "command_error"
    )


def _handle_quit(
    session: "EditorSession", args: List[str], *, force: bool = False
) -> ModeResult:
    del args
    if not force and session.buffer.has_unsaved_changes():
        return session.show(NOT_SAVED, status="quit_refused")
    session.request_quit()
    return ModeResult(consumed=True, status="command_quit")


def _handle_wq(
    session: "EditorSession", args: List[str], *, force: bool = False
) -> ModeResult:
    result = session.save(_first(args), force=force)
    if not result.ok:
        return session.show(result.message, status="command_error")
    session.request_quit()
    return session.show(result.message, status="command_wq")


def _handle_x(
    session: "EditorSession", args: List[str], *, force: bool = False
) -> ModeResult:
    """Like ``wq`` but only writes when there is something to write."""

    if session.buffer.has_unsaved_changes() or args:
        return _handle_wq(session, args, force=force)
    session.request_quit()
    return ModeResult(consumed=True, status="command_quit")


def _handle_edit(
    session: "EditorSession", args: List[str], *, force: bool = False
) -> ModeResult:
    path = _first(args) or session.buffer.path
    if path is None:
        return session.show("No file name", status="command_error")
    if not force and session.buffer.has_unsaved_changes():
        return session.show(NOT_SAVED, status="command_error")
    result = session.open_file(path)
    return session.show(
        result.message, status="command_edit" if result.ok else "command_error"
    )


def _handle_nohlsearch(session: "EditorSession", args: List[str]) -> ModeResult:
    del args
    session.buffer.clear_search()
    return ModeResult(consumed=True, status="command_noh")


_FLAGS = {
    "ai": "auto_indent",
    "autoindent": "auto_indent",
    "nu": "line_numbers",
    "number": "line_numbers",
}


def _handle_set(session: "EditorSession", args: List[str]) -> ModeResult:
    if not args:
        config = session.config
        return session.show(
            f"tabstop={config.tab_size} "
            f"{'' if config.auto_indent else 'no'}autoindent "
            f"{'' if config.line_numbers else 'no'}number",
            status="command_set",
        )
    for arg in args:
        name, _, value = arg.partition("=")
        if name in ("tabstop", "ts") and value:
            try:
                session.set_tab_size(int(value))
            except ValueError:
                return _command_error(session, "set", f"Invalid argument: {arg}")
        elif name in _FLAGS and not value:
            session.config = replace(session.config, **{_FLAGS[name]: True})
        elif name.startswith("no") and name[2:] in _FLAGS and not value:
            session.config = replace(session.config, **{_FLAGS[name[2:]]: False})
        else:
            return _command_error(session, "set", f"Unknown option: {arg}")
    return ModeResult(consumed=True, status="command_set")


def _handle_ls(session: "EditorSession", args: List[str]) -> ModeResult:
    del args
    manager = session.buffers
    entries = []
    for buffer_id in manager.ids():
        buffer = manager.get(buffer_id)
        flags = "%a" if buffer_id == manager.active_id else "  "
        dirty = "+" if buffer.has_unsaved_changes() else " "
        entries.append(f'{buffer_id} {flags} {dirty} "{buffer.name}"')
    return session.show(" | ".join(entries), status="command_ls")


def _handle_buffer(session: "EditorSession", args: List[str]) -> ModeResult:
    target = _first(args)
    if target is None:
        return session.show(session.buffer.name, status="command_buffer")
    try:
        buffer_id = int(target)
    except ValueError:
        return _command_error(session, "b", f"Invalid buffer number: {target}")
    if buffer_id not in session.buffers:
        return _command_error(session, "b", f"Buffer {buffer_id} does not exist")
    session.switch_buffer(buffer_id)
    return ModeResult(consumed=True, status="command_buffer")


def _cycle(session: "EditorSession", args: List[str], *, step: int) -> ModeResult:
    del args
    ids = session.buffers.ids()
    current = ids.index(session.buffers.active_id)
    session.switch_buffer(ids[(current + step) % len(ids)])
    return ModeResult(consumed=True, status="command_buffer")


def _handle_bdelete(
    session: "EditorSession", args: List[str], *, force: bool = False
) -> ModeResult:
    target = _first(args)
    try:
        buffer_id = int(target) if target else session.buffers.active_id
    except ValueError:
        return _command_error(session, "bd", f"Invalid buffer number: {target}")
    if buffer_id not in session.buffers:
        return _command_error(session, "bd", f"Buffer {buffer_id} does not exist")
    if not force and session.buffers.get(buffer_id).has_unsaved_changes():
        return session.show(NOT_SAVED, status="command_error")
    session.close_buffer(buffer_id)
    return ModeResult(consumed=True, status="command_bdelete")


def _handle_enew(session: "EditorSession", args: List[str]) -> ModeResult:
    del args
    session.switch_buffer(session.buffers.create_buffer(activate=False))
    return ModeResult(consumed=True, status="command_enew")


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "echo": _handle_echo,
    "write": _handle_write,
    "w": _handle_write,
    "write!": partial(_handle_write, force=True),
    "w!": partial(_handle_write, force=True),
    "quit": _handle_quit,
    "q": _handle_quit,
    "quit!": partial(_handle_quit, force=True),
    "q!": partial(_handle_quit, force=True),
    "wq": _handle_wq,
    "wq!": partial(_handle_wq, force=True),
    "x": _handle_x,
    "x!": partial(_handle_x, force=True),
    "exit": _handle_x,
    "edit": _handle_edit,
    "e": _handle_edit,
    "edit!": partial(_handle_edit, force=True),
    "e!": partial(_handle_edit, force=True),
    "noh": _handle_nohlsearch,
    "nohlsearch": _handle_nohlsearch,
    "set": _handle_set,
    "se": _handle_set,
    "ls": _handle_ls,
    "buffers": _handle_ls,
    "b": _handle_buffer,
    "buffer": _handle_buffer,
    "bn": partial(_cycle, step=1),
    "bnext": partial(_cycle, step=1),
    "bp": partial(_cycle, step=-1),
    "bprevious": partial(_cycle, step=-1),
    "bd": _handle_bdelete,
    "bdelete": _handle_bdelete,
    "bd!": partial(_handle_bdelete, force=True),
    "enew": _handle_enew,
}


__all__ = [
    "NOT_SAVED",
    "backspace",
    "cancel",
    "execute",
    "insert_text",
    "submit_command_line",
]
