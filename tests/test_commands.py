from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from zorforge.actions.command import NOT_SAVED, execute
from zorforge.input import KeyInput
from zorforge.modes import ModeResult
from zorforge.session import EditorSession


def make_session(lines: Optional[Sequence[str]] = None, **kwargs) -> EditorSession:
    session = EditorSession(**kwargs)
    if lines is not None:
        session.buffers.install(session.buffers.active_id, lines=lines)
    return session


def run(session: EditorSession, command: str) -> ModeResult:
    """Type ``:command`` followed by Enter."""

    session.handle_key(KeyInput(":", text=":"))
    for char in command:
        session.handle_key(KeyInput(char, text=char))
    return session.handle_key(KeyInput("ENTER"))


def test_submit_records_history_and_returns_to_normal() -> None:
    session = make_session()
    submitted: List[object] = []
    session.bus.subscribe("command.submit", submitted.append)

    result = run(session, "echo hi there")

    assert result.switch_to == "normal"
    assert result.status == "command_echo"
    assert session.message == "hi there"
    assert session.command_history == ["echo hi there"]
    assert submitted == ["echo hi there"]


def test_empty_command_line() -> None:
    session = make_session()

    result = run(session, "   ")

    assert result.status == "command_empty"
    assert session.mode.is_normal


def test_unknown_command_reports_error() -> None:
    session = make_session()
    errors: List[object] = []
    session.bus.subscribe("command.error", errors.append)

    result = run(session, "frobnicate now")

    assert result.status == "command_error"
    assert session.message == "Unknown command: frobnicate"
    assert errors == ["frobnicate"]


def test_write_to_path(tmp_path: Path) -> None:
    session = make_session(["hello"])
    target = tmp_path / "hello.txt"

    result = run(session, f"w {target}")

    assert result.status == "command_write"
    assert target.read_text(encoding="utf-8") == "hello"
    assert session.message == f'"{target}" 1L, 5B written'


def test_write_without_name_fails() -> None:
    session = make_session(["hello"])

    result = run(session, "w")

    assert result.status == "command_error"
    assert session.message == "No file name"


def test_readonly_write_needs_bang(tmp_path: Path) -> None:
    target = tmp_path / "ro.txt"
    session = make_session(["x"], readonly=True)

    assert run(session, f"w {target}").status == "command_error"
    assert run(session, f"w! {target}").status == "command_write"
    assert target.exists()


def test_quit_refused_then_forced() -> None:
    session = make_session(["abc"])
    session.buffer.cut_char()

    result = run(session, "q")
    assert result.status == "quit_refused"
    assert session.message == NOT_SAVED
    assert session.quit_requested is False

    run(session, "q!")
    assert session.quit_requested is True


def test_quit_clean_buffer() -> None:
    session = make_session()

    assert run(session, "quit").status == "command_quit"
    assert session.quit_requested is True


def test_wq_writes_and_quits(tmp_path: Path) -> None:
    target = tmp_path / "wq.txt"
    session = make_session(["data"])

    run(session, f"wq {target}")

    assert target.read_text(encoding="utf-8") == "data"
    assert session.quit_requested is True


def test_wq_without_name_does_not_quit() -> None:
    session = make_session(["data"])

    run(session, "wq")

    assert session.quit_requested is False
    assert session.message == "No file name"


def test_x_skips_write_when_clean(tmp_path: Path) -> None:
    path = tmp_path / "clean.txt"
    path.write_text("same", encoding="utf-8")
    session = make_session()
    session.open_file(str(path))
    path.write_text("changed on disk", encoding="utf-8")

    run(session, "x")

    assert session.quit_requested is True
    assert path.read_text(encoding="utf-8") == "changed on disk"


def test_x_writes_dirty_buffer(tmp_path: Path) -> None:
    path = tmp_path / "dirty.txt"
    path.write_text("abc", encoding="utf-8")
    session = make_session()
    session.open_file(str(path))
    session.buffer.cut_char()

    run(session, "x")

    assert path.read_text(encoding="utf-8") == "bc"
    assert session.quit_requested is True


def test_edit_reloads_and_guards_changes(tmp_path: Path) -> None:
    path = tmp_path / "e.txt"
    path.write_text("v1", encoding="utf-8")
    session = make_session()
    session.open_file(str(path))
    session.buffer.cut_char()
    path.write_text("v2", encoding="utf-8")

    assert run(session, "e").status == "command_error"
    assert session.message == NOT_SAVED

    assert run(session, "e!").status == "command_edit"
    assert list(session.buffer.get_content()) == ["v2"]
    assert session.buffer.has_unsaved_changes() is False


def test_edit_without_any_name() -> None:
    session = make_session()

    run(session, "e")

    assert session.message == "No file name"


def test_nohlsearch_clears_matches() -> None:
    session = make_session(["aa"])
    session.run_search("a")

    run(session, "noh")

    assert session.buffer.search_matches == ()


def test_set_tabstop_updates_buffers_and_config() -> None:
    session = make_session(["x"])

    assert run(session, "set ts=2").status == "command_set"

    assert session.config.tab_size == 2
    assert session.buffer.tab_size == 2
    session.buffer.indent_line()
    assert session.buffer.get_current_line() == "  x"


def test_set_flags_and_listing() -> None:
    session = make_session()

    run(session, "set noai nonumber")
    assert session.config.auto_indent is False
    assert session.config.line_numbers is False

    run(session, "set")
    assert session.message == "tabstop=4 noautoindent nonumber"
    run(session, "set nu")
    assert session.config.line_numbers is True


def test_set_rejects_bad_input() -> None:
    session = make_session()

    run(session, "set ts=zero")
    assert session.message == "Invalid argument: ts=zero"
    run(session, "set ts=0")
    assert session.message == "Invalid argument: ts=0"
    run(session, "set wrap")
    assert session.message == "Unknown option: wrap"
    assert session.config.tab_size == 4


def test_enew_and_buffer_listing() -> None:
    session = make_session(["first"])
    first = session.buffers.active_id

    run(session, "enew")
    second = session.buffers.active_id
    assert second != first
    assert list(session.buffer.get_content()) == [""]

    run(session, "ls")
    assert session.message == (
        f'{first}      "[No Name {first}]" | {second} %a   "[No Name {second}]"'
    )


def test_buffer_cycling() -> None:
    session = make_session()
    first = session.buffers.active_id
    run(session, "enew")
    second = session.buffers.active_id

    run(session, "bn")
    assert session.buffers.active_id == first
    run(session, "bp")
    assert session.buffers.active_id == second
    run(session, f"b {first}")
    assert session.buffers.active_id == first
    run(session, "b 99")
    assert session.message == "Buffer 99 does not exist"
    run(session, "b one")
    assert session.message == "Invalid buffer number: one"


def test_bdelete_guards_unsaved_changes() -> None:
    session = make_session(["abc"])
    first = session.buffers.active_id
    run(session, "enew")
    second = session.buffers.active_id
    run(session, f"b {first}")
    session.buffer.cut_char()

    run(session, "bd")
    assert session.message == NOT_SAVED
    assert first in session.buffers

    run(session, "bd!")
    assert first not in session.buffers
    assert session.buffers.active_id == second


def test_execute_directly() -> None:
    session = make_session()

    result = execute(session, "echo direct")

    assert result.message == "direct"
    assert session.mode.is_normal
