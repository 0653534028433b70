from __future__ import annotations

from pathlib import Path

import pytest

from zorforge.files import describe_loaded, describe_written, read_lines, write_lines


def test_read_lines_drops_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "a.txt"
    path.write_text("one\ntwo\n", encoding="utf-8")

    assert read_lines(path) == ["one", "two"]


def test_empty_file_is_one_empty_line(tmp_path: Path) -> None:
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")

    assert read_lines(path) == [""]


def test_crlf_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "dos.txt"
    path.write_bytes(b"a\r\nb\r\n")

    assert read_lines(path) == ["a", "b"]


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_lines(tmp_path / "nope.txt")


def test_write_lines_returns_size(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"

    size = write_lines(path, ["héllo", "x"])

    assert path.read_bytes() == "héllo\nx".encode("utf-8")
    assert size == 8


def test_messages() -> None:
    assert describe_written("f.txt", ["a", "b"], 3) == '"f.txt" 2L, 3B written'
    assert describe_loaded("f.txt", ["a"]) == '"f.txt" 1L'
