"""Reading and writing documents on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

PathLike = Union[str, "os.PathLike[str]"]

ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome of a save or open, ready to show in the message area."""

    ok: bool
    message: str
    path: Optional[str] = None


def read_lines(path: PathLike) -> List[str]:
    """Return the lines of ``path``; an empty file yields one empty line.

    Raises ``OSError`` (including ``FileNotFoundError``) and
    ``UnicodeDecodeError`` unchanged.
    """

    text = Path(path).read_text(encoding=ENCODING)
    return text.splitlines() or [""]


def write_lines(path: PathLike, lines: Sequence[str]) -> int:
    """Write ``lines`` joined by line feeds and return the byte count."""

    payload = "\n".join(lines).encode(ENCODING)
    Path(path).write_bytes(payload)
    return len(payload)


def describe_written(path: PathLike, lines: Sequence[str], size: int) -> str:
    return f'"{os.fspath(path)}" {len(lines)}L, {size}B written'


def describe_loaded(path: PathLike, lines: Sequence[str]) -> str:
    return f'"{os.fspath(path)}" {len(lines)}L'


__all__ = [
    "FileResult",
    "describe_loaded",
    "describe_written",
    "read_lines",
    "write_lines",
]
