"""Bounded yank history shared between buffers and the editor session."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional, Tuple

DEFAULT_MAX_HISTORY = 10


class Clipboard:
    """Most-recent-first ring of yanked strings.

    One instance is shared by every buffer a session opens so yank and paste
    work across buffers. Callers mutate it from the single input event chain.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        if max_history < 1:
            raise ValueError("max_history must be positive")
        self._history: Deque[str] = deque()
        self.max_history = max_history

    def __len__(self) -> int:
        return len(self._history)

    def is_empty(self) -> bool:
        return not self._history

    def yank(self, content: str) -> None:
        if not content:
            return
        self._history.appendleft(content)
        self._trim()

    def yank_lines(self, lines: Iterable[str]) -> None:
        lines = list(lines)
        if not lines:
            return
        self.yank("\n".join(lines))

    def peek(self) -> Optional[str]:
        return self._history[0] if self._history else None

    def peek_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._history):
            return self._history[index]
        return None

    def peek_lines(self) -> Optional[List[str]]:
        content = self.peek()
        if content is None:
            return None
        return content.split("\n")

    def pop(self) -> Optional[str]:
        return self._history.popleft() if self._history else None

    def clear(self) -> None:
        self._history.clear()

    def history(self) -> Tuple[str, ...]:
        return tuple(self._history)

    def rotate_forward(self) -> None:
        """Move the newest entry to the back of the ring."""

        if self._history:
            self._history.rotate(-1)

    def rotate_backward(self) -> None:
        """Undo ``rotate_forward``: the oldest entry becomes the newest."""

        if self._history:
            self._history.rotate(1)

    def set_max_history(self, max_history: int) -> None:
        if max_history < 1:
            raise ValueError("max_history must be positive")
        self.max_history = max_history
        self._trim()

    def _trim(self) -> None:
        while len(self._history) > self.max_history:
            self._history.pop()


__all__ = ["Clipboard", "DEFAULT_MAX_HISTORY"]
