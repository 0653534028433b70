"""Registry of open buffers with an active designation and LRU eviction."""

from __future__ import annotations

import asyncio
import os
from collections import OrderedDict
from typing import Dict, Iterable, Optional, Tuple

from zorforge.files import read_lines
from zorforge.runtime import telemetry

from .buffer import DEFAULT_TAB_SIZE, Buffer
from .clipboard import Clipboard
from .document import BufferDocument

BufferId = int

DEFAULT_MAX_BUFFERS = 100


class BufferManager:
    """Maps ids to buffers and tracks which one the user is editing.

    Every mutation here runs synchronously on the event loop, which is what
    serializes switching the active buffer. Each buffer also owns an
    ``asyncio.Lock`` that background work takes before touching it, so a
    file load into an inactive buffer never blocks the active one.
    """

    def __init__(
        self,
        max_buffers: int = DEFAULT_MAX_BUFFERS,
        clipboard: Optional[Clipboard] = None,
        tab_size: int = DEFAULT_TAB_SIZE,
    ) -> None:
        if max_buffers < 1:
            raise ValueError("max_buffers must be positive")
        self.max_buffers = max_buffers
        self.clipboard = clipboard if clipboard is not None else Clipboard()
        self.tab_size = tab_size
        # Least recently used first.
        self._buffers: "OrderedDict[BufferId, Buffer]" = OrderedDict()
        self._locks: Dict[BufferId, asyncio.Lock] = {}
        self._active: Optional[BufferId] = None
        self._next_id: BufferId = 1

    def __len__(self) -> int:
        return len(self._buffers)

    def __contains__(self, buffer_id: object) -> bool:
        return buffer_id in self._buffers

    def ids(self) -> Tuple[BufferId, ...]:
        return tuple(sorted(self._buffers))

    @property
    def active_id(self) -> Optional[BufferId]:
        return self._active

    @property
    def active_buffer(self) -> Optional[Buffer]:
        if self._active is None:
            return None
        return self._buffers[self._active]

    def get(self, buffer_id: BufferId) -> Buffer:
        try:
            return self._buffers[buffer_id]
        except KeyError as exc:
            raise KeyError(f"Unknown buffer {buffer_id}") from exc

    def create_buffer(
        self,
        name: Optional[str] = None,
        *,
        path: Optional[str] = None,
        lines: Optional[Iterable[str]] = None,
        activate: bool = True,
    ) -> BufferId:
        buffer_id = self._next_id
        self._next_id += 1
        self._buffers[buffer_id] = self._build(buffer_id, name, path, lines)
        if activate:
            self._active = buffer_id
        self._evict()
        telemetry.record_event(
            "buffers.create",
            level="debug",
            data={"buffer_id": buffer_id, "path": path or ""},
        )
        return buffer_id

    def replace_buffer(self, buffer_id: BufferId, buffer: Buffer) -> None:
        """Swap in a fully-built buffer under an existing id."""

        if buffer_id not in self._buffers:
            raise KeyError(f"Unknown buffer {buffer_id}")
        self._buffers[buffer_id] = buffer
        self._touch(buffer_id)

    def install(
        self,
        buffer_id: BufferId,
        *,
        path: Optional[str] = None,
        lines: Optional[Iterable[str]] = None,
    ) -> Buffer:
        """Replace ``buffer_id`` with a fresh buffer built from ``lines``."""

        buffer = self._build(buffer_id, None, path, lines)
        self.replace_buffer(buffer_id, buffer)
        return buffer

    def switch_buffer(self, buffer_id: BufferId) -> Buffer:
        buffer = self.get(buffer_id)
        self._active = buffer_id
        self._touch(buffer_id)
        telemetry.record_event(
            "buffers.switch", level="debug", data={"buffer_id": buffer_id}
        )
        return buffer

    def close_buffer(self, buffer_id: BufferId) -> bool:
        """Forget ``buffer_id``; the most recently used survivor becomes active."""

        if self._buffers.pop(buffer_id, None) is None:
            return False
        self._locks.pop(buffer_id, None)
        if self._active == buffer_id:
            self._active = next(reversed(self._buffers), None)
        telemetry.record_event(
            "buffers.close", level="debug", data={"buffer_id": buffer_id}
        )
        return True

    def lock(self, buffer_id: BufferId) -> asyncio.Lock:
        if buffer_id not in self._buffers:
            raise KeyError(f"Unknown buffer {buffer_id}")
        return self._locks.setdefault(buffer_id, asyncio.Lock())

    def set_tab_size(self, tab_size: int) -> None:
        if tab_size < 1:
            raise ValueError("tab_size must be positive")
        self.tab_size = tab_size
        for buffer in self._buffers.values():
            buffer.tab_size = tab_size

    async def load_file(
        self, path: str, *, buffer_id: Optional[BufferId] = None
    ) -> Optional[BufferId]:
        """Read ``path`` off the event loop and install the result.

        With ``buffer_id`` the file replaces that buffer's content; if the
        buffer is closed while the read is in flight the result is discarded
        and ``None`` is returned. Without it a new buffer is created once the
        read completes. ``OSError`` propagates to the caller.
        """

        with telemetry.span(
            "buffers::load",
            component="buffers",
            metadata={"path": path, "buffer_id": buffer_id},
        ) as handle:
            if buffer_id is None:
                lines = await asyncio.to_thread(read_lines, path)
                new_id = self.create_buffer(path=path, lines=lines)
                handle.add_metadata("lines", len(lines))
                self._record_load(new_id, path, len(lines))
                return new_id

            async with self.lock(buffer_id):
                lines = await asyncio.to_thread(read_lines, path)
                if buffer_id not in self._buffers:
                    handle.cancel("buffer closed during load")
                    telemetry.record_event(
                        "buffers.load_discarded",
                        level="debug",
                        data={"buffer_id": buffer_id, "path": path},
                    )
                    return None
                self.install(buffer_id, path=path, lines=lines)
            handle.add_metadata("lines", len(lines))
            self._record_load(buffer_id, path, len(lines))
            return buffer_id

    def _record_load(self, buffer_id: BufferId, path: str, line_count: int) -> None:
        telemetry.record_event(
            "buffers.load",
            data={"buffer_id": buffer_id, "path": path, "lines": line_count},
        )

    def _build(
        self,
        buffer_id: BufferId,
        name: Optional[str],
        path: Optional[str],
        lines: Optional[Iterable[str]],
    ) -> Buffer:
        if name is None:
            name = os.path.basename(path) if path else f"[No Name {buffer_id}]"
        document = BufferDocument.from_lines(lines) if lines is not None else None
        return Buffer(
            name=name,
            document=document,
            clipboard=self.clipboard,
            tab_size=self.tab_size,
            path=path,
        )

    def _touch(self, buffer_id: BufferId) -> None:
        self._buffers.move_to_end(buffer_id)

    def _evict(self) -> None:
        """Drop least recently used inactive buffers, clean ones first."""

        while len(self._buffers) > self.max_buffers:
            candidates = [bid for bid in self._buffers if bid != self._active]
            if not candidates:
                return
            clean = [
                bid for bid in candidates if not self._buffers[bid].has_unsaved_changes()
            ]
            victim = (clean or candidates)[0]
            dirty = not clean
            self._buffers.pop(victim)
            self._locks.pop(victim, None)
            telemetry.record_event(
                "buffers.evict",
                level="warning" if dirty else "info",
                data={"buffer_id": victim, "held": len(self._buffers), "dirty": dirty},
            )


__all__ = ["BufferId", "BufferManager", "DEFAULT_MAX_BUFFERS"]
