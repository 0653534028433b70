"""Editor settings resolved from ``ZORFORGE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from zorforge.buffer.buffer import DEFAULT_PAGE_SIZE, DEFAULT_TAB_SIZE
from zorforge.buffer.clipboard import DEFAULT_MAX_HISTORY
from zorforge.buffer.manager import DEFAULT_MAX_BUFFERS

ENV_PREFIX = "ZORFORGE_"


def _env_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_flag(env: Mapping[str, str], name: str, fallback: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return fallback
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Values the session hands to buffers and hosts.

    The buffer core only consumes ``tab_size``; the rest size shared
    resources or steer the host.
    """

    tab_size: int = DEFAULT_TAB_SIZE
    clipboard_history: int = DEFAULT_MAX_HISTORY
    max_buffers: int = DEFAULT_MAX_BUFFERS
    page_size: int = DEFAULT_PAGE_SIZE
    auto_indent: bool = True
    line_numbers: bool = True

    def __post_init__(self) -> None:
        for name in ("tab_size", "clipboard_history", "max_buffers", "page_size"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        source = os.environ if env is None else env
        defaults = cls()
        return cls(
            tab_size=_env_int(source, "TAB_SIZE", defaults.tab_size),
            clipboard_history=_env_int(
                source, "CLIPBOARD_HISTORY", defaults.clipboard_history
            ),
            max_buffers=_env_int(source, "MAX_BUFFERS", defaults.max_buffers),
            page_size=_env_int(source, "PAGE_SIZE", defaults.page_size),
            auto_indent=_env_flag(source, "AUTO_INDENT", defaults.auto_indent),
            line_numbers=_env_flag(source, "LINE_NUMBERS", defaults.line_numbers),
        )

    def with_tab_size(self, tab_size: int) -> "EditorConfig":
        return replace(self, tab_size=tab_size)


__all__ = ["EditorConfig", "ENV_PREFIX"]
