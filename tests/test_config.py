from __future__ import annotations

import pytest

from zorforge.config import EditorConfig


def test_defaults() -> None:
    config = EditorConfig()

    assert config.tab_size == 4
    assert config.clipboard_history == 10
    assert config.auto_indent is True


def test_from_env_reads_prefixed_values() -> None:
    config = EditorConfig.from_env(
        {
            "ZORFORGE_TAB_SIZE": "2",
            "ZORFORGE_CLIPBOARD_HISTORY": "3",
            "ZORFORGE_AUTO_INDENT": "off",
            "ZORFORGE_LINE_NUMBERS": "yes",
            "UNRELATED": "1",
        }
    )

    assert config.tab_size == 2
    assert config.clipboard_history == 3
    assert config.auto_indent is False
    assert config.line_numbers is True


def test_blank_values_fall_back_to_defaults() -> None:
    assert EditorConfig.from_env({"ZORFORGE_TAB_SIZE": "  "}).tab_size == 4


def test_non_integer_value_is_rejected() -> None:
    with pytest.raises(ValueError, match="ZORFORGE_PAGE_SIZE"):
        EditorConfig.from_env({"ZORFORGE_PAGE_SIZE": "many"})


def test_non_positive_sizes_are_rejected() -> None:
    with pytest.raises(ValueError):
        EditorConfig(tab_size=0)
    with pytest.raises(ValueError):
        EditorConfig.from_env({"ZORFORGE_MAX_BUFFERS": "-1"})


def test_with_tab_size_returns_copy() -> None:
    config = EditorConfig()

    changed = config.with_tab_size(8)

    assert changed.tab_size == 8
    assert config.tab_size == 4


def test_session_sizes_shared_resources() -> None:
    from zorforge.session import EditorSession

    session = EditorSession(EditorConfig(clipboard_history=2, tab_size=3))

    assert session.clipboard.max_history == 2
    assert session.buffer.tab_size == 3
