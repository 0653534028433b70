from __future__ import annotations

import pytest

from zorforge.input import Binding, KeyInput, KeyTable, default_tables, key_to_token
from zorforge.modes import ModeKind, ModeTrigger


def test_key_to_token_orders_modifiers() -> None:
    assert key_to_token(KeyInput("x")) == "x"
    assert key_to_token(KeyInput("c", ("shift", "CTRL"))) == "CTRL+SHIFT+c"
    assert key_to_token(KeyInput("LEFT", ("ALT", "META"))) == "ALT+META+LEFT"


def test_binding_requires_keys_and_action() -> None:
    with pytest.raises(ValueError):
        Binding((), "core.move")
    with pytest.raises(ValueError):
        Binding(("x",), "")


def test_resolve_match_pending_and_miss() -> None:
    table = KeyTable(
        "test",
        [
            Binding(("d", "d"), "core.delete_line"),
            Binding(("g", "g"), "core.move", ModeTrigger.DOCUMENT_START, "top"),
            Binding(("x",), "core.cut_char"),
        ],
    )

    pending = table.resolve(("d",))
    assert pending.status == "pending"
    assert pending.next_expected == ("d",)

    match = table.resolve(("d", "d"))
    assert match.status == "match"
    assert match.binding is not None
    assert match.binding.action == "core.delete_line"
    assert match.consumed == 2

    miss = table.resolve(("d", "x"))
    assert miss.status == "miss"
    assert miss.consumed == 1


def test_complete_binding_wins_over_longer_sequence() -> None:
    table = KeyTable(
        "test",
        [Binding(("g",), "core.first"), Binding(("g", "g"), "core.second")],
    )

    resolution = table.resolve(("g",))

    assert resolution.status == "match"
    assert resolution.binding is not None
    assert resolution.binding.action == "core.first"


def test_duplicate_binding_is_rejected_unless_replaced() -> None:
    table = KeyTable("test", [Binding(("x",), "core.cut_char")])

    with pytest.raises(ValueError, match="already bound"):
        table.bind(Binding(("x",), "core.delete_forward"))

    table.bind(Binding(("x",), "core.delete_forward"), replace=True)
    assert len(table) == 1
    assert [binding.action for binding in table] == ["core.delete_forward"]


def test_default_tables_cover_every_mode() -> None:
    tables = default_tables()

    assert set(tables) == set(ModeKind)
    visual = tables[ModeKind.VISUAL]
    assert visual.resolve(("i", "w")).binding.argument == "inner:w"  # type: ignore[union-attr]
    assert visual.resolve(("a", "(")).binding.argument == "around:("  # type: ignore[union-attr]
    assert tables[ModeKind.COMMAND].resolve(("x",)).status == "miss"


def test_every_default_action_is_registered() -> None:
    from zorforge.actions import ACTIONS
    from zorforge.input import default_global_table

    tables = list(default_tables().values()) + [default_global_table()]
    actions = {binding.action for table in tables for binding in table}

    assert actions <= set(ACTIONS)
