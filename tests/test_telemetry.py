from __future__ import annotations

import pytest

from zorforge.runtime import telemetry


def test_presets_cover_the_cli_choices() -> None:
    assert set(telemetry.PRESETS) == {"development", "production", "performance"}
    assert telemetry.PRESETS["development"].console is True
    assert telemetry.PRESETS["production"].console is False


def test_env_preset_keeps_console_opt_in(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ZORFORGE_LOG_CONSOLE", raising=False)
    monkeypatch.setenv("ZORFORGE_LOG_LEVEL", "debug")

    preset = telemetry.preset_from_env()

    assert preset.level == "DEBUG"
    assert preset.console is False
    monkeypatch.setenv("ZORFORGE_LOG_CONSOLE", "yes")
    assert telemetry.preset_from_env().console is True


def test_configure_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        telemetry.configure(preset="verbose")
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_span_reports_metadata_and_reraises() -> None:
    with telemetry.span("test::ok", component=True, metadata={"rows": (1, 2)}) as handle:
        handle.add_metadata("status", "done")
    assert handle.metadata == {"rows": "(1, 2)", "status": "done"}
    assert handle.component_name == "test::ok"

    with pytest.raises(KeyError):
        with telemetry.span("test::fail", component="tests"):
            raise KeyError("boom")


def test_record_event_rejects_unknown_levels() -> None:
    telemetry.record_event("test.event", level="debug", data={"value": 1})

    with pytest.raises(ValueError):
        telemetry.record_event("test.event", level="loudest")
