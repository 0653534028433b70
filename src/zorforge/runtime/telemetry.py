"""Logging for the editor, backed by telelog.

Buffers, the session and the host only ever call four things here:
``configure`` picks a preset or explicit ``telelog.Config``, ``get_logger``
hands out cached loggers, ``record_event`` writes one ``event::<name>`` line
and ``span`` profiles a block while optionally tracking it as a component.

Nothing is written to the console unless ``ZORFORGE_LOG_CONSOLE`` is set,
because the editor draws on the same terminal.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "ZORFORGE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "zorforge")
DEFAULT_BUFFER_SIZE = 2048

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def _setting(name: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _enabled(name: str) -> bool:
    value = _setting(name)
    return value is not None and value.lower() in {"1", "true", "yes", "on"}


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


@dataclass(frozen=True, slots=True)
class Preset:
    """Declarative shape of a telelog configuration."""

    level: str
    console: bool = False
    json: bool = False
    buffered: bool = False
    log_file: Optional[str] = None

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(not _enabled("NO_COLOR"))
        if self.json:
            config.with_json_format(True)
        log_file = _setting("LOG_FILE") or self.log_file
        if log_file:
            config.with_file_output(log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(int(_setting("LOG_BUFFER_SIZE") or DEFAULT_BUFFER_SIZE))
        # Spans rely on logger.profile, which needs profiling on.
        config.with_profiling(True)
        return config


PRESETS: Dict[str, Preset] = {
    "development": Preset(level="DEBUG", console=True),
    "production": Preset(level="INFO", buffered=True, log_file="zorforge.log"),
    "performance": Preset(
        level="DEBUG", json=True, buffered=True, log_file="zorforge-performance.log"
    ),
}


def preset_from_env() -> Preset:
    """The configuration used when nothing was chosen explicitly."""

    return Preset(
        level=(_setting("LOG_LEVEL") or "WARNING").upper(),
        console=_enabled("LOG_CONSOLE"),
        json=_enabled("LOG_JSON"),
        buffered=_enabled("LOG_BUFFERED"),
    )


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` is an explicit ``telelog.Config``; ``preset`` names an entry of
    ``PRESETS``. Passing both is an error. Cached loggers are dropped so the
    next ``get_logger`` call picks up the new settings.
    """

    global _config
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset is not None:
        try:
            config = PRESETS[preset.lower()].build()
        except KeyError:
            raise ValueError(f"Unknown preset '{preset}'.") from None
    elif config is None:
        config = preset_from_env().build()
    else:
        config.with_profiling(True)
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` using the active configuration."""

    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _loggers.get(logger_name)
    if logger is None:
        if _config is None:
            configure()
        logger = tl.Logger.with_config(logger_name, _config)
        _loggers[logger_name] = logger
    return logger


def _writer(logger: Any, level: str) -> Tuple[Callable[..., None], bool]:
    """Pick ``<level>_with`` when telelog offers it, else the plain method."""

    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        return structured, True
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _write(logger: Any, level: str, message: str, fields: Dict[str, Any]) -> None:
    writer, structured = _writer(logger, level)
    if structured:
        writer(message, [(str(key), _text(value)) for key, value in fields.items()])
    else:
        writer(f"{message} {fields}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Write ``event::<name>`` with ``data`` as structured fields."""

    _write(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; lets the block attach fields or report an outcome."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def _fields(self, extra: Dict[str, Any]) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            fields["component"] = self.component_name
        fields.update({key: _text(value) for key, value in extra.items()})
        return fields

    def fail(self, reason: str) -> None:
        _write(self.logger, "error", "span::fail", self._fields({"reason": reason}))

    def cancel(self, reason: Optional[str] = None) -> None:
        extra = {"reason": reason} if reason else {}
        _write(self.logger, "warning", "span::cancel", self._fields(extra))


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``.

    ``component=True`` also tracks the block as a component called ``name``;
    a string picks a different component name. ``metadata`` becomes logger
    context until the block exits. An exception escaping the block is
    reported through ``SpanHandle.fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    try:
        with ExitStack() as stack:
            if component_name:
                stack.enter_context(log.track_component(component_name))
            stack.enter_context(log.profile(name))
            handle = SpanHandle(log, name, component_name, dict(context))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in context:
            log.remove_context(key)


__all__ = [
    "PRESETS",
    "Preset",
    "SpanHandle",
    "configure",
    "get_logger",
    "preset_from_env",
    "record_event",
    "span",
]
