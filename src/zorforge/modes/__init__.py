"""Mode value object, transition rules, and the session event bus."""

from .bus import ModeBus, ModeResult
from .mode import (
    CommandType,
    CursorStyle,
    InsertVariant,
    Mode,
    ModeKind,
    ModeTrigger,
    VisualVariant,
    transition,
)

__all__ = [
    "CommandType",
    "CursorStyle",
    "InsertVariant",
    "Mode",
    "ModeBus",
    "ModeKind",
    "ModeResult",
    "ModeTrigger",
    "VisualVariant",
    "transition",
]
