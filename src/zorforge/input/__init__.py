"""Key normalization and per-mode binding tables."""

from .keys import (
    Binding,
    KeyInput,
    KeyTable,
    Resolution,
    default_global_table,
    default_tables,
    key_to_token,
)

__all__ = [
    "Binding",
    "KeyInput",
    "KeyTable",
    "Resolution",
    "default_global_table",
    "default_tables",
    "key_to_token",
]
