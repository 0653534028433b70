"""Modal text editing core with a Textual host."""

__all__ = [
    "adapters",
    "actions",
    "buffer",
    "config",
    "files",
    "input",
    "modes",
    "runtime",
    "session",
]

__version__ = "0.1.0"
