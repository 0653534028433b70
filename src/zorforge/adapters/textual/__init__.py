"""Textual host for the editor session."""

from .controller import TextualUIHooks, TextualVimAdapter, normalize_textual_key

__all__ = ["TextualUIHooks", "TextualVimAdapter", "normalize_textual_key"]
