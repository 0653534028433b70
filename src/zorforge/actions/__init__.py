"""High-level editing verbs reused across modes.

``ACTIONS`` maps the action ids named by key bindings to their callables.
"""

from typing import Dict

from . import command, core, insert, system, visual
from .core import Action, UNSAVED_WARNING, blocked
from .insert import prepare_insert

ACTIONS: Dict[str, Action] = {
    "core.enter_mode": core.enter_mode,
    "core.move": core.move,
    "core.word_forward": core.word_forward,
    "core.word_backward": core.word_backward,
    "core.page_up": core.page_up,
    "core.page_down": core.page_down,
    "core.undo": core.undo,
    "core.redo": core.redo,
    "core.cut_char": core.cut_char,
    "core.delete_forward": core.delete_forward,
    "core.delete_line": core.delete_line,
    "core.yank_line": core.yank_line,
    "core.paste": core.paste,
    "core.indent_line": core.indent_line,
    "core.dedent_line": core.dedent_line,
    "core.next_match": core.next_match,
    "core.previous_match": core.previous_match,
    "core.quit": core.quit_editor,
    "insert.char": insert.insert_char,
    "insert.exit": insert.exit_insert,
    "insert.newline": insert.newline,
    "insert.delete_backward": insert.delete_backward,
    "insert.delete_forward": insert.delete_forward,
    "insert.delete_word": insert.delete_word,
    "insert.delete_to_line_start": insert.delete_to_line_start,
    "insert.tab": insert.tab,
    "insert.indent": insert.indent,
    "insert.dedent": insert.dedent,
    "visual.extend": visual.extend,
    "visual.select_all": visual.select_all,
    "visual.swap_anchor": visual.swap_anchor,
    "visual.yank": visual.yank,
    "visual.delete": visual.delete,
    "visual.change": visual.change,
    "visual.indent": visual.indent,
    "visual.dedent": visual.dedent,
    "visual.paste": visual.paste,
    "visual.select_object": visual.select_object,
    "command.text": command.insert_text,
    "command.cancel": command.cancel,
    "command.submit": command.submit_command_line,
    "command.backspace": command.backspace,
    "global.copy": system.copy,
    "global.cut": system.cut,
    "global.paste": system.paste,
}

__all__ = [
    "ACTIONS",
    "Action",
    "UNSAVED_WARNING",
    "blocked",
    "prepare_insert",
]
