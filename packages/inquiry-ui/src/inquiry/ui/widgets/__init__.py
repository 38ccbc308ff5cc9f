"""Leaf widgets."""

from inquiry.ui.widgets.char_input import CharInput
from inquiry.ui.widgets.prompt import Delimiter, Prompt, write_finished_message
from inquiry.ui.widgets.string_input import StringInput, no_filter
from inquiry.ui.widgets.text import Text

__all__ = [
    "CharInput",
    "Delimiter",
    "Prompt",
    "StringInput",
    "Text",
    "no_filter",
    "write_finished_message",
]
