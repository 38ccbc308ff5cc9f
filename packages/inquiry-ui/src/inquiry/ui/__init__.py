"""inquiry-ui: terminal widgets for interactive command-line questions."""

# Terminal backend
from inquiry.ui.backend import Backend, ClearType, TerminalBackend, terminal_state

# Configuration
from inquiry.ui.config import Config, get_config, set_config

# Input events
from inquiry.ui.events import Events, split_sequences

# Driver
from inquiry.ui.input import Input, PromptWidget, Validation

# Keybindings
from inquiry.ui.keybindings import (
    DEFAULT_KEYBINDINGS,
    KeybindingsManager,
    Movement,
    get_keybindings,
    set_keybindings,
)

# Keys
from inquiry.ui.keys import KeyCode, KeyEvent, KeyId, KeyModifiers, parse_key_event

# Layout
from inquiry.ui.layout import Layout, RenderRegion, Size

# Questions
from inquiry.ui.prompts import (
    Choice,
    ChoiceList,
    ConfirmPrompt,
    FloatPrompt,
    InputPrompt,
    IntPrompt,
    MultiSelectPrompt,
    Question,
    SelectPrompt,
    Separator,
    ask,
)

# Pagination
from inquiry.ui.select import List, Select

# Style
from inquiry.ui.style import Attributes, Color, Styled

# Utilities
from inquiry.ui.utils import visible_width, wrap_text

# Widgets
from inquiry.ui.widget import Widget
from inquiry.ui.widgets import (
    CharInput,
    Delimiter,
    Prompt,
    StringInput,
    Text,
    write_finished_message,
)

__all__ = [
    # Backend
    "Backend",
    "ClearType",
    "TerminalBackend",
    "terminal_state",
    # Config
    "Config",
    "get_config",
    "set_config",
    # Events
    "Events",
    "split_sequences",
    # Driver
    "Input",
    "PromptWidget",
    "Validation",
    # Keybindings
    "DEFAULT_KEYBINDINGS",
    "KeybindingsManager",
    "Movement",
    "get_keybindings",
    "set_keybindings",
    # Keys
    "KeyCode",
    "KeyEvent",
    "KeyId",
    "KeyModifiers",
    "parse_key_event",
    # Layout
    "Layout",
    "RenderRegion",
    "Size",
    # Questions
    "Choice",
    "ChoiceList",
    "ConfirmPrompt",
    "FloatPrompt",
    "InputPrompt",
    "IntPrompt",
    "MultiSelectPrompt",
    "Question",
    "SelectPrompt",
    "Separator",
    "ask",
    # Pagination
    "List",
    "Select",
    # Style
    "Attributes",
    "Color",
    "Styled",
    # Utilities
    "visible_width",
    "wrap_text",
    # Widgets
    "CharInput",
    "Delimiter",
    "Prompt",
    "StringInput",
    "Text",
    "Widget",
    "write_finished_message",
]
