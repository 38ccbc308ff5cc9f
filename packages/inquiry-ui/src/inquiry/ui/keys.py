"""Keyboard events and decoding of raw terminal input into them.

Only legacy (xterm-style) sequences are understood: plain CSI and SS3 keys,
their ``CSI 1;<modifier>`` variants, control characters and ``ESC``-prefixed
alt keys. Each call to :func:`parse_key_event` takes one complete sequence;
see :mod:`inquiry.ui.events` for splitting a raw read into sequences.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

KeyId = str


class KeyCode(enum.Enum):
    CHAR = "char"
    ENTER = "enter"
    ESC = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    INSERT = "insert"
    TAB = "tab"
    BACK_TAB = "backTab"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageUp"
    PAGE_DOWN = "pageDown"
    NULL = "null"


class KeyModifiers(enum.Flag):
    NONE = 0
    SHIFT = 1
    ALT = 2
    CONTROL = 4


@dataclass(frozen=True)
class KeyEvent:
    """A single key press.

    ``char`` is only set for :attr:`KeyCode.CHAR` events.
    """

    code: KeyCode
    char: str = ""
    modifiers: KeyModifiers = KeyModifiers.NONE

    @classmethod
    def of_char(cls, char: str, modifiers: KeyModifiers = KeyModifiers.NONE) -> KeyEvent:
        return cls(KeyCode.CHAR, char, modifiers)

    @property
    def key_id(self) -> KeyId:
        """Key identifier in ``ctrl+shift+alt+<key>`` form, e.g. ``"ctrl+c"``."""
        prefix = ""
        if KeyModifiers.CONTROL in self.modifiers:
            prefix += "ctrl+"
        if KeyModifiers.SHIFT in self.modifiers:
            prefix += "shift+"
        if KeyModifiers.ALT in self.modifiers:
            prefix += "alt+"
        if self.code is KeyCode.CHAR:
            return prefix + ("space" if self.char == " " else self.char)
        return prefix + self.code.value


# ---------------------------------------------------------------------------
# Legacy sequences
# ---------------------------------------------------------------------------

LEGACY_KEY_SEQUENCES: dict[str, KeyCode] = {
    "\x1b[A": KeyCode.UP,
    "\x1b[B": KeyCode.DOWN,
    "\x1b[C": KeyCode.RIGHT,
    "\x1b[D": KeyCode.LEFT,
    "\x1b[H": KeyCode.HOME,
    "\x1b[F": KeyCode.END,
    "\x1bOA": KeyCode.UP,
    "\x1bOB": KeyCode.DOWN,
    "\x1bOC": KeyCode.RIGHT,
    "\x1bOD": KeyCode.LEFT,
    "\x1bOH": KeyCode.HOME,
    "\x1bOF": KeyCode.END,
    "\x1b[1~": KeyCode.HOME,
    "\x1b[2~": KeyCode.INSERT,
    "\x1b[3~": KeyCode.DELETE,
    "\x1b[4~": KeyCode.END,
    "\x1b[5~": KeyCode.PAGE_UP,
    "\x1b[6~": KeyCode.PAGE_DOWN,
    "\x1b[7~": KeyCode.HOME,
    "\x1b[8~": KeyCode.END,
    "\x1b[Z": KeyCode.BACK_TAB,
}

_CSI_LETTER_KEYS: dict[str, KeyCode] = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
}

_CSI_TILDE_KEYS: dict[int, KeyCode] = {
    1: KeyCode.HOME,
    2: KeyCode.INSERT,
    3: KeyCode.DELETE,
    4: KeyCode.END,
    5: KeyCode.PAGE_UP,
    6: KeyCode.PAGE_DOWN,
    7: KeyCode.HOME,
    8: KeyCode.END,
}

# CSI 1;<mod><letter>  e.g. ctrl+up = ESC[1;5A
_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([ABCDHF])$")
# CSI <n>;<mod>~  e.g. shift+delete = ESC[3;2~
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)~$")

_LOCK_MASK = 64 + 128


def _modifiers_from_param(param: int) -> KeyModifiers:
    return KeyModifiers((param - 1) & ~_LOCK_MASK & 0b111)


# ---------------------------------------------------------------------------
# parse_key_event
# ---------------------------------------------------------------------------


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Decode one complete input sequence, or return ``None`` if unknown."""
    if not data:
        return None

    code = LEGACY_KEY_SEQUENCES.get(data)
    if code is not None:
        if code is KeyCode.BACK_TAB:
            return KeyEvent(code, modifiers=KeyModifiers.SHIFT)
        return KeyEvent(code)

    match = _MODIFIED_LETTER_RE.match(data)
    if match:
        return KeyEvent(
            _CSI_LETTER_KEYS[match.group(2)],
            modifiers=_modifiers_from_param(int(match.group(1))),
        )

    match = _MODIFIED_TILDE_RE.match(data)
    if match:
        code = _CSI_TILDE_KEYS.get(int(match.group(1)))
        if code is None:
            return None
        return KeyEvent(code, modifiers=_modifiers_from_param(int(match.group(2))))

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return KeyEvent(KeyCode.ESC)
    if data in ("\r", "\n"):
        return KeyEvent(KeyCode.ENTER)
    if data == "\t":
        return KeyEvent(KeyCode.TAB)
    if data in ("\x7f", "\x08"):
        return KeyEvent(KeyCode.BACKSPACE)
    if data == "\x00":
        return KeyEvent(KeyCode.NULL)

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent.of_char(chr(ord(data) + ord("a") - 1), KeyModifiers.CONTROL)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key_event(data[1])
        if inner is None or inner.code is KeyCode.NULL:
            return None
        return KeyEvent(inner.code, inner.char, inner.modifiers | KeyModifiers.ALT)

    # --- Plain printable character (may be a multi-codepoint grapheme) ---
    if data.isprintable() and "\x1b" not in data:
        if data.isupper() and len(data) == 1:
            return KeyEvent.of_char(data, KeyModifiers.SHIFT)
        return KeyEvent.of_char(data)

    return None
