"""Terminal backend abstraction.

Widgets draw through the :class:`Backend` protocol only. The concrete
:class:`TerminalBackend` speaks ANSI escape sequences to a text stream and
manages raw mode on the controlling tty via :mod:`termios`.
"""

from __future__ import annotations

import contextlib
import enum
import logging
import os
import re
import sys
import termios
import tty
from typing import Iterator, Protocol, TextIO

from inquiry.ui.config import get_config
from inquiry.ui.layout import Size
from inquiry.ui.style import RESET, Attributes, Color, Styled, sgr

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_MOVE_TO_FMT = "\x1b[{};{}H"
_SCROLL_UP_FMT = "\x1b[{}S"
_QUERY_CURSOR_POS = "\x1b[6n"

_CURSOR_POS_RE = re.compile(r"\x1b\[(\d+);(\d+)R")

_FALLBACK_SIZE = Size(80, 24)


class ClearType(enum.Enum):
    ALL = "\x1b[2J"
    FROM_CURSOR_DOWN = "\x1b[J"
    FROM_CURSOR_UP = "\x1b[1J"
    CURRENT_LINE = "\x1b[2K"
    UNTIL_NEW_LINE = "\x1b[K"


# ---------------------------------------------------------------------------
# Backend protocol
# ---------------------------------------------------------------------------


class Backend(Protocol):
    """Drawing and terminal-control capability consumed by widgets."""

    def write(self, text: str) -> None: ...

    def write_styled(self, styled: Styled) -> None: ...

    def set_fg(self, color: Color) -> None: ...

    def set_attributes(self, attributes: Attributes) -> None: ...

    def move_cursor_to(self, x: int, y: int) -> None: ...

    def get_cursor_pos(self) -> tuple[int, int]: ...

    def size(self) -> Size: ...

    def clear(self, clear_type: ClearType) -> None: ...

    def scroll_up(self, lines: int) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def enable_raw_mode(self) -> None: ...

    def disable_raw_mode(self) -> None: ...

    def flush(self) -> None: ...


# ---------------------------------------------------------------------------
# TerminalBackend implementation
# ---------------------------------------------------------------------------


class TerminalBackend:
    """ANSI backend writing to *output* and reading replies from *input_fd*.

    Write failures are not caught; an ``OSError`` reaches the caller.
    """

    def __init__(self, output: TextIO | None = None, input_fd: int | None = None) -> None:
        self._output = output if output is not None else sys.stdout
        self._input_fd = input_fd if input_fd is not None else sys.stdin.fileno()
        self._original_termios: list | None = None
        self._write_log_path: str = get_config().write_log

    # -- output ---------------------------------------------------------------

    def write(self, text: str) -> None:
        self._output.write(text)

        if self._write_log_path:
            with open(self._write_log_path, "a", encoding="utf-8") as f:
                f.write(text)

    def write_styled(self, styled: Styled) -> None:
        self.write(str(styled))

    def set_fg(self, color: Color) -> None:
        self.write(sgr(color))

    def set_attributes(self, attributes: Attributes) -> None:
        if attributes == Attributes.NONE:
            self.write(RESET)
        else:
            self.write(sgr(attributes=attributes))

    def flush(self) -> None:
        self._output.flush()

    # -- cursor / screen manipulation -------------------------------------------

    def move_cursor_to(self, x: int, y: int) -> None:
        self.write(_MOVE_TO_FMT.format(y + 1, x + 1))

    def get_cursor_pos(self) -> tuple[int, int]:
        """Query the terminal for the cursor position as ``(column, row)``.

        The terminal must be in raw mode, otherwise the reply is line
        buffered and echoed.
        """
        self.write(_QUERY_CURSOR_POS)
        self.flush()

        reply = ""
        while True:
            chunk = os.read(self._input_fd, 32)
            if not chunk:
                raise OSError("terminal closed while reading cursor position")
            reply += chunk.decode("utf-8", errors="replace")
            match = _CURSOR_POS_RE.search(reply)
            if match:
                return int(match.group(2)) - 1, int(match.group(1)) - 1

    def size(self) -> Size:
        try:
            size = os.get_terminal_size(self._output.fileno())
        except (AttributeError, ValueError, OSError):
            return _FALLBACK_SIZE
        return Size(size.columns, size.lines)

    def clear(self, clear_type: ClearType) -> None:
        self.write(clear_type.value)

    def scroll_up(self, lines: int) -> None:
        if lines > 0:
            self.write(_SCROLL_UP_FMT.format(lines))

    def hide_cursor(self) -> None:
        self.write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(_SHOW_CURSOR)

    # -- raw mode -------------------------------------------------------------

    def enable_raw_mode(self) -> None:
        if self._original_termios is not None:
            return
        self._original_termios = termios.tcgetattr(self._input_fd)
        tty.setraw(self._input_fd)
        logger.debug("raw mode enabled on fd %d", self._input_fd)

    def disable_raw_mode(self) -> None:
        if self._original_termios is None:
            return
        termios.tcsetattr(self._input_fd, termios.TCSADRAIN, self._original_termios)
        self._original_termios = None
        logger.debug("raw mode disabled on fd %d", self._input_fd)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def terminal_state(backend: Backend, hide_cursor: bool = False) -> Iterator[Backend]:
    """Keep *backend* in raw mode (and optionally hide the cursor) for a block."""
    backend.enable_raw_mode()
    if hide_cursor:
        backend.hide_cursor()
    try:
        yield backend
    finally:
        if hide_cursor:
            backend.show_cursor()
        backend.flush()
        backend.disable_raw_mode()
