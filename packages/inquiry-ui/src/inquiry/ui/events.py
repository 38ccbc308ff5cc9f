"""Reading key events from the terminal.

Raw reads can end in the middle of an escape sequence, so input is buffered
until every sequence is complete. A lone ``ESC`` that is not followed by more
input within a short timeout is reported as the Escape key.
"""

from __future__ import annotations

import codecs
import os
import select
import sys
from typing import Iterator

from inquiry.ui.keys import KeyCode, KeyEvent, parse_key_event

ESC = "\x1b"

_COMPLETE = "complete"
_INCOMPLETE = "incomplete"


def _sequence_status(data: str) -> str:
    """Check whether *data* (starting with ESC) is a complete sequence."""
    if len(data) == 1:
        return _INCOMPLETE

    after_esc = data[1:]

    # CSI sequences: ESC [ <params> <final byte 0x40-0x7e>
    if after_esc.startswith("["):
        if len(data) < 3:
            return _INCOMPLETE
        return _COMPLETE if 0x40 <= ord(data[-1]) <= 0x7E else _INCOMPLETE

    # OSC / DCS / APC sequences end with ST or BEL
    if after_esc[0] in "]P_":
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return _COMPLETE
        return _INCOMPLETE

    # SS3 sequences: ESC O <final>
    if after_esc.startswith("O"):
        return _COMPLETE if len(after_esc) >= 2 else _INCOMPLETE

    # Meta key sequences: ESC followed by a single character
    return _COMPLETE


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns ``(sequences, remainder)`` where the remainder is an escape
    sequence that needs more data.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        for seq_end in range(1, len(remaining) + 1):
            if _sequence_status(remaining[:seq_end]) == _COMPLETE:
                sequences.append(remaining[:seq_end])
                pos += seq_end
                break
        else:
            return sequences, remaining

    return sequences, ""


class Events:
    """Iterator of :class:`KeyEvent` read from a terminal file descriptor.

    End of input yields :attr:`KeyCode.NULL` events, which the driver treats
    as end-of-file.
    """

    def __init__(self, fd: int | None = None, *, timeout: float = 0.01) -> None:
        self._fd = fd if fd is not None else sys.stdin.fileno()
        self._timeout = timeout
        self._buffer = ""
        self._pending: list[KeyEvent] = []
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __iter__(self) -> Iterator[KeyEvent]:
        return self

    def __next__(self) -> KeyEvent:
        while not self._pending:
            self._fill()
        return self._pending.pop(0)

    def _fill(self) -> None:
        data = self._read()
        if data is None:
            self._pending.append(KeyEvent(KeyCode.NULL))
            return

        sequences, self._buffer = split_sequences(self._buffer + data)

        # An unfinished escape sequence is flushed as-is if nothing follows
        while self._buffer:
            ready, _, _ = select.select([self._fd], [], [], self._timeout)
            if not ready:
                sequences.append(self._buffer)
                self._buffer = ""
                break
            more = self._read()
            if more is None:
                sequences.append(self._buffer)
                self._buffer = ""
                break
            extra, self._buffer = split_sequences(self._buffer + more)
            sequences.extend(extra)

        for sequence in sequences:
            event = parse_key_event(sequence)
            if event is not None:
                self._pending.append(event)

    def _read(self) -> str | None:
        """Read available input, or return ``None`` at end of input."""
        raw = os.read(self._fd, 4096)
        if not raw:
            return None
        return self._decoder.decode(raw)
