"""StdinBuffer splits raw stdin chunks into complete key sequences.

Reads can deliver several keys at once or cut an escape sequence in half;
each emitted chunk is exactly one key (or one bracketed paste).
"""

from __future__ import annotations

import asyncio
from typing import Callable

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"


def _sequence_length(data: str) -> int | None:
    """Length of the escape sequence at the start of *data*, ``None`` if incomplete."""
    if len(data) < 2:
        return None

    introducer = data[1]

    # CSI: ESC [ params final-byte
    if introducer == "[":
        if data.startswith(f"{ESC}[M"):
            return 6 if len(data) >= 6 else None  # X10 mouse report
        for index in range(2, len(data)):
            if 0x40 <= ord(data[index]) <= 0x7E:
                return index + 1
        return None

    # SS3: ESC O letter
    if introducer == "O":
        return 3 if len(data) >= 3 else None

    # OSC / DCS / APC: terminated by BEL or ST
    if introducer in "]P_":
        for index in range(2, len(data)):
            if data[index] == "\x07":
                return index + 1
            if data[index] == "\\" and data[index - 1] == ESC:
                return index + 1
        return None

    # Meta key: ESC followed by one character
    return 2


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences plus an incomplete remainder."""
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue
        length = _sequence_length(buffer[pos:])
        if length is None:
            return sequences, buffer[pos:]
        sequences.append(buffer[pos : pos + length])
        pos += length
    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences.

    A lone ``ESC`` is held for *timeout* seconds before being emitted as the
    escape key, in case the rest of a sequence is still on its way.
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self._timeout = timeout
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._paste_buffer: str | None = None

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        self._on_paste = callback

    def process(self, data: str) -> None:
        """Feed a chunk read from stdin."""
        self._cancel_timeout()

        if self._paste_buffer is not None:
            self._paste_buffer += data
            self._finish_paste()
            return

        self._buffer += data
        start = self._buffer.find(BRACKETED_PASTE_START)
        if start != -1:
            sequences, rest = split_sequences(self._buffer[:start])
            self._paste_buffer = self._buffer[start + len(BRACKETED_PASTE_START):]
            self._buffer = ""
            self._emit_all(sequences + ([rest] if rest else []))
            self._finish_paste()
            return

        sequences, self._buffer = split_sequences(self._buffer)
        self._emit_all(sequences)

        if self._buffer:
            try:
                loop = asyncio.get_running_loop()
                self._timeout_handle = loop.call_later(self._timeout, self._flush_timeout)
            except RuntimeError:
                # No event loop - flush immediately
                self._emit_all(self.flush())

    def _finish_paste(self) -> None:
        if self._paste_buffer is None:
            return
        end = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end == -1:
            return
        content = self._paste_buffer[:end]
        remaining = self._paste_buffer[end + len(BRACKETED_PASTE_END):]
        self._paste_buffer = None
        if self._on_paste:
            self._on_paste(content)
        if remaining:
            self.process(remaining)

    def _emit_all(self, sequences: list[str]) -> None:
        for sequence in sequences:
            if self._on_data:
                self._on_data(sequence)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _flush_timeout(self) -> None:
        self._timeout_handle = None
        self._emit_all(self.flush())

    def flush(self) -> list[str]:
        """Return whatever is buffered as a single sequence and clear it."""
        self._cancel_timeout()
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._cancel_timeout()
        self._buffer = ""
        self._paste_buffer = None

    def get_buffer(self) -> str:
        return self._buffer
