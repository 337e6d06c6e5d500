"""Terminal access for prompt sessions.

``Terminal`` is what the host adapter draws on and reads keys from.
``ProcessTerminal`` is the real one: it puts the input tty in raw mode,
turns on bracketed paste and, when the terminal answers the query, the
kitty keyboard protocol, and reports window resizes.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import re
import signal
import sys
import termios
import tty
from typing import Callable, Protocol, TextIO

from interactive_text.stdin_buffer import (
    BRACKETED_PASTE_END,
    BRACKETED_PASTE_START,
    StdinBuffer,
)

logger = logging.getLogger(__name__)

InputHandler = Callable[[str], None]
ResizeHandler = Callable[[], None]

# Mode switches written on start and undone on stop
PASTE_ON = "\x1b[?2004h"
PASTE_OFF = "\x1b[?2004l"
KITTY_QUERY = "\x1b[?u"
KITTY_PUSH = "\x1b[>1u"  # flag 1: disambiguate escape codes
KITTY_POP = "\x1b[<u"

_KITTY_REPLY_RE = re.compile(r"^\x1b\[\?\d+u$")


class Terminal(Protocol):
    """What a session needs from a terminal."""

    def start(self, on_input: InputHandler, on_resize: ResizeHandler) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def move_by(self, lines: int) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_line(self) -> None: ...

    def clear_from_cursor(self) -> None: ...


class ProcessTerminal:
    """The controlling terminal of this process.

    Keys are read from *stdin*, which must be a tty, through the running
    event loop, so :meth:`start` has to be called from inside it. Frames go
    to *output* (``sys.stdout`` by default).
    """

    def __init__(self, *, stdin: TextIO | None = None, output: TextIO | None = None) -> None:
        self._stdin = stdin or sys.stdin
        self._output = output or sys.stdout
        self._on_input: InputHandler | None = None
        self._on_resize: ResizeHandler | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._saved_mode: list | None = None
        self._kitty = False

        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._keys = StdinBuffer()
        self._keys.on_data(self._dispatch)
        self._keys.on_paste(self._dispatch_paste)

    @property
    def kitty_protocol_active(self) -> bool:
        return self._kitty

    @property
    def columns(self) -> int:
        return self._size().columns

    @property
    def rows(self) -> int:
        return self._size().lines

    def _size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self._output.fileno())
        except (ValueError, OSError):
            return os.terminal_size((80, 24))

    # -- lifecycle ----------------------------------------------------------

    def start(self, on_input: InputHandler, on_resize: ResizeHandler) -> None:
        self._on_input = on_input
        self._on_resize = on_resize

        fd = self._stdin.fileno()
        self._saved_mode = termios.tcgetattr(fd)
        tty.setraw(fd)

        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(fd, self._read)
        self._loop.add_signal_handler(signal.SIGWINCH, self._resized)

        self.write(PASTE_ON + KITTY_QUERY)

    def stop(self) -> None:
        """Undo everything :meth:`start` did. Safe to call more than once."""
        if self._kitty:
            self.write(KITTY_POP)
            self._kitty = False
        if self._saved_mode is not None:
            self.write(PASTE_OFF)

        self._keys.clear()
        fd = self._stdin.fileno()
        if self._loop is not None:
            self._loop.remove_reader(fd)
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._loop = None
        if self._saved_mode is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None

        self._on_input = None
        self._on_resize = None

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        self._output.write(data)
        self._output.flush()

    def move_by(self, lines: int) -> None:
        """Move the cursor up (negative) or down (positive) by *lines*."""
        if lines:
            self.write(f"\x1b[{abs(lines)}{'A' if lines < 0 else 'B'}")

    def hide_cursor(self) -> None:
        self.write("\x1b[?25l")

    def show_cursor(self) -> None:
        self.write("\x1b[?25h")

    def clear_line(self) -> None:
        self.write("\x1b[2K\r")

    def clear_from_cursor(self) -> None:
        self.write("\x1b[0J")

    # -- input --------------------------------------------------------------

    def _read(self) -> None:
        try:
            raw = os.read(self._stdin.fileno(), 4096)
        except (BlockingIOError, InterruptedError):
            return
        # A multi-byte character may straddle two reads
        text = self._decoder.decode(raw)
        if text:
            self._keys.process(text)

    def _dispatch(self, sequence: str) -> None:
        if _KITTY_REPLY_RE.match(sequence):
            if not self._kitty:
                self._kitty = True
                self.write(KITTY_PUSH)
                logger.debug("kitty keyboard protocol enabled")
            return
        if self._on_input is not None:
            self._on_input(sequence)

    def _dispatch_paste(self, text: str) -> None:
        # The input line recognises pastes by their markers
        if self._on_input is not None:
            self._on_input(BRACKETED_PASTE_START + text + BRACKETED_PASTE_END)

    def _resized(self) -> None:
        if self._on_resize is not None:
            self._on_resize()
