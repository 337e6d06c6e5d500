"""Host adapter: runs a session on a terminal and returns its result.

Each complete input sequence goes through the raw input line (edit mode
only) and the state machine, then the frame is repainted in place.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from interactive_text.config import InteractiveTextConfig
from interactive_text.input_line import InputLine
from interactive_text.keys import KeyEvent
from interactive_text.machine import InteractiveText
from interactive_text.renderer import CURSOR_HIDE
from interactive_text.terminal import ProcessTerminal, Terminal
from interactive_text.types import State
from interactive_text.utils import count_rows

logger = logging.getLogger(__name__)


class AbortError(Exception):
    """The user force-closed the prompt with Ctrl+C."""


class Screen:
    """Repaints one multi-line frame in place."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self._rows: int = 0
        self._frame: str = ""

    def render(self, frame: str) -> None:
        self._erase()
        self.terminal.write(frame.replace("\n", "\r\n"))
        if not frame.endswith(CURSOR_HIDE):
            self.terminal.show_cursor()
        self._frame = frame
        self._rows = count_rows(frame, self.terminal.columns)

    def redraw(self) -> None:
        """Repaint the last frame, e.g. after a resize."""
        if self._frame:
            self.render(self._frame)

    def stop(self) -> None:
        """Leave the frame on screen and move below it."""
        self.terminal.show_cursor()
        self.terminal.write("\r\n")
        self._rows = 0

    def _erase(self) -> None:
        if self._rows == 0:
            return
        self.terminal.move_by(-(self._rows - 1))
        self.terminal.write("\r")
        self.terminal.clear_from_cursor()


async def interactive_text(
    config: InteractiveTextConfig | Mapping[str, Any],
    *,
    terminal: Terminal | None = None,
) -> State:
    """Run a session until ``done`` succeeds and return the final values.

    Raises :class:`AbortError` on Ctrl+C (unless an action is bound to it)
    and propagates any exception raised by validators, transformers or
    custom actions. The terminal is restored in every case.
    """
    session = InteractiveText(config)
    term: Terminal = terminal if terminal is not None else ProcessTerminal()
    screen = Screen(term)
    line = InputLine()

    loop = asyncio.get_running_loop()
    finished: asyncio.Future[State] = loop.create_future()

    def _is_bound(event: KeyEvent) -> bool:
        actions = (
            session.config.edit_actions if session.edit_mode else session.config.navigate_actions
        )
        return any(action.is_triggered(event) for action in actions)

    def _feed(data: str) -> None:
        event = KeyEvent.parse(data)
        if event is not None and event.combo == "ctrl+c" and not _is_bound(event):
            finished.set_exception(AbortError("User force closed the prompt"))
            return

        if session.edit_mode:
            line.handle_input(data)

        transition = session.handle_key(event, line.value)
        if transition.line is not None:
            focused = session.current_field
            line.multiline = bool(focused and focused.multiline)
            line.set_value(transition.line)

        if transition.result is not None:
            finished.set_result(transition.result)
            return
        screen.render(session.render())

    def on_input(data: str) -> None:
        if finished.done():
            return
        try:
            _feed(data)
        except Exception as exc:
            logger.debug("aborting session: %r", exc)
            finished.set_exception(exc)

    try:
        term.start(on_input, screen.redraw)
        term.hide_cursor()
        screen.render(session.render())
        return await finished
    finally:
        screen.stop()
        term.stop()
