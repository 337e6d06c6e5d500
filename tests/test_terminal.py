"""Tests for interactive_text.terminal.ProcessTerminal input dispatch."""

from __future__ import annotations

import io

from interactive_text.stdin_buffer import BRACKETED_PASTE_END, BRACKETED_PASTE_START
from interactive_text.terminal import KITTY_PUSH, ProcessTerminal


def make_terminal() -> tuple[ProcessTerminal, io.StringIO, list[str]]:
    output = io.StringIO()
    term = ProcessTerminal(output=output)
    received: list[str] = []
    # Wire handlers without touching a real tty
    term._on_input = received.append
    return term, output, received


class TestKittyProtocol:
    """The kitty query reply turns the protocol on instead of reaching the session."""

    def test_inactive_by_default(self) -> None:
        term, _, _ = make_terminal()
        assert term.kitty_protocol_active is False

    def test_reply_enables_protocol(self) -> None:
        term, output, received = make_terminal()
        term._dispatch("\x1b[?0u")
        assert term.kitty_protocol_active is True
        assert output.getvalue() == KITTY_PUSH
        assert received == []

    def test_repeated_reply_enables_once(self) -> None:
        term, output, _ = make_terminal()
        term._dispatch("\x1b[?1u")
        term._dispatch("\x1b[?1u")
        assert output.getvalue() == KITTY_PUSH


class TestDispatch:
    """Key sequences and pastes are forwarded to the input handler."""

    def test_keys_forwarded(self) -> None:
        term, _, received = make_terminal()
        term._dispatch("\x1b[A")
        term._dispatch("a")
        assert received == ["\x1b[A", "a"]

    def test_paste_rewrapped(self) -> None:
        term, _, received = make_terminal()
        term._dispatch_paste("hello")
        assert received == [BRACKETED_PASTE_START + "hello" + BRACKETED_PASTE_END]


class TestOutput:
    """Cursor movement writes CSI sequences."""

    def test_move_by(self) -> None:
        term, output, _ = make_terminal()
        term.move_by(-2)
        term.move_by(3)
        term.move_by(0)
        assert output.getvalue() == "\x1b[2A\x1b[3B"
