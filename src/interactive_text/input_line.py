"""InputLine - the raw line buffer the host keeps while a field is being edited."""

from __future__ import annotations

from interactive_text.keybindings import LineKeybindingsManager, get_line_keybindings
from interactive_text.utils import graphemes, is_punctuation_char, is_whitespace_char

_PASTE_START = "\x1b[200~"
_PASTE_END = "\x1b[201~"


class InputLine:
    """Editable line of text with a grapheme-aware cursor.

    Keys it does not understand (enter, escape, arrows up/down, tab...) leave
    the value untouched so the state machine can act on them.
    """

    def __init__(
        self,
        *,
        multiline: bool = False,
        keybindings: LineKeybindingsManager | None = None,
    ) -> None:
        self._value: str = ""
        self._cursor: int = 0
        self.multiline = multiline
        self._keybindings = keybindings

        # Bracketed paste mode
        self._paste_buffer: str = ""
        self._is_in_paste: bool = False

    @property
    def value(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    def set_value(self, value: str) -> None:
        """Replace the line and put the cursor at its end."""
        self._value = value
        self._cursor = len(value)

    def clear(self) -> None:
        self.set_value("")

    def handle_input(self, data: str) -> None:  # noqa: C901
        if _PASTE_START in data:
            self._is_in_paste = True
            self._paste_buffer = ""
            data = data.replace(_PASTE_START, "")

        if self._is_in_paste:
            self._paste_buffer += data
            end_index = self._paste_buffer.find(_PASTE_END)
            if end_index != -1:
                paste_content = self._paste_buffer[:end_index]
                remaining = self._paste_buffer[end_index + len(_PASTE_END):]
                self._is_in_paste = False
                self._paste_buffer = ""
                self._handle_paste(paste_content)
                if remaining:
                    self.handle_input(remaining)
            return

        kb = self._keybindings or get_line_keybindings()

        if kb.matches(data, "newLine"):
            if self.multiline:
                self._insert("\n")
            return

        if kb.matches(data, "deleteCharBackward"):
            self._handle_backspace()
            return

        if kb.matches(data, "deleteCharForward"):
            self._handle_forward_delete()
            return

        if kb.matches(data, "deleteWordBackward"):
            self._delete_word_backwards()
            return

        if kb.matches(data, "deleteWordForward"):
            self._delete_word_forward()
            return

        if kb.matches(data, "deleteToLineStart"):
            self._value = self._value[self._cursor:]
            self._cursor = 0
            return

        if kb.matches(data, "deleteToLineEnd"):
            self._value = self._value[: self._cursor]
            return

        if kb.matches(data, "cursorLeft"):
            if self._cursor > 0:
                self._cursor -= len(graphemes(self._value[: self._cursor])[-1])
            return

        if kb.matches(data, "cursorRight"):
            if self._cursor < len(self._value):
                self._cursor += len(graphemes(self._value[self._cursor:])[0])
            return

        if kb.matches(data, "cursorLineStart"):
            self._cursor = 0
            return

        if kb.matches(data, "cursorLineEnd"):
            self._cursor = len(self._value)
            return

        if kb.matches(data, "cursorWordLeft"):
            self._move_word_backwards()
            return

        if kb.matches(data, "cursorWordRight"):
            self._move_word_forwards()
            return

        # Regular character input
        has_control = any(
            ord(ch) < 32 or ord(ch) == 0x7F or (0x80 <= ord(ch) <= 0x9F)
            for ch in data
        )
        if not has_control:
            self._insert(data)

    def _insert(self, text: str) -> None:
        self._value = self._value[: self._cursor] + text + self._value[self._cursor:]
        self._cursor += len(text)

    def _handle_backspace(self) -> None:
        if self._cursor == 0:
            return
        width = len(graphemes(self._value[: self._cursor])[-1])
        self._value = self._value[: self._cursor - width] + self._value[self._cursor:]
        self._cursor -= width

    def _handle_forward_delete(self) -> None:
        if self._cursor >= len(self._value):
            return
        width = len(graphemes(self._value[self._cursor:])[0])
        self._value = self._value[: self._cursor] + self._value[self._cursor + width:]

    def _delete_word_backwards(self) -> None:
        if self._cursor == 0:
            return
        end = self._cursor
        self._move_word_backwards()
        self._value = self._value[: self._cursor] + self._value[end:]

    def _delete_word_forward(self) -> None:
        if self._cursor >= len(self._value):
            return
        start = self._cursor
        self._move_word_forwards()
        self._value = self._value[:start] + self._value[self._cursor:]
        self._cursor = start

    def _move_word_backwards(self) -> None:
        chars = graphemes(self._value[: self._cursor])

        # Skip trailing whitespace
        while chars and is_whitespace_char(chars[-1]):
            self._cursor -= len(chars.pop())

        if chars and is_punctuation_char(chars[-1]):
            while chars and is_punctuation_char(chars[-1]):
                self._cursor -= len(chars.pop())
        else:
            while (
                chars
                and not is_whitespace_char(chars[-1])
                and not is_punctuation_char(chars[-1])
            ):
                self._cursor -= len(chars.pop())

    def _move_word_forwards(self) -> None:
        chars = graphemes(self._value[self._cursor:])
        idx = 0

        # Skip leading whitespace
        while idx < len(chars) and is_whitespace_char(chars[idx]):
            self._cursor += len(chars[idx])
            idx += 1

        if idx < len(chars) and is_punctuation_char(chars[idx]):
            while idx < len(chars) and is_punctuation_char(chars[idx]):
                self._cursor += len(chars[idx])
                idx += 1
        else:
            while (
                idx < len(chars)
                and not is_whitespace_char(chars[idx])
                and not is_punctuation_char(chars[idx])
            ):
                self._cursor += len(chars[idx])
                idx += 1

    def _handle_paste(self, pasted_text: str) -> None:
        text = pasted_text.replace("\r\n", "\n").replace("\r", "\n")
        if not self.multiline:
            text = text.replace("\n", "")
        self._insert(text)
