"""Line-editing keybindings for the host input line."""

from __future__ import annotations

from typing import Literal

from interactive_text.keys import KeyId, normalize_key_combo, parse_key

LineAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteWordForward",
    "deleteToLineStart",
    "deleteToLineEnd",
    # Text input
    "newLine",
]

LineKeybindingsConfig = dict[LineAction, KeyId | list[KeyId]]

DEFAULT_LINE_KEYBINDINGS: dict[LineAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorWordLeft": ["alt+left", "ctrl+left", "alt+b"],
    "cursorWordRight": ["alt+right", "ctrl+right", "alt+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": "backspace",
    "deleteCharForward": ["delete", "ctrl+d"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteWordForward": ["alt+d", "alt+delete"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
    # Text input
    "newLine": ["shift+enter", "alt+enter"],
}


class LineKeybindingsManager:
    """Maps raw input to line-editing actions."""

    def __init__(self, config: LineKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[LineAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: LineKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        # Defaults first, user config replaces whole entries
        for source in (DEFAULT_LINE_KEYBINDINGS, config):
            for action, keys in source.items():
                key_array = keys if isinstance(keys, list) else [keys]
                self._action_to_keys[action] = [normalize_key_combo(k) for k in key_array]

    def matches(self, data: str, action: LineAction) -> bool:
        """Check if raw input corresponds to *action*."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return parse_key(data) in keys

    def get_keys(self, action: LineAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: LineKeybindingsConfig) -> None:
        self._build_maps(config)


_global_line_keybindings: LineKeybindingsManager | None = None


def get_line_keybindings() -> LineKeybindingsManager:
    global _global_line_keybindings
    if _global_line_keybindings is None:
        _global_line_keybindings = LineKeybindingsManager()
    return _global_line_keybindings


def set_line_keybindings(manager: LineKeybindingsManager) -> None:
    global _global_line_keybindings
    _global_line_keybindings = manager
