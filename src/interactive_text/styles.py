"""Named ANSI text styles and style-config resolution."""

from __future__ import annotations

from typing import Callable

from interactive_text.types import StyleConfig

StyleFn = Callable[[str], str]

# name -> (open, close) SGR codes
_SGR_CODES: dict[str, tuple[int, int]] = {
    "bold": (1, 22),
    "dim": (2, 22),
    "italic": (3, 23),
    "underline": (4, 24),
    "strikethrough": (9, 29),
    "black": (30, 39),
    "red": (31, 39),
    "green": (32, 39),
    "yellow": (33, 39),
    "blue": (34, 39),
    "magenta": (35, 39),
    "cyan": (36, 39),
    "white": (37, 39),
    "gray": (90, 39),
}


def _make_style(open_code: int, close_code: int) -> StyleFn:
    open_seq = f"\x1b[{open_code}m"
    close_seq = f"\x1b[{close_code}m"

    def apply(text: str) -> str:
        # Re-open after any nested close of the same kind
        return open_seq + text.replace(close_seq, close_seq + open_seq) + close_seq

    return apply


STYLES: dict[str, StyleFn] = {
    name: _make_style(open_code, close_code)
    for name, (open_code, close_code) in _SGR_CODES.items()
}

DEFAULT_ERROR_STYLE: StyleConfig = ("italic", "red")
DEFAULT_EDITING_STYLE: StyleConfig = ("italic", "gray")
DEFAULT_SELECTED_STYLE: StyleConfig = "blue"


def parse_style(style: StyleConfig) -> StyleFn:
    """Resolve a style name, list of names, or function into ``str -> str``.

    Listed styles are applied left to right, each wrapping the previous
    output. Raises ``ValueError`` for an unknown name.
    """
    if callable(style):
        return style

    names = [style] if isinstance(style, str) else list(style)
    unknown = [name for name in names if name not in STYLES]
    if unknown:
        raise ValueError(
            f"Unknown style(s) {', '.join(map(repr, unknown))}; "
            f"expected one of {', '.join(sorted(STYLES))}"
        )
    fns = [STYLES[name] for name in names]

    def apply(text: str) -> str:
        for fn in fns:
            text = fn(text)
        return text

    return apply


red = STYLES["red"]
