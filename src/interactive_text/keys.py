"""Keyboard input parsing and key-combo normalisation.

Decodes raw terminal input (legacy xterm sequences, modifier-encoded CSI
sequences, ``modifyOtherKeys`` and the kitty ``CSI u`` protocol) into key
identifiers such as ``"ctrl+a"`` or ``"alt+enter"``, and turns both those
identifiers and user-written combos into one canonical form so they can be
compared with ``==``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Canonical modifier order in a combo string
MODIFIER_ORDER: tuple[str, ...] = ("ctrl", "shift", "alt")

MODIFIER_BITS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

LOCK_MASK = 64 + 128

MODIFIER_ALIASES: dict[str, str] = {
    "control": "ctrl",
    "meta": "alt",
    "option": "alt",
    "opt": "alt",
}

KEY_ALIASES: dict[str, str] = {
    "return": "enter",
    "esc": "escape",
    "del": "delete",
    "ins": "insert",
    "pgup": "pageup",
    "pgdown": "pagedown",
    "spacebar": "space",
}

_LABEL_NAMES: dict[str, str] = {
    "escape": "Esc",
    "delete": "Del",
    "pageup": "PageUp",
    "pagedown": "PageDown",
}

# Unmodified legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[E": "clear",
    "\x1b[Z": "shift+tab",
}

# Final byte of ``CSI 1;<mod> X`` sequences
_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# Numeric parameter of ``CSI <n>(;<mod>)? ~`` sequences
_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageup",
    6: "pagedown",
    7: "home",
    8: "end",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

# Kitty protocol codepoints that do not map to a printable character
_KITTY_CODEPOINTS: dict[int, str] = {
    9: "tab",
    13: "enter",
    27: "escape",
    32: "space",
    127: "backspace",
    57414: "enter",  # keypad enter
}

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# CSI u: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::\d*)*(?:;(\d+)(?::(\d+))?)?u$"
)

# \x1b[1;<modifier>(:<event>)?<letter>
_CSI_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHFPQRS])$")

# \x1b[<number>(;<modifier>(:<event>)?)?~
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+)(?::(\d+))?)?~$")

# modifyOtherKeys: \x1b[27;<modifier>;<keycode>~
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")


# ---------------------------------------------------------------------------
# Raw input -> key identifier
# ---------------------------------------------------------------------------


def _modifier_prefix(modifier: int) -> str:
    mod = (modifier - 1) & ~LOCK_MASK
    prefix = ""
    if mod & MODIFIER_BITS["ctrl"]:
        prefix += "ctrl+"
    if mod & MODIFIER_BITS["shift"]:
        prefix += "shift+"
    if mod & MODIFIER_BITS["alt"]:
        prefix += "alt+"
    return prefix


def _codepoint_key(codepoint: int) -> str | None:
    name = _KITTY_CODEPOINTS.get(codepoint)
    if name is not None:
        return name
    if codepoint > 0:
        ch = chr(codepoint)
        if ch.isprintable():
            return ch.lower()
    return None


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Parse raw terminal input and return the key identifier, or ``None``.

    The identifier lists modifiers in ``ctrl+shift+alt+`` order followed by
    the lowercase key name, e.g. ``"a"``, ``"ctrl+a"``, ``"alt+enter"``.
    """
    if not data:
        return None

    # --- Kitty protocol ---
    match = _KITTY_CSI_U_RE.match(data)
    if match:
        key = _codepoint_key(int(match.group(1)))
        if key is None:
            return None
        return _modifier_prefix(int(match.group(2) or 1)) + key

    # --- modifyOtherKeys ---
    match = _MODIFY_OTHER_KEYS_RE.match(data)
    if match:
        key = _codepoint_key(int(match.group(2)))
        if key is None:
            return None
        return _modifier_prefix(int(match.group(1))) + key

    # --- Modified arrows / home / end / F1-F4 ---
    match = _CSI_MODIFIED_LETTER_RE.match(data)
    if match:
        return _modifier_prefix(int(match.group(1))) + _CSI_LETTER_KEYS[match.group(3)]

    # --- Tilde sequences, optionally modified ---
    match = _CSI_TILDE_RE.match(data)
    if match:
        key = _CSI_TILDE_KEYS.get(int(match.group(1)))
        if key is None:
            return None
        return _modifier_prefix(int(match.group(2) or 1)) + key

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\x1b":
            return "alt+escape"
        if ch in ("\r", "\n"):
            return "alt+enter"
        if ch == "\t":
            return "alt+tab"
        if ch == " ":
            return "alt+space"
        if ch in ("\x7f", "\x08"):
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isupper():
            return "shift+alt+" + ch.lower()
        if ch.isprintable():
            return "alt+" + ch

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        if data.isupper():
            return "shift+" + data.lower()
        return data

    return None


# ---------------------------------------------------------------------------
# Combo normalisation
# ---------------------------------------------------------------------------


def normalize_key_combo(key: str) -> KeyId:
    """Turn a user-written key combo into canonical form.

    ``"Alt + Return"`` becomes ``"alt+enter"``, ``"shift+ctrl+S"`` becomes
    ``"ctrl+shift+s"``. Raises ``ValueError`` for malformed combos.
    """
    compact = re.sub(r"\s", "", key).lower()
    if not compact:
        raise ValueError(f"Empty key combination: {key!r}")

    # A literal "+" is allowed as the base key ("+" or "ctrl++")
    if compact == "+":
        head, base = "", "+"
    elif compact.endswith("++"):
        head, base = compact[:-2], "+"
    else:
        head, _, base = compact.rpartition("+")

    if not base:
        raise ValueError(f"Key combination {key!r} has no key")

    base = KEY_ALIASES.get(base, base)
    if MODIFIER_ALIASES.get(base, base) in MODIFIER_BITS:
        raise ValueError(f"Key combination {key!r} has only modifiers")

    modifiers: set[str] = set()
    for part in head.split("+") if head else []:
        if not part:
            raise ValueError(f"Key combination {key!r} has an empty segment")
        modifier = MODIFIER_ALIASES.get(part, part)
        if modifier not in MODIFIER_BITS:
            raise ValueError(
                f"Key combination {key!r} has more than one key ({part!r} is not a modifier)"
            )
        if modifier in modifiers:
            raise ValueError(f"Key combination {key!r} repeats modifier {modifier!r}")
        modifiers.add(modifier)

    ordered = [m for m in MODIFIER_ORDER if m in modifiers]
    return "+".join([*ordered, base])


def format_key_label(combo: KeyId) -> str:
    """Human-readable label for a canonical combo, e.g. ``"(Alt+Enter)"``."""
    if combo.endswith("++"):
        parts = [*combo[:-2].split("+"), "+"]
    elif combo == "+":
        parts = ["+"]
    else:
        parts = combo.split("+")
    names = [_LABEL_NAMES.get(part, part[:1].upper() + part[1:]) for part in parts]
    return f"({'+'.join(names)})"


# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A single key press as delivered by the host runtime."""

    name: str
    ctrl: bool = False
    shift: bool = False
    meta: bool = False
    sequence: str = ""

    @property
    def combo(self) -> KeyId:
        """Candidate combo string built from the modifier flags and key name."""
        keys = []
        if self.ctrl:
            keys.append("ctrl")
        if self.shift:
            keys.append("shift")
        if self.meta:
            keys.append("alt")
        name = self.name.lower()
        keys.append(KEY_ALIASES.get(name, name))
        return "+".join(keys)

    @classmethod
    def from_key_id(cls, key_id: KeyId, sequence: str = "") -> KeyEvent:
        """Build an event from an identifier such as ``"ctrl+shift+a"``."""
        flags = {"ctrl": False, "shift": False, "alt": False}
        rest = key_id
        while True:
            for modifier in MODIFIER_ORDER:
                prefix = modifier + "+"
                if rest.startswith(prefix) and len(rest) > len(prefix):
                    flags[modifier] = True
                    rest = rest[len(prefix):]
                    break
            else:
                break
        if len(rest) == 1 and rest.isupper():
            flags["shift"] = True
            rest = rest.lower()
        return cls(
            name=rest,
            ctrl=flags["ctrl"],
            shift=flags["shift"],
            meta=flags["alt"],
            sequence=sequence,
        )

    @classmethod
    def parse(cls, data: str) -> KeyEvent | None:
        """Decode raw terminal input; ``None`` when it is not a known key."""
        key_id = parse_key(data)
        if key_id is None:
            return None
        return cls.from_key_id(key_id, sequence=data)
