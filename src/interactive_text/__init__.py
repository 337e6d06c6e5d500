"""interactive-text: grid-of-fields text composition for terminal prompts."""

# Actions
from interactive_text.actions import (
    Action,
    ParsedActions,
    cancel_action,
    done_action,
    edit_action,
    make_action,
    parse_actions,
    remove_action,
    save_action,
)

# Configuration
from interactive_text.config import (
    InteractiveTextConfig,
    ResolvedConfig,
    config_from_dict,
    load_form,
    resolve_config,
)

# Controls surface
from interactive_text.controls import Controls

# Host input line
from interactive_text.input_line import InputLine

# Line keybindings
from interactive_text.keybindings import (
    LineKeybindingsManager,
    get_line_keybindings,
    set_line_keybindings,
)

# Keys
from interactive_text.keys import KeyEvent, format_key_label, normalize_key_combo, parse_key

# State machine
from interactive_text.machine import (
    InteractiveText,
    SessionState,
    Transition,
    handle_key_event,
    initial_state,
)

# Navigation
from interactive_text.navigation import navigate

# Host adapter
from interactive_text.prompt import AbortError, Screen, interactive_text

# Rendering
from interactive_text.renderer import render_screen, resolve_renderer
from interactive_text.styles import STYLES, parse_style

# Terminal
from interactive_text.terminal import ProcessTerminal, Terminal

# Types
from interactive_text.types import (
    ActionConfig,
    Field,
    FieldGrid,
    Position,
    RendererOpts,
)

# Validation
from interactive_text.validation import validate_fields, validate_input

__all__ = [
    # Actions
    "Action",
    "ParsedActions",
    "cancel_action",
    "done_action",
    "edit_action",
    "make_action",
    "parse_actions",
    "remove_action",
    "save_action",
    # Configuration
    "InteractiveTextConfig",
    "ResolvedConfig",
    "config_from_dict",
    "load_form",
    "resolve_config",
    # Controls
    "Controls",
    # Input line
    "InputLine",
    # Line keybindings
    "LineKeybindingsManager",
    "get_line_keybindings",
    "set_line_keybindings",
    # Keys
    "KeyEvent",
    "format_key_label",
    "normalize_key_combo",
    "parse_key",
    # State machine
    "InteractiveText",
    "SessionState",
    "Transition",
    "handle_key_event",
    "initial_state",
    # Navigation
    "navigate",
    # Host adapter
    "AbortError",
    "Screen",
    "interactive_text",
    # Rendering
    "STYLES",
    "parse_style",
    "render_screen",
    "resolve_renderer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Types
    "ActionConfig",
    "Field",
    "FieldGrid",
    "Position",
    "RendererOpts",
    # Validation
    "validate_fields",
    "validate_input",
]
