"""Core type definitions for interactive-text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Literal, Mapping, Sequence, Union

if TYPE_CHECKING:
    from interactive_text.controls import Controls

State = dict[str, str]
ErrorMap = dict[str, str]

Validator = Callable[[str], Union[str, None]]
Transformer = Callable[[str], str]
CustomAction = Callable[["Controls"], None]

Scope = Literal["edit", "navigate"]
Direction = Literal["up", "down", "left", "right"]

EditTag = Literal["save", "cancel"]
NavigateTag = Literal["edit", "remove", "done"]
BuiltinTag = Literal["save", "cancel", "edit", "remove", "done"]

StyleName = Literal[
    "red",
    "green",
    "yellow",
    "blue",
    "gray",
    "italic",
    "bold",
    "black",
    "white",
    "magenta",
    "cyan",
    "dim",
    "underline",
    "strikethrough",
]
StyleConfig = Union[str, Sequence[str], Callable[[str], str]]

RenderFn = Callable[[Mapping[str, str], bool, list[str], Union[str, None]], str]


@dataclass(frozen=True)
class Field:
    id: str
    label: str | None = None
    placeholder: str | None = None
    required: bool = False
    default_value: str | None = None
    validator: Validator | None = None
    transformer: Transformer | None = None
    multiline: bool = False


FieldGrid = Sequence[Sequence[Field]]


@dataclass(frozen=True)
class Position:
    row: int = 0
    col: int = 0


@dataclass(frozen=True)
class ActionConfig:
    """A user-declared key binding.

    ``action`` is either one of the builtin tags (``edit``, ``remove``,
    ``done`` for the navigate scope; ``save``, ``cancel`` for the edit scope)
    or a callback receiving the session :class:`Controls`.
    """

    scope: Scope
    name: str
    key: str
    action: BuiltinTag | CustomAction
    display_key: str | None = None
    label: str | None = None


@dataclass(frozen=True)
class RendererOpts:
    template: str
    error_style: StyleConfig | None = None
    selected_style: StyleConfig | None = None
    editing_style: StyleConfig | None = None


Renderer = Union[RendererOpts, RenderFn]


# ---------------------------------------------------------------------------
# Dict coercion (JSON-shaped, camelCase keys)
# ---------------------------------------------------------------------------

_FIELD_KEYS = {
    "id": "id",
    "label": "label",
    "placeholder": "placeholder",
    "required": "required",
    "defaultValue": "default_value",
    "default_value": "default_value",
    "validator": "validator",
    "transformer": "transformer",
    "multiline": "multiline",
}

_ACTION_KEYS = {
    "scope": "scope",
    "name": "name",
    "key": "key",
    "action": "action",
    "displayKey": "display_key",
    "display_key": "display_key",
    "label": "label",
}

_RENDERER_KEYS = {
    "template": "template",
    "errorStyle": "error_style",
    "error_style": "error_style",
    "selectedStyle": "selected_style",
    "selected_style": "selected_style",
    "editingStyle": "editing_style",
    "editing_style": "editing_style",
}


def _translate(kind: str, data: Mapping[str, Any], names: dict[str, str]) -> dict[str, Any]:
    unknown = [key for key in data if key not in names]
    if unknown:
        raise ValueError(f"Unknown {kind} option(s): {', '.join(sorted(unknown))}")
    return {names[key]: value for key, value in data.items()}


def field_from_dict(data: Field | Mapping[str, Any]) -> Field:
    """Coerce a field definition given as a dict into a :class:`Field`."""
    if isinstance(data, Field):
        return data
    kwargs = _translate("field", data, _FIELD_KEYS)
    if not kwargs.get("id"):
        raise ValueError(f"Field definition without an id: {dict(data)!r}")
    return Field(**kwargs)


def action_config_from_dict(data: ActionConfig | Mapping[str, Any]) -> ActionConfig:
    """Coerce an action definition given as a dict into an :class:`ActionConfig`."""
    if isinstance(data, ActionConfig):
        return data
    kwargs = _translate("action", data, _ACTION_KEYS)
    missing = [key for key in ("scope", "name", "key", "action") if key not in kwargs]
    if missing:
        raise ValueError(f"Action definition missing {', '.join(missing)}: {dict(data)!r}")
    return ActionConfig(**kwargs)


def renderer_from_dict(data: Renderer | Mapping[str, Any]) -> Renderer:
    """Coerce a renderer given as a dict into :class:`RendererOpts`."""
    if isinstance(data, RendererOpts) or callable(data):
        return data
    kwargs = _translate("renderer", data, _RENDERER_KEYS)
    if "template" not in kwargs:
        raise ValueError("Renderer options require a template")
    return RendererOpts(**kwargs)
