"""Session configuration: the caller-facing options and their resolved form.

Configuration is resolved once per session. Field placeholders, the field
lookup, the action registry and the render function are all derived here
and never recomputed per keystroke.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from interactive_text.actions import Action, parse_actions
from interactive_text.grid import Grid, fields_by_id, initial_values, resolve_grid
from interactive_text.renderer import resolve_renderer
from interactive_text.types import ActionConfig, Field, Renderer, RenderFn, State


@dataclass
class InteractiveTextConfig:
    fields: Sequence[Sequence[Field | Mapping[str, Any]]]
    renderer: Renderer | Mapping[str, Any]
    initial_values: Mapping[str, str] | None = None
    actions: Sequence[ActionConfig | Mapping[str, Any]] | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    grid: Grid
    fields: Mapping[str, Field]
    edit_actions: tuple[Action, ...]
    navigate_actions: tuple[Action, ...]
    render: RenderFn
    initial_values: State


_CONFIG_KEYS = {
    "fields": "fields",
    "renderer": "renderer",
    "initialValues": "initial_values",
    "initial_values": "initial_values",
    "actions": "actions",
}


def config_from_dict(data: Mapping[str, Any]) -> InteractiveTextConfig:
    """Build a config from a mapping using the camelCase option names."""
    unknown = [key for key in data if key not in _CONFIG_KEYS]
    if unknown:
        raise ValueError(f"Unknown config option(s): {', '.join(sorted(unknown))}")
    kwargs = {_CONFIG_KEYS[key]: value for key, value in data.items()}
    if "fields" not in kwargs:
        raise ValueError("Config requires fields")
    if "renderer" not in kwargs:
        raise ValueError("Config requires a renderer")
    return InteractiveTextConfig(**kwargs)


def resolve_config(config: InteractiveTextConfig | Mapping[str, Any]) -> ResolvedConfig:
    """Derive the immutable session configuration.

    Raises ``ValueError`` for any configuration error: bad grid, duplicate
    ids, malformed key combos, misplaced builtin tags, unknown styles.
    """
    if not isinstance(config, InteractiveTextConfig):
        config = config_from_dict(config)

    grid = resolve_grid(config.fields)
    fields = fields_by_id(grid)
    parsed = parse_actions(config.actions, grid=grid)
    return ResolvedConfig(
        grid=grid,
        fields=fields,
        edit_actions=parsed.edit_actions,
        navigate_actions=parsed.navigate_actions,
        render=resolve_renderer(config.renderer, fields),
        initial_values=initial_values(grid, config.initial_values),
    )


def load_form(path: str | Path) -> InteractiveTextConfig:
    """Read a JSON form definition.

    The file holds the mapping form of the config; a top-level ``template``
    string is shorthand for ``{"renderer": {"template": ...}}``.
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path}: form definition must be a JSON object")
    if "template" in data:
        if "renderer" in data:
            raise ValueError(f"{path}: give either template or renderer, not both")
        data["renderer"] = {"template": data.pop("template")}
    return config_from_dict(data)
