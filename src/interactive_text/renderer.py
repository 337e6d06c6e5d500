"""Rendering: template interpolation with field-aware styling, and the frame layout.

A renderer is resolved once into a function
``(values, edit_mode, error_field_ids, focused_field_id) -> str``.

Template placeholders are ``{field_id}``. Each is replaced by the field's
value, or its placeholder text when the value is empty, and styled by
priority: error style (editing the focused field while it has an error),
editing style (editing the focused field), selected style (focused field).
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from interactive_text.styles import (
    DEFAULT_EDITING_STYLE,
    DEFAULT_ERROR_STYLE,
    DEFAULT_SELECTED_STYLE,
    parse_style,
    red,
)
from interactive_text.types import (
    Field,
    Renderer,
    RendererOpts,
    RenderFn,
    StyleConfig,
    renderer_from_dict,
)

CURSOR_HIDE = "\x1b[?25l"
LEGEND_SEPARATOR = " | "

_PLACEHOLDER_RE = re.compile(r"{(\w+)}")


def _or_default(style: StyleConfig | None, default: StyleConfig) -> StyleConfig:
    return default if style is None else style


def template_renderer(opts: RendererOpts, fields: Mapping[str, Field]) -> RenderFn:
    editing_style = parse_style(_or_default(opts.editing_style, DEFAULT_EDITING_STYLE))
    selected_style = parse_style(_or_default(opts.selected_style, DEFAULT_SELECTED_STYLE))
    error_style = parse_style(_or_default(opts.error_style, DEFAULT_ERROR_STYLE))
    template = opts.template

    def render(
        values: Mapping[str, str],
        edit_mode: bool,
        error_fields: list[str],
        focused_field: str | None = None,
    ) -> str:
        def substitute(match: re.Match[str]) -> str:
            field_id = match.group(1)
            value = values.get(field_id)
            if value:
                text = str(value)
            else:
                field = fields.get(field_id)
                text = field.placeholder if field and field.placeholder else field_id

            is_focused = field_id == focused_field
            if edit_mode and is_focused and field_id in error_fields:
                return error_style(text)
            if edit_mode and is_focused:
                return editing_style(text)
            if is_focused:
                return selected_style(text)
            return text

        return _PLACEHOLDER_RE.sub(substitute, template)

    return render


def resolve_renderer(
    renderer: Renderer | Mapping[str, Any],
    fields: Mapping[str, Field],
) -> RenderFn:
    """Template options become a styled template renderer; functions pass through."""
    resolved = renderer_from_dict(renderer)
    if isinstance(resolved, RendererOpts):
        return template_renderer(resolved, fields)
    return resolved


# ---------------------------------------------------------------------------
# Frame layout
# ---------------------------------------------------------------------------


def render_legend(actions: Sequence[object]) -> str:
    return LEGEND_SEPARATOR.join(str(action) for action in actions)


def render_errors(errors: Mapping[str, str]) -> str:
    """Trailing error list, empty when there are no errors."""
    message = "\n".join(f"- [{field_id}] {error}" for field_id, error in errors.items())
    return f"\n\n{red(message)}" if message else ""


def render_screen(
    *,
    legend: str,
    body: str,
    errors: Mapping[str, str],
    edit_mode: bool,
) -> str:
    """Legend, blank line, body, error list; cursor hidden outside edit mode."""
    text = f"{legend}\n\n{body}{render_errors(errors)}"
    if edit_mode:
        return text
    return text + CURSOR_HIDE
