"""Tests for interactive_text.renderer and interactive_text.styles."""

from __future__ import annotations

import pytest

from interactive_text.grid import fields_by_id, resolve_grid
from interactive_text.renderer import (
    CURSOR_HIDE,
    render_errors,
    render_legend,
    render_screen,
    resolve_renderer,
)
from interactive_text.styles import STYLES, parse_style
from interactive_text.types import Field, RendererOpts

ITALIC_GRAY = "\x1b[90m\x1b[3m{}\x1b[23m\x1b[39m"
ITALIC_RED = "\x1b[31m\x1b[3m{}\x1b[23m\x1b[39m"
BLUE = "\x1b[34m{}\x1b[39m"


@pytest.fixture
def fields():
    grid = resolve_grid(
        [[Field("type", required=True), Field("scope"), Field("subject", required=True)]]
    )
    return fields_by_id(grid)


class TestStyles:
    """Named styles and style configs."""

    def test_named_style(self) -> None:
        assert STYLES["red"]("x") == "\x1b[31mx\x1b[39m"

    def test_list_applies_left_to_right(self) -> None:
        assert parse_style(["italic", "gray"])("x") == ITALIC_GRAY.format("x")

    def test_single_name(self) -> None:
        assert parse_style("blue")("x") == BLUE.format("x")

    def test_function_passes_through(self) -> None:
        fn = str.upper
        assert parse_style(fn) is fn

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown style"):
            parse_style(["italic", "sparkly"])

    def test_nested_same_kind_reopens(self) -> None:
        inner = STYLES["red"]("b")
        assert STYLES["blue"]("a" + inner + "c") == (
            "\x1b[34ma\x1b[31mb\x1b[39m\x1b[34mc\x1b[39m"
        )


class TestTemplateRenderer:
    """Template placeholders are filled and styled by priority."""

    def test_placeholders_for_empty_values(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type}({scope}): {subject}"), fields)
        values = {"type": "feat", "scope": "", "subject": "fix bug"}
        assert render(values, False, [], None) == "feat(scope?): fix bug"

    def test_unknown_placeholder_shows_id(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type} {ticket}"), fields)
        assert render({"type": "feat"}, False, [], None) == "feat ticket"

    def test_selected_style(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type}: {subject}"), fields)
        out = render({"type": "feat", "subject": "x"}, False, [], "type")
        assert out == BLUE.format("feat") + ": x"

    def test_editing_style(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type}"), fields)
        assert render({"type": "fe"}, True, [], "type") == ITALIC_GRAY.format("fe")

    def test_error_style_wins_while_editing(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type}"), fields)
        assert render({"type": "no"}, True, ["type"], "type") == ITALIC_RED.format("no")

    def test_error_style_only_in_edit_mode(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type}"), fields)
        assert render({"type": "no"}, False, ["type"], "type") == BLUE.format("no")

    def test_unfocused_error_field_is_plain(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type} {subject}"), fields)
        assert render({"type": "no", "subject": "s"}, True, ["type"], "subject") == (
            "no " + ITALIC_GRAY.format("s")
        )

    def test_custom_styles(self, fields) -> None:
        opts = RendererOpts(
            "{type}",
            selected_style=lambda text: f"[{text}]",
            editing_style="bold",
            error_style=["underline"],
        )
        render = resolve_renderer(opts, fields)
        assert render({"type": "a"}, False, [], "type") == "[a]"
        assert render({"type": "a"}, True, [], "type") == "\x1b[1ma\x1b[22m"
        assert render({"type": "a"}, True, ["type"], "type") == "\x1b[4ma\x1b[24m"

    def test_empty_style_list_disables_styling(self, fields) -> None:
        render = resolve_renderer(RendererOpts("{type}", selected_style=[]), fields)
        assert render({"type": "a"}, False, [], "type") == "a"

    def test_unknown_style_fails_at_resolve_time(self, fields) -> None:
        with pytest.raises(ValueError):
            resolve_renderer(RendererOpts("{type}", selected_style="sparkly"), fields)

    def test_mapping_form(self, fields) -> None:
        render = resolve_renderer({"template": "{scope}", "selectedStyle": []}, fields)
        assert render({"scope": ""}, False, [], "scope") == "scope?"


class TestFunctionRenderer:
    """Function renderers are called as given."""

    def test_called_with_session_arguments(self, fields) -> None:
        calls = []

        def render(values, edit_mode, error_fields, focused):
            calls.append((dict(values), edit_mode, list(error_fields), focused))
            return "custom"

        resolved = resolve_renderer(render, fields)
        assert resolved({"type": "x"}, True, ["type"], "type") == "custom"
        assert calls == [({"type": "x"}, True, ["type"], "type")]


class TestFrame:
    """Legend, body and error list layout."""

    def test_legend(self) -> None:
        assert render_legend(["Done (Alt+Enter)", "Edit (Enter)"]) == (
            "Done (Alt+Enter) | Edit (Enter)"
        )

    def test_no_errors(self) -> None:
        assert render_errors({}) == ""

    def test_errors(self) -> None:
        out = render_errors({"type": "bad", "subject": "subject is required"})
        assert out == "\n\n" + STYLES["red"]("- [type] bad\n- [subject] subject is required")

    def test_navigate_frame_hides_cursor(self) -> None:
        frame = render_screen(legend="L", body="B", errors={}, edit_mode=False)
        assert frame == "L\n\nB" + CURSOR_HIDE

    def test_edit_frame_keeps_cursor(self) -> None:
        frame = render_screen(legend="L", body="B", errors={"a": "x"}, edit_mode=True)
        assert frame == "L\n\nB\n\n" + STYLES["red"]("- [a] x")
        assert CURSOR_HIDE not in frame
