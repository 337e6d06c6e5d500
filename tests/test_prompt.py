"""Tests for the host adapter in interactive_text.prompt."""

from __future__ import annotations

import asyncio

import pytest

from interactive_text.config import InteractiveTextConfig
from interactive_text.prompt import AbortError, Screen, interactive_text
from interactive_text.renderer import CURSOR_HIDE
from interactive_text.types import ActionConfig, Field, RendererOpts

from .virtual_terminal import VirtualTerminal

ENTER = "\r"
ESCAPE = "\x1b"
ALT_ENTER = "\x1b\r"
RIGHT = "\x1b[C"
DOWN = "\x1b[B"
CTRL_C = "\x03"


def make_config(**overrides) -> InteractiveTextConfig:
    options = dict(
        fields=[[Field("name", required=True)], [Field("note", multiline=True)]],
        renderer=RendererOpts("{name}: {note}"),
    )
    options.update(overrides)
    return InteractiveTextConfig(**options)


async def start(config, term: VirtualTerminal) -> asyncio.Task:
    task = asyncio.create_task(interactive_text(config, terminal=term))
    # Let the session register its input handler
    await asyncio.sleep(0)
    return task


class TestScreen:
    """Screen repaints a frame in place."""

    def test_first_render_writes_frame(self) -> None:
        term = VirtualTerminal()
        Screen(term).render("a\nb")
        assert term.output.startswith("a\r\nb")

    def test_rerender_moves_up_and_clears(self) -> None:
        term = VirtualTerminal()
        screen = Screen(term)
        screen.render("one\n\nthree")
        term.clear_buffer()
        screen.render("x")
        assert term.output.startswith("\x1b[2A\r\x1b[0J")

    def test_wrapped_rows_are_counted(self) -> None:
        term = VirtualTerminal(columns=4)
        screen = Screen(term)
        screen.render("abcdefgh")
        term.clear_buffer()
        screen.render("x")
        assert term.output.startswith("\x1b[1A")

    def test_cursor_shown_unless_frame_hides_it(self) -> None:
        term = VirtualTerminal()
        screen = Screen(term)
        screen.render("edit")
        assert term.cursor_visible is True
        term.clear_buffer()
        screen.render("nav" + CURSOR_HIDE)
        assert "\x1b[?25h" not in term.output

    def test_redraw_repeats_last_frame(self) -> None:
        term = VirtualTerminal()
        screen = Screen(term)
        screen.render("frame")
        term.clear_buffer()
        screen.redraw()
        assert "frame" in term.output


class TestInteractiveText:
    """Full sessions driven through a virtual terminal."""

    @pytest.mark.asyncio
    async def test_fill_and_finish(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(), term)
        term.simulate_input(ENTER, "B", "o", "b", ENTER, ALT_ENTER)
        assert await task == {"name": "Bob", "note": ""}
        assert term.started is False
        assert term.cursor_visible is True

    @pytest.mark.asyncio
    async def test_initial_frame(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(initial_values={"name": "Ann"}), term)
        assert "Done (Alt+Enter) | Edit (Enter) | Remove (Del)" in term.output
        term.simulate_input(ALT_ENTER)
        assert await task == {"name": "Ann", "note": ""}

    @pytest.mark.asyncio
    async def test_done_refused_keeps_running(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(), term)
        term.simulate_input(ALT_ENTER)
        assert not task.done()
        assert "- [name] name is required" in term.output
        term.simulate_input(ENTER, "x", ENTER, ALT_ENTER)
        assert await task == {"name": "x", "note": ""}

    @pytest.mark.asyncio
    async def test_editing_starts_from_current_value(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(initial_values={"name": "Ann"}), term)
        term.simulate_input(ENTER, "\x7f", "a", ENTER, ALT_ENTER)
        assert await task == {"name": "Ana", "note": ""}

    @pytest.mark.asyncio
    async def test_cancel_restores_value(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(initial_values={"name": "Ann"}), term)
        term.simulate_input(ENTER, "x", "y", ESCAPE)
        # the lone escape is decoded directly, no stdin buffering here
        term.simulate_input(ALT_ENTER)
        assert await task == {"name": "Ann", "note": ""}

    @pytest.mark.asyncio
    async def test_multiline_field(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(initial_values={"name": "n"}), term)
        term.simulate_input(DOWN, ENTER, "a", ALT_ENTER, "b", ENTER, ALT_ENTER)
        assert await task == {"name": "n", "note": "a\nb"}

    @pytest.mark.asyncio
    async def test_paste_into_field(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(), term)
        term.simulate_input(ENTER, "\x1b[200~pasted\x1b[201~", ENTER, ALT_ENTER)
        assert await task == {"name": "pasted", "note": ""}

    @pytest.mark.asyncio
    async def test_ctrl_c_aborts(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(), term)
        term.simulate_input(CTRL_C)
        with pytest.raises(AbortError):
            await task
        assert term.started is False

    @pytest.mark.asyncio
    async def test_bound_ctrl_c_runs_action(self) -> None:
        def fill(controls) -> None:
            controls.state = {**controls.state, "name": "auto"}

        config = make_config(actions=[ActionConfig("navigate", "Fill", "ctrl+c", fill)])
        term = VirtualTerminal()
        task = await start(config, term)
        term.simulate_input(CTRL_C, ALT_ENTER)
        assert await task == {"name": "auto", "note": ""}

    @pytest.mark.asyncio
    async def test_callback_error_propagates(self) -> None:
        def boom(value: str) -> str | None:
            raise RuntimeError("validator exploded")

        config = make_config(fields=[[Field("name", validator=boom)]])
        term = VirtualTerminal()
        task = await start(config, term)
        term.simulate_input(ENTER, "x")
        with pytest.raises(RuntimeError, match="validator exploded"):
            await task
        assert term.started is False

    @pytest.mark.asyncio
    async def test_resize_redraws(self) -> None:
        term = VirtualTerminal()
        task = await start(make_config(initial_values={"name": "Ann"}), term)
        term.clear_buffer()
        term.simulate_resize(columns=40)
        assert "Ann" in term.output
        term.simulate_input(ALT_ENTER)
        await task

    @pytest.mark.asyncio
    async def test_accepts_mapping_config(self) -> None:
        term = VirtualTerminal()
        config = {"fields": [[{"id": "a"}]], "renderer": {"template": "{a}"}}
        task = await start(config, term)
        term.simulate_input(ENTER, "z", ENTER, ALT_ENTER)
        assert await task == {"a": "z"}


class FailingStartTerminal(VirtualTerminal):
    """Terminal whose start fails after it has registered its handlers."""

    def __init__(self) -> None:
        super().__init__()
        self.stop_calls = 0

    def start(self, on_input, on_resize) -> None:
        super().start(on_input, on_resize)
        raise OSError("no tty")

    def stop(self) -> None:
        self.stop_calls += 1
        super().stop()


class TestStartFailure:
    """A terminal that fails to start is still restored."""

    @pytest.mark.asyncio
    async def test_stop_runs_when_start_raises(self) -> None:
        term = FailingStartTerminal()
        with pytest.raises(OSError, match="no tty"):
            await interactive_text(make_config(), terminal=term)
        assert term.stop_calls == 1
        assert term.started is False
        assert term.cursor_visible is True
