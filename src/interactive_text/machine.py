"""The navigate/edit state machine.

``handle_key_event`` is a pure transition function: it takes the resolved
configuration, the current :class:`SessionState`, one key event and the
host's raw input line, and returns a :class:`Transition` without touching
the state it was given. :class:`InteractiveText` wraps it for hosts that
prefer an object holding the current state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from interactive_text.actions import find_action
from interactive_text.config import InteractiveTextConfig, ResolvedConfig, resolve_config
from interactive_text.controls import Controls
from interactive_text.grid import field_at
from interactive_text.keys import KeyEvent
from interactive_text.navigation import DIRECTIONS, navigate
from interactive_text.renderer import render_legend, render_screen
from interactive_text.types import Field, Position, State
from interactive_text.validation import validate_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    values: Mapping[str, str]
    errors: Mapping[str, str] = field(default_factory=dict)
    position: Position = Position()
    edit_mode: bool = False
    edit_value: str = ""


@dataclass(frozen=True)
class Transition:
    """Outcome of one key event.

    ``line`` is what the host must put in its raw input line (``None`` leaves
    the line alone). ``result`` holds the final values once the session is
    finished.
    """

    state: SessionState
    line: str | None = None
    result: State | None = None

    @property
    def finished(self) -> bool:
        return self.result is not None


def initial_state(config: ResolvedConfig) -> SessionState:
    return SessionState(values=dict(config.initial_values))


def _controls(config: ResolvedConfig, state: SessionState) -> Controls:
    return Controls(
        config.grid,
        values=state.values,
        errors=state.errors,
        position=state.position,
        edit_mode=state.edit_mode,
        edit_value=state.edit_value,
    )


def _snapshot(controls: Controls) -> SessionState:
    return SessionState(
        values=dict(controls.state),
        errors=dict(controls.errors),
        position=controls.position,
        edit_mode=controls.edit_mode,
        edit_value=controls.edit_value,
    )


def handle_key_event(
    config: ResolvedConfig,
    state: SessionState,
    event: KeyEvent | None,
    line: str = "",
) -> Transition:
    """Compute the next state for one key event.

    In navigate mode arrow keys move the focus and nothing else is
    considered; other keys fire the first matching navigate action. In edit
    mode the first matching edit action fires, then, while still editing,
    *line* is transformed and validated into the edit buffer and error map.
    Validation is skipped when the action left edit mode or finished the
    session, so save and cancel never re-validate the discarded line.
    An *event* of ``None`` (input that is not a key, e.g. a paste) only
    refreshes the edit buffer.
    """
    if not state.edit_mode:
        if event is None:
            return Transition(state)
        if event.name in DIRECTIONS:
            position = navigate(config.grid, state.position, event.name)  # type: ignore[arg-type]
            return Transition(replace(state, position=position))

        action = find_action(config.navigate_actions, event)
        if action is None:
            return Transition(state)

        controls = _controls(config, state)
        action.trigger(controls)
        next_state = _snapshot(controls)
        seed = None
        if next_state.edit_mode:
            logger.debug("navigate -> edit on %r via %s", event.combo, action.name)
            seed = next_state.edit_value
        return Transition(next_state, seed, controls.result)

    controls = _controls(config, state)
    action = find_action(config.edit_actions, event) if event is not None else None
    if action is not None:
        action.trigger(controls)

    if controls.result is None and controls.edit_mode:
        value, errors = validate_input(line, controls.current_field, controls.errors)
        controls.edit_value = value
        controls.errors = errors

    next_state = _snapshot(controls)
    if next_state.edit_mode:
        return Transition(next_state, None, controls.result)

    logger.debug("edit -> navigate via %s", action.name if action else "callback")
    return Transition(next_state, "", controls.result)


class InteractiveText:
    """One prompt session: resolved configuration plus the current state."""

    def __init__(self, config: InteractiveTextConfig | ResolvedConfig | Mapping[str, Any]) -> None:
        self.config = config if isinstance(config, ResolvedConfig) else resolve_config(config)
        self.state = initial_state(self.config)
        self.result: State | None = None

    @property
    def edit_mode(self) -> bool:
        return self.state.edit_mode

    @property
    def current_field(self) -> Field | None:
        return field_at(self.config.grid, self.state.position)

    @property
    def finished(self) -> bool:
        return self.result is not None

    def handle_key(self, event: KeyEvent | None, line: str = "") -> Transition:
        if self.finished:
            raise RuntimeError("Session already finished")
        transition = handle_key_event(self.config, self.state, event, line)
        self.state = transition.state
        if transition.finished:
            self.result = transition.result
            logger.debug("session finished with %d value(s)", len(transition.result or {}))
        return transition

    def render(self) -> str:
        """The full frame for the current state."""
        state = self.state
        focused = self.current_field
        values: Mapping[str, str] = state.values
        if state.edit_mode and focused is not None:
            values = {**state.values, focused.id: state.edit_value}

        body = self.config.render(
            values,
            state.edit_mode,
            list(state.errors),
            focused.id if focused is not None else None,
        )
        actions = self.config.edit_actions if state.edit_mode else self.config.navigate_actions
        return render_screen(
            legend=render_legend(actions),
            body=body,
            errors=state.errors,
            edit_mode=state.edit_mode,
        )
