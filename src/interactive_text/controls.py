"""The narrow control surface handed to actions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from interactive_text.grid import field_at, find_position
from interactive_text.types import ErrorMap, Field, FieldGrid, Position, State


class Controls:
    """Read/write access to one session's state for the duration of a key event.

    Mappings are exposed read-only; replace them through the setters, e.g.
    ``controls.state = {**controls.state, "scope": "api"}``.
    """

    def __init__(
        self,
        grid: FieldGrid,
        *,
        values: Mapping[str, str],
        errors: Mapping[str, str],
        position: Position,
        edit_mode: bool,
        edit_value: str,
    ) -> None:
        self._grid = grid
        self._values: State = dict(values)
        self._errors: ErrorMap = dict(errors)
        self._position = position
        self._edit_mode = edit_mode
        self._edit_value = edit_value
        self._result: State | None = None

    # -- values -------------------------------------------------------------

    @property
    def state(self) -> Mapping[str, str]:
        return MappingProxyType(self._values)

    @state.setter
    def state(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._errors)

    @errors.setter
    def errors(self, errors: Mapping[str, str]) -> None:
        self._errors = dict(errors)

    # -- mode ---------------------------------------------------------------

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    @edit_mode.setter
    def edit_mode(self, value: bool) -> None:
        self._edit_mode = value

    @property
    def edit_value(self) -> str:
        return self._edit_value

    @edit_value.setter
    def edit_value(self, value: str) -> None:
        self._edit_value = value

    # -- focus --------------------------------------------------------------

    @property
    def position(self) -> Position:
        return self._position

    @position.setter
    def position(self, position: Position) -> None:
        if field_at(self._grid, position) is None:
            raise ValueError(f"Position {position} is outside the field grid")
        self._position = position

    @property
    def current_field(self) -> Field | None:
        return field_at(self._grid, self._position)

    def set_current_field(self, field_id: str) -> None:
        """Move focus to the field named *field_id*."""
        position = find_position(self._grid, field_id)
        if position is None:
            raise ValueError(f"Unknown field id: {field_id!r}")
        self._position = position

    # -- termination --------------------------------------------------------

    def done(self) -> None:
        """End the session with the current values."""
        self._result = dict(self._values)

    @property
    def result(self) -> State | None:
        """Final values once :meth:`done` was called, else ``None``."""
        return None if self._result is None else dict(self._result)
