"""Field grid model: rows of named fields, resolved once per session."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Sequence

from interactive_text.types import Field, FieldGrid, Position, State, field_from_dict

Grid = tuple[tuple[Field, ...], ...]


def default_placeholder(field: Field) -> str:
    """``<id>`` for required fields, ``id?`` for optional ones."""
    return f"<{field.id}>" if field.required else f"{field.id}?"


def resolve_grid(rows: Sequence[Sequence[Field | Mapping[str, Any]]]) -> Grid:
    """Validate the grid and fill in missing placeholders.

    Raises ``ValueError`` for an empty grid, an empty row, or a field id that
    appears more than once.
    """
    if not rows:
        raise ValueError("Field grid must contain at least one row")

    seen: set[str] = set()
    resolved: list[tuple[Field, ...]] = []
    for row_index, row in enumerate(rows):
        if not row:
            raise ValueError(f"Row {row_index} of the field grid is empty")
        fields: list[Field] = []
        for item in row:
            field = field_from_dict(item)
            if field.id in seen:
                raise ValueError(f"Duplicate field id: {field.id!r}")
            seen.add(field.id)
            if not field.placeholder:
                field = replace(field, placeholder=default_placeholder(field))
            fields.append(field)
        resolved.append(tuple(fields))
    return tuple(resolved)


def flatten(grid: FieldGrid) -> list[Field]:
    return [field for row in grid for field in row]


def fields_by_id(grid: FieldGrid) -> dict[str, Field]:
    lookup: dict[str, Field] = {}
    for field in flatten(grid):
        lookup.setdefault(field.id, field)
    return lookup


def field_at(grid: FieldGrid, position: Position) -> Field | None:
    """Field under *position*, or ``None`` when it points outside the grid."""
    if not 0 <= position.row < len(grid):
        return None
    row = grid[position.row]
    if not 0 <= position.col < len(row):
        return None
    return row[position.col]


def find_position(grid: FieldGrid, field_id: str) -> Position | None:
    for row_index, row in enumerate(grid):
        for col_index, field in enumerate(row):
            if field.id == field_id:
                return Position(row_index, col_index)
    return None


def initial_values(grid: FieldGrid, overrides: Mapping[str, str] | None = None) -> State:
    """One entry per field: initial value, else default value, else ``""``."""
    overrides = overrides or {}
    values: State = {}
    for field in flatten(grid):
        value = overrides.get(field.id)
        if value is None:
            value = field.default_value
        values[field.id] = value if value is not None else ""
    return values
