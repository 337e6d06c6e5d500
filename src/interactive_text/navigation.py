"""Cursor movement across the field grid."""

from __future__ import annotations

from interactive_text.types import Direction, FieldGrid, Position

DIRECTIONS: tuple[Direction, ...] = ("up", "down", "left", "right")


def navigate(grid: FieldGrid, current: Position, direction: Direction) -> Position:
    """Return the position reached by moving one step in *direction*.

    Left/right wrap within the row, up/down wrap across rows and clamp the
    column to the length of the target row.
    """
    row, col = current.row, current.col

    if direction in ("left", "right"):
        if not 0 <= row < len(grid) or not grid[row]:
            return current
        length = len(grid[row])
        if direction == "right":
            return Position(row, (col + 1) % length)
        return Position(row, length - 1 if col == 0 else col - 1)

    if direction in ("up", "down"):
        if not grid:
            return current
        if direction == "down":
            target = (row + 1) % len(grid)
        else:
            target = len(grid) - 1 if row == 0 else row - 1
        target_row = grid[target]
        if not target_row:
            return current
        return Position(target, min(col, len(target_row) - 1))

    return current
