"""Per-keystroke transform/validate and the full-grid sweep run on ``done``."""

from __future__ import annotations

from typing import Mapping

from interactive_text.grid import flatten
from interactive_text.types import ErrorMap, Field, FieldGrid


def validate_input(
    line: str,
    field: Field | None,
    errors: Mapping[str, str],
) -> tuple[str, ErrorMap]:
    """Transform then validate the raw *line* for the focused *field*.

    Returns the candidate edit value (always the transformed value) and the
    updated error map, where the field's entry is set or removed.
    """
    if field is None:
        return line, dict(errors)

    value = field.transformer(line) if field.transformer else line
    error = field.validator(value) if field.validator else None

    updated = {key: message for key, message in errors.items() if key != field.id}
    if error:
        updated[field.id] = error
    return value, updated


def validate_fields(values: Mapping[str, str], grid: FieldGrid) -> ErrorMap | None:
    """Check every committed value; ``None`` when nothing fails."""
    errors: ErrorMap = {}
    for field in flatten(grid):
        value = values.get(field.id)
        if value:
            if field.validator:
                error = field.validator(value)
                if error:
                    errors[field.id] = error
        elif field.required:
            errors[field.id] = f"{field.id} is required"
    return errors or None
