"""Tests for interactive_text.validation."""

from __future__ import annotations

import pytest

from interactive_text.grid import resolve_grid
from interactive_text.types import Field
from interactive_text.validation import validate_fields, validate_input


def _one_of(*choices):
    def validator(value: str) -> str | None:
        return None if value in choices else f"must be one of {', '.join(choices)}"

    return validator


class TestValidateInput:
    """Per-keystroke transform and validation."""

    def test_transformer_then_validator(self) -> None:
        seen = []

        def validator(value: str) -> str | None:
            seen.append(value)
            return None

        field = Field("scope", transformer=str.lower, validator=validator)
        value, errors = validate_input("API", field, {})
        assert value == "api"
        assert seen == ["api"]
        assert errors == {}

    def test_sets_error_and_keeps_transformed_value(self) -> None:
        field = Field("type", transformer=str.strip, validator=_one_of("feat", "fix"))
        value, errors = validate_input(" nope ", field, {})
        assert value == "nope"
        assert errors == {"type": "must be one of feat, fix"}

    def test_clears_only_own_error(self) -> None:
        field = Field("type", validator=_one_of("feat", "fix"))
        value, errors = validate_input(
            "feat", field, {"type": "old", "subject": "subject is required"}
        )
        assert value == "feat"
        assert errors == {"subject": "subject is required"}

    def test_empty_string_error_counts_as_valid(self) -> None:
        field = Field("type", validator=lambda value: "")
        _, errors = validate_input("x", field, {"type": "old"})
        assert errors == {}

    def test_does_not_mutate_input_errors(self) -> None:
        field = Field("type", validator=_one_of("feat"))
        before = {"subject": "subject is required"}
        validate_input("nope", field, before)
        assert before == {"subject": "subject is required"}

    def test_no_field(self) -> None:
        assert validate_input("raw", None, {"a": "b"}) == ("raw", {"a": "b"})

    def test_validator_exceptions_propagate(self) -> None:
        def boom(value: str) -> str | None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            validate_input("x", Field("a", validator=boom), {})


class TestValidateFields:
    """The full sweep run by done."""

    @pytest.fixture
    def grid(self):
        return resolve_grid(
            [
                [
                    Field("type", validator=_one_of("feat", "fix")),
                    Field("scope"),
                    Field("subject", required=True),
                ]
            ]
        )

    def test_required_empty(self, grid) -> None:
        values = {"type": "feat", "scope": "", "subject": ""}
        assert validate_fields(values, grid) == {"subject": "subject is required"}

    def test_missing_value_treated_as_empty(self, grid) -> None:
        assert validate_fields({"type": "feat"}, grid) == {"subject": "subject is required"}

    def test_validator_runs_on_nonempty_values(self, grid) -> None:
        values = {"type": "nope", "scope": "", "subject": "x"}
        assert validate_fields(values, grid) == {"type": "must be one of feat, fix"}

    def test_validator_skipped_for_empty_optional(self, grid) -> None:
        values = {"type": "", "scope": "", "subject": "x"}
        assert validate_fields(values, grid) is None

    def test_all_valid(self, grid) -> None:
        assert validate_fields({"type": "fix", "scope": "ui", "subject": "x"}, grid) is None

    def test_repeatable(self, grid) -> None:
        values = {"type": "nope", "scope": "", "subject": ""}
        assert validate_fields(values, grid) == validate_fields(values, grid)
