"""Ready-made configurations: a conventional-commit builder and a function renderer."""

from __future__ import annotations

from typing import Mapping

from interactive_text.config import InteractiveTextConfig
from interactive_text.styles import STYLES
from interactive_text.types import Field, RendererOpts

COMMIT_TYPES = (
    "build",
    "chore",
    "ci",
    "docs",
    "feat",
    "fix",
    "perf",
    "refactor",
    "revert",
    "style",
    "test",
)


def _commit_type(value: str) -> str | None:
    if value in COMMIT_TYPES:
        return None
    return f"type must be one of {', '.join(COMMIT_TYPES)}"


def _subject(value: str) -> str | None:
    if len(value) > 72:
        return "subject must be 72 characters or fewer"
    return None


def commit_message_config() -> InteractiveTextConfig:
    return InteractiveTextConfig(
        fields=[
            [
                Field("type", required=True, placeholder="feat|fix|docs...", validator=_commit_type),
                Field("scope", placeholder="optional scope", transformer=str.lower),
                Field("subject", required=True, placeholder="brief description", validator=_subject),
            ],
            [Field("body", multiline=True, placeholder="detailed description")],
        ],
        renderer=RendererOpts(template="{type}({scope}): {subject}\n\n{body}"),
    )


def format_commit_message(values: Mapping[str, str]) -> str:
    """Commit message text from a finished commit session, dropping empty parts."""
    scope = f"({values['scope']})" if values.get("scope") else ""
    header = f"{values['type']}{scope}: {values['subject']}"
    body = values.get("body", "")
    return f"{header}\n\n{body}" if body else header


def _highlight(text: str, edit_mode: bool, focused: bool) -> str:
    if edit_mode and focused:
        return STYLES["italic"](STYLES["gray"](text))
    if focused:
        return STYLES["green"](text)
    return text


def _age(value: str) -> str | None:
    if not value.isdigit():
        return "age must be a whole number"
    return None


def person_config() -> InteractiveTextConfig:
    def render(
        values: Mapping[str, str],
        edit_mode: bool,
        error_fields: list[str],
        focused: str | None,
    ) -> str:
        name = _highlight(values.get("name") or "name", edit_mode, focused == "name")
        age = _highlight(values.get("age") or "age", edit_mode, focused == "age")
        return f"Name: {name}, Age: {age}"

    return InteractiveTextConfig(
        fields=[
            [
                Field("name", required=True, placeholder="Enter name", transformer=str.strip),
                Field("age", placeholder="Enter age", validator=_age),
            ]
        ],
        renderer=render,
    )
