"""Action registry: key bindings for the edit and navigate scopes.

User bindings are resolved first, in declaration order; a default binding is
appended for every builtin tag the user did not bind, so the five builtins
are always reachable:

========  =========  ===========
Tag       Scope      Default key
========  =========  ===========
done      navigate   Alt+Enter
edit      navigate   Enter
remove    navigate   Delete
cancel    edit       Escape
save      edit       Enter
========  =========  ===========
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, NamedTuple, Sequence, get_args

from interactive_text.controls import Controls
from interactive_text.keys import KeyEvent, KeyId, format_key_label, normalize_key_combo
from interactive_text.types import (
    ActionConfig,
    BuiltinTag,
    CustomAction,
    FieldGrid,
    Scope,
    action_config_from_dict,
)
from interactive_text.validation import validate_fields

logger = logging.getLogger(__name__)

BUILTIN_SCOPES: dict[str, Scope] = {
    "edit": "navigate",
    "remove": "navigate",
    "done": "navigate",
    "save": "edit",
    "cancel": "edit",
}


# ---------------------------------------------------------------------------
# Builtin handlers
# ---------------------------------------------------------------------------


def _edit(controls: Controls) -> None:
    field = controls.current_field
    if field is None:
        return
    controls.edit_mode = True
    controls.edit_value = controls.state.get(field.id) or ""


def _remove(controls: Controls) -> None:
    field = controls.current_field
    if field is None:
        return
    controls.state = {**controls.state, field.id: ""}


def _make_done(grid: FieldGrid) -> CustomAction:
    def _done(controls: Controls) -> None:
        errors = validate_fields(controls.state, grid)
        if errors is None:
            controls.errors = {}
            controls.done()
            return
        logger.debug("done refused, %d field(s) failing: %s", len(errors), sorted(errors))
        controls.errors = errors

    return _done


def _cancel(controls: Controls) -> None:
    field = controls.current_field
    controls.edit_mode = False
    controls.edit_value = ""
    # The pending error described the discarded buffer
    if field is not None and field.id in controls.errors:
        controls.errors = {k: v for k, v in controls.errors.items() if k != field.id}


def _save(controls: Controls) -> None:
    field = controls.current_field
    if field is None:
        return
    if field.id in controls.errors:
        logger.debug("save refused for %r: %s", field.id, controls.errors[field.id])
        return
    controls.state = {**controls.state, field.id: controls.edit_value}
    controls.edit_mode = False
    controls.edit_value = ""


def _builtin_handler(tag: str, grid: FieldGrid) -> CustomAction:
    if tag == "done":
        return _make_done(grid)
    return {
        "edit": _edit,
        "remove": _remove,
        "cancel": _cancel,
        "save": _save,
    }[tag]


# ---------------------------------------------------------------------------
# Action
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Action:
    scope: Scope
    name: str
    key_combination: KeyId
    label: str
    handler: CustomAction
    tag: BuiltinTag | None = None

    def is_triggered(self, event: KeyEvent) -> bool:
        return self.key_combination == event.combo

    def trigger(self, controls: Controls) -> None:
        self.handler(controls)

    def __str__(self) -> str:
        return f"{self.name} {self.label}"


def make_action(
    scope: Scope,
    name: str,
    action: BuiltinTag | CustomAction,
    key: str,
    *,
    label: str | None = None,
    display_key: str | None = None,
    grid: FieldGrid = (),
) -> Action:
    """Resolve one binding into an :class:`Action`.

    Raises ``ValueError`` for an unknown scope, a malformed key combo, or a
    builtin tag used outside its scope.
    """
    if scope not in get_args(Scope):
        raise ValueError(f"Unknown action scope {scope!r} for {name!r}")

    combo = normalize_key_combo(key)
    if label is None:
        label = f"({display_key})" if display_key else format_key_label(combo)

    if isinstance(action, str):
        if action not in BUILTIN_SCOPES:
            raise ValueError(f"Unknown builtin action {action!r} for {name!r}")
        if BUILTIN_SCOPES[action] != scope:
            raise ValueError(
                f"Builtin action {action!r} belongs to the {BUILTIN_SCOPES[action]} scope, "
                f"not {scope!r}"
            )
        return Action(scope, name, combo, label, _builtin_handler(action, grid), action)

    if not callable(action):
        raise ValueError(f"Action {name!r} must be a builtin tag or a callable")
    return Action(scope, name, combo, label, action)


# ---------------------------------------------------------------------------
# Builtin builders (fresh Action per call)
# ---------------------------------------------------------------------------


def done_action(grid: FieldGrid = (), key: str = "alt+enter", name: str = "Done") -> Action:
    return make_action("navigate", name, "done", key, grid=grid)


def edit_action(key: str = "enter", name: str = "Edit") -> Action:
    return make_action("navigate", name, "edit", key)


def remove_action(key: str = "delete", name: str = "Remove") -> Action:
    return make_action("navigate", name, "remove", key)


def cancel_action(key: str = "escape", name: str = "Cancel") -> Action:
    return make_action("edit", name, "cancel", key)


def save_action(key: str = "enter", name: str = "Save") -> Action:
    return make_action("edit", name, "save", key)


_DEFAULT_BUILDERS: tuple[tuple[str, Callable[[FieldGrid], Action]], ...] = (
    ("done", lambda grid: done_action(grid)),
    ("edit", lambda grid: edit_action()),
    ("remove", lambda grid: remove_action()),
    ("cancel", lambda grid: cancel_action()),
    ("save", lambda grid: save_action()),
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ParsedActions(NamedTuple):
    edit_actions: tuple[Action, ...]
    navigate_actions: tuple[Action, ...]


def parse_actions(
    action_configs: Sequence[ActionConfig | Mapping[str, Any]] | None = None,
    *,
    grid: FieldGrid = (),
) -> ParsedActions:
    """Resolve user bindings and merge in the defaults for missing builtins.

    Each builtin tag may be bound at most once; binding it twice raises
    ``ValueError``.

    *grid* is the field grid swept by the ``done`` action.
    """
    actions: list[Action] = []
    declared: set[str] = set()
    for item in action_configs or ():
        config = action_config_from_dict(item)
        action = make_action(
            config.scope,
            config.name,
            config.action,
            config.key,
            label=config.label,
            display_key=config.display_key,
            grid=grid,
        )
        if action.tag is not None:
            if action.tag in declared:
                raise ValueError(
                    f"Builtin action {action.tag!r} is bound more than once "
                    f"in the {action.scope} scope ({config.name!r})"
                )
            declared.add(action.tag)
        actions.append(action)

    for tag, build in _DEFAULT_BUILDERS:
        if tag not in declared:
            actions.append(build(grid))

    parsed = ParsedActions(
        edit_actions=tuple(a for a in actions if a.scope == "edit"),
        navigate_actions=tuple(a for a in actions if a.scope == "navigate"),
    )
    logger.debug(
        "resolved actions: edit=[%s] navigate=[%s]",
        ", ".join(str(a) for a in parsed.edit_actions),
        ", ".join(str(a) for a in parsed.navigate_actions),
    )
    return parsed


def find_action(actions: Sequence[Action], event: KeyEvent) -> Action | None:
    """First action in registration order bound to *event*."""
    for action in actions:
        if action.is_triggered(event):
            return action
    return None
