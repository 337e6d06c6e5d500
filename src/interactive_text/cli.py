"""CLI entry point for interactive-text. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys

import click

from interactive_text.config import InteractiveTextConfig, load_form, resolve_config
from interactive_text.prompt import AbortError, interactive_text
from interactive_text.terminal import ProcessTerminal
from interactive_text.types import State

LOG_ENV = "INTERACTIVE_TEXT_LOG"


def _run(config: InteractiveTextConfig) -> State:
    """Run a prompt session synchronously, exiting 130 on Ctrl+C.

    The prompt is drawn on stderr so stdout carries only the result.
    """
    try:
        return asyncio.run(interactive_text(config, terminal=ProcessTerminal(output=sys.stderr)))
    except (AbortError, KeyboardInterrupt):
        sys.exit(130)


def _echo_json(values: State) -> None:
    click.echo(json.dumps(values, indent=2))


@click.group(invoke_without_command=True)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Append debug logs to this file (default: ${LOG_ENV}).",
)
@click.pass_context
def main(ctx, log_file):
    """Compose structured text interactively in the terminal."""
    log_file = log_file or os.environ.get(LOG_ENV)
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the field values as JSON.")
def commit(as_json):
    """Build a conventional commit message."""
    from interactive_text.examples import commit_message_config, format_commit_message

    values = _run(commit_message_config())
    if as_json:
        _echo_json(values)
    else:
        click.echo(format_commit_message(values))


@main.command()
def person():
    """Ask for a name and an age."""
    from interactive_text.examples import person_config

    _echo_json(_run(person_config()))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def form(path):
    """Fill in the form defined in the JSON file PATH."""
    try:
        config = load_form(path)
        resolve_config(config)
    except (ValueError, OSError) as exc:
        click.echo(f"Invalid form {path}: {exc}", err=True)
        sys.exit(1)
    _echo_json(_run(config))
