"""CLI entry point for pm-hook - lifecycle hooks run by the coding assistant.

Each subcommand may receive a JSON payload on stdin. Hooks report on
stderr and always exit 0 so that a failing hook never blocks a session.
"""

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from pmhooks.sessions import (
    find_recent_sessions,
    get_sessions_dir,
    record_compaction,
    touch_session_file,
)
from pmresolver.core import get_selection_prompt
from pmresolver.exceptions import NoPackageManagerAvailableError, PMError
from pmresolver.resolver import Source, resolve_source

app = typer.Typer(
    name="pm-hook",
    help="Session lifecycle hooks: report the package manager and keep session notes.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console(stderr=True)


def _read_payload() -> dict[str, Any]:
    """Read the hook's JSON payload from stdin, if there is one."""
    if sys.stdin is None or sys.stdin.isatty():
        return {}
    try:
        raw = sys.stdin.read()
        if not raw.strip():
            return {}
        data = json.loads(raw)
    except (OSError, ValueError, RecursionError):
        return {}
    return data if isinstance(data, dict) else {}


def _project_root(payload: dict[str, Any]) -> Path:
    cwd = payload.get("cwd")
    if isinstance(cwd, str) and cwd:
        return Path(cwd)
    return Path.cwd()


def _run_hook(tag: str, body: Callable[[], None]) -> None:
    """Run a hook body, reporting failures instead of raising them."""
    try:
        body()
    except (PMError, OSError) as e:
        console.print(f"{tag} [red]Error:[/red] {escape(str(e))}")


@app.command("session-start")
def session_start() -> None:
    """Report the package manager and the most recent session notes."""
    tag = escape("[SessionStart]")
    payload = _read_payload()

    def body() -> None:
        env = os.environ
        project_root = _project_root(payload)

        try:
            result = resolve_source(project_root, env)
        except NoPackageManagerAvailableError:
            console.print(f"{tag} No package manager available")
            console.print(escape(get_selection_prompt()))
        else:
            console.print(
                f"{tag} Package manager: {result.package_manager} ({result.source.value})"
            )
            if result.source is Source.FALLBACK:
                console.print(escape(get_selection_prompt()))

        recent = find_recent_sessions(get_sessions_dir(env))
        if recent:
            console.print(f"{tag} Found {len(recent)} recent session(s)")
            console.print(f"{tag} Latest: {escape(str(recent[0]))}")

    _run_hook(tag, body)


@app.command("session-end")
def session_end() -> None:
    """Create or update today's session file."""
    tag = escape("[SessionEnd]")
    _read_payload()

    def body() -> None:
        session_file, created = touch_session_file(get_sessions_dir(os.environ))
        action = "Created" if created else "Updated"
        console.print(f"{tag} {action} session file: {escape(str(session_file))}")

    _run_hook(tag, body)


@app.command("pre-compact")
def pre_compact() -> None:
    """Record that the conversation context is about to be compacted."""
    tag = escape("[PreCompact]")
    _read_payload()

    def body() -> None:
        record_compaction(get_sessions_dir(os.environ))
        console.print(f"{tag} State saved before compaction")

    _run_hook(tag, body)


if __name__ == "__main__":
    app()
