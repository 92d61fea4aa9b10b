"""Session files kept under ~/.claude/sessions/ by the lifecycle hooks."""

import time
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from pmresolver.constants import COMPACTION_LOG_FILENAME, SESSIONS_SUBDIR, TOOL_DIR_NAME
from pmresolver.preferences import home_dir

SESSION_FILE_SUFFIX = "-session.tmp"
LAST_UPDATED_PREFIX = "**Last Updated:**"
RECENT_SESSION_DAYS = 7


def get_sessions_dir(env: Mapping[str, str]) -> Path:
    """Get the directory holding session files."""
    return home_dir(env) / TOOL_DIR_NAME / SESSIONS_SUBDIR


def session_file_for(sessions_dir: Path, now: datetime) -> Path:
    """Get the session file for the day of `now` (YYYY-MM-DD-session.tmp)."""
    return sessions_dir / f"{now:%Y-%m-%d}{SESSION_FILE_SUFFIX}"


def _session_template(now: datetime) -> str:
    stamp = f"{now:%H:%M}"
    return (
        f"# Session: {now:%Y-%m-%d}\n"
        f"**Date:** {now:%Y-%m-%d}\n"
        f"**Started:** {stamp}\n"
        f"{LAST_UPDATED_PREFIX} {stamp}\n"
        "\n"
        "---\n"
        "\n"
        "## Current State\n"
        "\n"
        "### Completed\n"
        "\n"
        "### In Progress\n"
        "\n"
        "### Notes for Next Session\n"
    )


def touch_session_file(sessions_dir: Path, now: datetime | None = None) -> tuple[Path, bool]:
    """Create today's session file, or bump its Last Updated line.

    Args:
        sessions_dir: Directory holding session files
        now: Current time (defaults to now)

    Returns:
        Tuple of (session file path, True if the file was created)
    """
    now = now or datetime.now()
    session_file = session_file_for(sessions_dir, now)
    sessions_dir.mkdir(parents=True, exist_ok=True)

    if not session_file.exists():
        session_file.write_text(_session_template(now), encoding="utf-8")
        return session_file, True

    lines = session_file.read_text(encoding="utf-8").splitlines(keepends=True)
    for i, line in enumerate(lines):
        if line.startswith(LAST_UPDATED_PREFIX):
            lines[i] = f"{LAST_UPDATED_PREFIX} {now:%H:%M}\n"
            break
    session_file.write_text("".join(lines), encoding="utf-8")
    return session_file, False


def record_compaction(sessions_dir: Path, now: datetime | None = None) -> Path:
    """Log a context compaction and mark it in today's session file.

    Returns:
        Path to the compaction log
    """
    now = now or datetime.now()
    sessions_dir.mkdir(parents=True, exist_ok=True)

    log_path = sessions_dir / COMPACTION_LOG_FILENAME
    with open(log_path, "a", encoding="utf-8") as f:
        f.write(f"[{now:%Y-%m-%d %H:%M:%S}] Context compaction triggered\n")

    session_file = session_file_for(sessions_dir, now)
    if session_file.exists():
        with open(session_file, "a", encoding="utf-8") as f:
            f.write(f"\n---\n**[Compaction occurred at {now:%H:%M}]** - Context was summarized\n")

    return log_path


def find_recent_sessions(sessions_dir: Path, max_age_days: int = RECENT_SESSION_DAYS) -> list[Path]:
    """Find session files modified within the last max_age_days, newest first."""
    if not sessions_dir.is_dir():
        return []

    cutoff = time.time() - max_age_days * 86400
    recent = [
        path
        for path in sessions_dir.glob(f"*{SESSION_FILE_SUFFIX}")
        if path.is_file() and path.stat().st_mtime >= cutoff
    ]
    return sorted(recent, key=lambda p: p.stat().st_mtime, reverse=True)
