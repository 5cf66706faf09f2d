from __future__ import annotations

import logging
import subprocess

from ticketmatch_core.exceptions import GitLogError

logger = logging.getLogger(__name__)


def is_inside_work_tree(cwd: str | None = None) -> bool:
    """Return True when ``cwd`` is inside a git working tree."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            capture_output=True,
            text=True,
            cwd=cwd,
        )
    except FileNotFoundError:
        return False
    return result.returncode == 0 and result.stdout.strip() == "true"


def get_commit_log(from_rev: str, to_rev: str, cwd: str | None = None) -> str:
    """Return ``git log --no-merges --oneline FROM..TO`` output, one commit per line."""
    rev_range = f"{from_rev}..{to_rev}"
    logger.debug("Reading git log for %s", rev_range)
    try:
        result = subprocess.run(
            ["git", "log", "--no-merges", "--oneline", rev_range],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
        )
    except FileNotFoundError:
        raise GitLogError("git executable not found on PATH")
    if result.returncode != 0:
        raise GitLogError(f"git log {rev_range} failed: {result.stderr.strip()}")
    return result.stdout
