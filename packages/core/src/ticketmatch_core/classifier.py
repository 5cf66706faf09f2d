"""Commit classification and revert linking.

classify() turns ``git log --oneline`` output into a CommitLog grouped by
ticket token; associate_reverts() then links every commit to the commit that
reverts it, which is what lets reconcile.py tell whether a ticket's change is
still present after reverts and re-reverts.
"""

from __future__ import annotations

import logging
import re

from ticketmatch_core.exceptions import MalformedLineError
from ticketmatch_core.models import REVERT, UNMARKED, CommitLog

logger = logging.getLogger(__name__)

_REVERT_LINE_RE = re.compile(r'([0-9a-fA-F]+)\s+(Revert ".*")')
_COMMIT_LINE_RE = re.compile(r"([0-9a-fA-F]+)\s+(?:\(([^)]*)\))?(.*)")


def parse_line(line: str) -> tuple[str, str, str]:
    """Parse one log line into ``(key, hash, description)``.

    A subject that is entirely ``Revert "..."`` is filed under REVERT with the
    quotes kept. Otherwise a leading ``(TOKEN)`` becomes the uppercased key and
    is stripped from the description; without one the key is UNMARKED and the
    subject is kept verbatim.

    Raises MalformedLineError when the line has no leading hash and whitespace.
    """
    line = line.rstrip("\r\n")

    match = _REVERT_LINE_RE.fullmatch(line)
    if match:
        return REVERT, match.group(1), match.group(2)

    match = _COMMIT_LINE_RE.fullmatch(line)
    if match is None:
        raise MalformedLineError(line)

    commit_hash, token, rest = match.groups()
    if token is None:
        return UNMARKED, commit_hash, rest
    return token.upper(), commit_hash, rest.lstrip()


def classify(log_text: str) -> CommitLog:
    """Build a CommitLog from raw log text, one commit per non-empty line."""
    log = CommitLog()
    for line in log_text.splitlines():
        if not line.strip():
            continue
        key, commit_hash, description = parse_line(line)
        log.add(key, commit_hash, description)
    logger.debug("Classified %d commit(s) into %d group(s)", len(log), len(log.groups))
    return log


def _first_by_description(log: CommitLog) -> dict[str, int]:
    """Map each description to the first entry carrying it, in group order."""
    index: dict[str, int] = {}
    for key in log.keys():
        for entry in log.group(key):
            index.setdefault(entry.description, entry.id)
    return index


def _mark_revert_parent(log: CommitLog, revert_id: int) -> None:
    identity = log.get(revert_id).identity
    for entry in log.entries:
        if entry.identity == identity:
            entry.has_revert_parent = True


def associate_reverts(log: CommitLog) -> None:
    """Link each commit to the commit that reverts it.

    Two subjects are looked for per commit: ``Revert "(KEY) description"`` and
    ``Revert "description"``. Both lookups always run, so when both match the
    bare-description revert is the one kept in ``reverted_by``; the revert found
    by the first lookup still keeps its has_revert_parent flag.

    When several commits share a revert subject the first one in group order
    wins.
    """
    by_description = _first_by_description(log)

    for key in log.keys():
        for entry in log.group(key):
            candidates = (
                f'Revert "({key}) {entry.description}"',
                f'Revert "{entry.description}"',
            )
            for subject in candidates:
                revert_id = by_description.get(subject)
                if revert_id is None:
                    continue
                entry.reverted_by = revert_id
                _mark_revert_parent(log, revert_id)
                logger.debug("%s is reverted by %s", entry.hash, log.get(revert_id).hash)
