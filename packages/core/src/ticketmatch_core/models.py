"""Commit and ticket data models.

Commits live in a single arena (CommitLog.entries) and refer to each other by
integer id, so a revert chain is a walk over ids rather than object references.
"""

from __future__ import annotations

from dataclasses import dataclass, field

REVERT = "REVERT"
UNMARKED = "UNMARKED"


@dataclass
class CommitEntry:
    """One parsed line of ``git log --oneline``."""

    id: int
    hash: str
    description: str
    key: str
    # id of the commit whose subject is a revert of this one
    reverted_by: int | None = None
    # set on a revert commit once its original was found; the original prints it
    has_revert_parent: bool = False

    @property
    def identity(self) -> tuple[str, str]:
        return (self.hash, self.description)


@dataclass
class CommitLog:
    """All commits of a range, grouped by classification key.

    Group order is the order in which keys were first seen; entries within a
    group keep their log order. Reports iterate ``sorted_keys()`` instead.
    """

    entries: list[CommitEntry] = field(default_factory=list)
    groups: dict[str, list[int]] = field(default_factory=dict)

    def add(self, key: str, hash: str, description: str) -> CommitEntry:
        entry = CommitEntry(id=len(self.entries), hash=hash, description=description, key=key)
        self.entries.append(entry)
        self.groups.setdefault(key, []).append(entry.id)
        return entry

    def get(self, entry_id: int) -> CommitEntry:
        return self.entries[entry_id]

    def keys(self) -> list[str]:
        return list(self.groups)

    def sorted_keys(self) -> list[str]:
        return sorted(self.groups)

    def group(self, key: str) -> list[CommitEntry]:
        return [self.entries[i] for i in self.groups.get(key, [])]

    def top_level(self, key: str) -> list[CommitEntry]:
        """Entries of a group that are not themselves a revert of a listed commit."""
        return [e for e in self.group(key) if not e.has_revert_parent]

    def revert_chain(self, entry: CommitEntry) -> list[CommitEntry]:
        """Return the reverts of ``entry``, then the revert of that revert, and so on."""
        chain: list[CommitEntry] = []
        seen = {entry.id}
        next_id = entry.reverted_by
        # revert subjects grow along a chain, so a classified log has no cycles
        while next_id is not None and next_id not in seen:
            seen.add(next_id)
            link = self.entries[next_id]
            chain.append(link)
            next_id = link.reverted_by
        return chain

    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class TicketRecord:
    """A tracker ticket filed against the fix version under reconciliation."""

    key: str
    state: str
    issue_type: str
    teams: tuple[str, ...] = ()
    release_note: str | None = None
    net_presence: int = 0  # accumulated only by compute_net_presence()

    @property
    def in_git(self) -> bool:
        return self.net_presence >= 1
