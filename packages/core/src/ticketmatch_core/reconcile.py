"""Reconcile classified commits against tracker tickets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ticketmatch_core.exceptions import InvalidTicketDataError
from ticketmatch_core.models import REVERT, CommitEntry, CommitLog, TicketRecord

logger = logging.getLogger(__name__)

DEFAULT_TERMINAL_STATES = ("Resolved", "Closed", "Done")
DEFAULT_EXEMPT_TOKENS = ("MAINT", "DOC", "DOCS", "TRIVIAL", "PACKAGING", "UNMARKED")
RELEASE_NOTE_EXEMPT_TYPES = ("Epic",)


@dataclass
class ReconciliationReport:
    """Everything the renderer needs after a reconciliation run."""

    log: CommitLog
    tickets: dict[str, TicketRecord]
    unknown_tokens: list[str] = field(default_factory=list)
    unknown_reverts: list[CommitEntry] = field(default_factory=list)
    unresolved_not_in_git: list[TicketRecord] = field(default_factory=list)
    unresolved_in_git: list[TicketRecord] = field(default_factory=list)
    missing_release_notes: list[TicketRecord] = field(default_factory=list)

    @property
    def all_tokens_known(self) -> bool:
        return not self.unknown_tokens and not self.unknown_reverts


def is_terminal_state(state: str, terminal_states: Iterable[str] = DEFAULT_TERMINAL_STATES) -> bool:
    """Return True if ``state`` contains any terminal label (case-sensitive)."""
    return any(label in state for label in terminal_states)


def is_release_note_exempt(ticket: TicketRecord) -> bool:
    return ticket.issue_type in RELEASE_NOTE_EXEMPT_TYPES


def index_tickets(records: Iterable[TicketRecord]) -> dict[str, TicketRecord]:
    """Key tickets by uppercased key, preserving tracker order.

    Raises InvalidTicketDataError on a blank or duplicated key.
    """
    tickets: dict[str, TicketRecord] = {}
    for record in records:
        key = (record.key or "").strip().upper()
        if not key:
            raise InvalidTicketDataError(f"Ticket record without a key: {record!r}")
        if key in tickets:
            raise InvalidTicketDataError(f"Duplicate ticket key from tracker: {key}")
        tickets[key] = record
    return tickets


def compute_net_presence(log: CommitLog, tickets: dict[str, TicketRecord]) -> None:
    """Accumulate ``net_presence`` for every ticket that has commits.

    Each top-level commit adds 1. Its revert subtracts 1, the revert of that
    revert adds 1 back, and so on down the chain.
    """
    for key in log.keys():
        ticket = tickets.get(key)
        if ticket is None:
            continue
        for entry in log.top_level(key):
            ticket.net_presence += 1
            sign = -1
            for _ in log.revert_chain(entry):
                ticket.net_presence += sign
                sign = -sign
        logger.debug("%s net presence %d", key, ticket.net_presence)


def classify_unknown_commit_tokens(
    log: CommitLog,
    tickets: dict[str, TicketRecord],
    exempt_tokens: Iterable[str] = DEFAULT_EXEMPT_TOKENS,
) -> list[str]:
    """Sorted commit tokens that the tracker does not know about.

    REVERT is never listed here; see unknown_reverts().
    """
    exempt = {token.upper() for token in exempt_tokens}
    return sorted(key for key in log.keys() if key != REVERT and key not in tickets and key not in exempt)


def unknown_reverts(log: CommitLog, tickets: dict[str, TicketRecord]) -> list[CommitEntry]:
    """Revert commits without a ticket token, reported one by one."""
    if REVERT in tickets:
        return []
    return log.group(REVERT)


def _on_team(ticket: TicketRecord, team: str | None) -> bool:
    return team is None or team in ticket.teams


def partition_unresolved(
    tickets: dict[str, TicketRecord],
    terminal_states: Iterable[str] = DEFAULT_TERMINAL_STATES,
    team: str | None = None,
) -> tuple[list[TicketRecord], list[TicketRecord]]:
    """Split unresolved tickets into ``(not_in_git, in_git)``."""
    terminal_states = tuple(terminal_states)
    unresolved = [
        t for t in tickets.values() if not is_terminal_state(t.state, terminal_states) and _on_team(t, team)
    ]
    not_in_git = [t for t in unresolved if not t.in_git]
    in_git = [t for t in unresolved if t.in_git]
    return not_in_git, in_git


def missing_release_notes(tickets: dict[str, TicketRecord], team: str | None = None) -> list[TicketRecord]:
    return [
        t
        for t in tickets.values()
        if not (t.release_note or "").strip() and not is_release_note_exempt(t) and _on_team(t, team)
    ]


def reconcile(
    log: CommitLog,
    records: Iterable[TicketRecord],
    terminal_states: Iterable[str] = DEFAULT_TERMINAL_STATES,
    exempt_tokens: Iterable[str] = DEFAULT_EXEMPT_TOKENS,
    team: str | None = None,
) -> ReconciliationReport:
    """Run the full reconciliation over a revert-linked CommitLog.

    ``log`` must already have been through associate_reverts().
    """
    tickets = index_tickets(records)
    compute_net_presence(log, tickets)
    not_in_git, in_git = partition_unresolved(tickets, terminal_states, team)
    return ReconciliationReport(
        log=log,
        tickets=tickets,
        unknown_tokens=classify_unknown_commit_tokens(log, tickets, exempt_tokens),
        unknown_reverts=unknown_reverts(log, tickets),
        unresolved_not_in_git=not_in_git,
        unresolved_in_git=in_git,
        missing_release_notes=missing_release_notes(tickets, team),
    )
