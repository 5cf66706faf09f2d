"""Exceptions raised by ticketmatch_core.

Every error the engine or its collaborators raise derives from
TicketmatchError so the CLI can turn any of them into a single fatal exit
without catching unrelated exceptions.
"""

from __future__ import annotations


class TicketmatchError(Exception):
    """Base class for all ticketmatch failures."""


class MalformedLineError(TicketmatchError):
    """A git log line did not start with a hash followed by whitespace.

    Ticket accounting must be exact, so a single bad line aborts the run.
    """

    def __init__(self, line: str):
        super().__init__(f"Malformed git log line: {line!r}")
        self.line = line


class InvalidTicketDataError(TicketmatchError):
    """A tracker record is missing a required field or duplicates another key."""


class TrackerError(TicketmatchError):
    """The issue tracker query failed (network, HTTP status or unreadable body)."""


class GitLogError(TicketmatchError):
    """git exited non-zero while reading the commit range."""


class ConfigError(TicketmatchError):
    """The configuration file holds a value of the wrong shape."""
