"""Console rendering of commit listings and reconciliation reports."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from ticketmatch_core.jira.search import tickets_url
from ticketmatch_core.models import CommitLog, TicketRecord
from ticketmatch_core.reconcile import ReconciliationReport

console = Console()


def print_commit_listing(log: CommitLog, tickets: dict[str, TicketRecord] | None = None) -> None:
    """Print every group with its top-level commits and their revert chains.

    ``** KEY`` marks a token the tracker does not know, ``-- KEY (state)`` a
    known one. With ``tickets=None`` no tracker lookup is shown at all.
    """
    for key in log.sorted_keys():
        if tickets is None:
            console.print(f"-- {escape(key)}")
        elif key in tickets:
            console.print(f"-- {escape(key)} ({escape(tickets[key].state)})")
        else:
            console.print(f"** {escape(key)}")

        for entry in log.top_level(key):
            console.print(f"    {entry.hash}  {escape(entry.description)}")
            for revert in log.revert_chain(entry):
                console.print(f" R  {revert.hash}  {escape(revert.description)}")


def _section(title: str) -> None:
    console.print()
    console.print(f"----- {title} -----")


def _ticket_lines(tickets: list[TicketRecord], jira_url: str | None) -> None:
    for t in tickets:
        console.print(f"[red]{escape(t.key)} {escape(t.state)}[/red]")
    if jira_url and tickets:
        console.print(f"[dim]{tickets_url(jira_url, [t.key for t in tickets])}[/dim]", soft_wrap=True)


def print_report(report: ReconciliationReport, fix_version: str, jira_url: str | None = None) -> None:
    """Print the four report sections; ``jira_url`` adds a deep link under each list."""
    _section("Git commits in Jira")
    if report.all_tokens_known:
        console.print("[green]ALL COMMIT TOKENS WERE FOUND IN JIRA[/green]")
    else:
        console.print(
            f"[red]COMMIT TOKENS NOT FOUND IN JIRA (OR NOT WITH FIX VERSION OF {escape(fix_version)})[/red]"
        )
        for token in report.unknown_tokens:
            console.print(f"[red]{escape(token)}[/red]")
        for revert in report.unknown_reverts:
            console.print(f"[red]REVERT {revert.hash}[/red]")

    _section("Unresolved Jira tickets not in git commits")
    if report.unresolved_not_in_git:
        console.print("[red]UNRESOLVED ISSUES NOT FOUND IN GIT[/red]")
        _ticket_lines(report.unresolved_not_in_git, jira_url)
    else:
        console.print("[green]ALL ISSUES WERE FOUND IN GIT[/green]")

    _section("Unresolved Jira tickets found in git commits")
    if report.unresolved_in_git:
        console.print("[red]UNRESOLVED ISSUES FOUND IN GIT[/red]")
        _ticket_lines(report.unresolved_in_git, jira_url)
    else:
        console.print("[green]ALL ISSUES WERE RESOLVED IN JIRA[/green]")

    _section("Jira tickets missing release notes")
    if report.missing_release_notes:
        console.print("[red]ISSUES MISSING RELEASE NOTES[/red]")
        _ticket_lines(report.missing_release_notes, jira_url)
    else:
        console.print("[green]ALL ISSUES HAVE RELEASE NOTES[/green]")
