"""commits command — classified commit listing for a revision range."""

from __future__ import annotations

import click
from rich.console import Console

from ticketmatch_cli.render import print_commit_listing
from ticketmatch_core.classifier import associate_reverts, classify
from ticketmatch_core.exceptions import TicketmatchError
from ticketmatch_core.git.log import get_commit_log

console = Console()


@click.command("commits")
@click.option("--from", "-f", "from_rev", required=True, help="From git revision.")
@click.option("--to", "-t", "to_rev", default="master", show_default=True, help="To git revision.")
def commits_cmd(from_rev: str, to_rev: str):
    """Show commits grouped by ticket token, with their revert chains."""
    try:
        log = classify(get_commit_log(from_rev, to_rev))
    except TicketmatchError as e:
        raise click.ClickException(str(e))

    if log.is_empty():
        console.print(f"[yellow]No results found in git log for range {from_rev}..{to_rev}[/yellow]")
        return

    associate_reverts(log)
    print_commit_listing(log)
