"""match command — reconcile a git revision range with a Jira fix version."""

from __future__ import annotations

import click
from rich.console import Console

from ticketmatch_cli.render import print_commit_listing, print_report
from ticketmatch_core.classifier import associate_reverts, classify
from ticketmatch_core.exceptions import TicketmatchError
from ticketmatch_core.git.log import get_commit_log, is_inside_work_tree
from ticketmatch_core.jira.search import search_tickets
from ticketmatch_core.reconcile import reconcile

console = Console()


def _require(value: str | None, ci: bool, label: str, default: str | None = None) -> str:
    """Return ``value``, prompting for it unless running in CI mode."""
    if value:
        return value
    if ci:
        raise click.UsageError(f"must specify a {label}")
    return click.prompt(f"Enter {label}", default=default)


@click.command("match")
@click.option("--from", "-f", "from_rev", default=None, help="From git revision.")
@click.option("--to", "-t", "to_rev", default=None, help="To git revision.")
@click.option("--project", "-p", default=None, help="Jira project ID. Overrides config file.")
@click.option("--version", "-V", "fix_version", default=None, help='Jira "fixed-in" version.')
@click.option("--team", default=None, help="Only report unresolved and release-note tickets for this team.")
@click.option("--ci", "-c", is_flag=True, help="Continuous integration mode (no prompting).")
@click.option("--links", is_flag=True, help="Print a Jira link under each ticket list.")
@click.pass_context
def match_cmd(
    ctx,
    from_rev: str | None,
    to_rev: str | None,
    project: str | None,
    fix_version: str | None,
    team: str | None,
    ci: bool,
    links: bool,
):
    """Match commits between two git revisions with the Jira tickets of a release.

    Lists commits per ticket token with their reverts, then reports commit
    tokens unknown to Jira, unresolved tickets with and without code in git,
    and tickets missing release notes.

    \b
    Optional environment variables:
      JIRA_USER    Jira user name for basic auth
      JIRA_TOKEN   Jira API token or password
    """
    config = ctx.obj["config"]

    if not is_inside_work_tree():
        raise click.ClickException("Please run ticketmatch from a git repo directory")

    from_rev = _require(from_rev, ci, "Git from revision")
    to_rev = _require(to_rev, ci, "Git to revision", default="master")

    try:
        log = classify(get_commit_log(from_rev, to_rev))
    except TicketmatchError as e:
        raise click.ClickException(str(e))

    if log.is_empty():
        console.print(f"[yellow]No results found in git log for range {from_rev}..{to_rev}[/yellow]")
        return

    associate_reverts(log)

    project = _require(project or config.get("project"), ci, "Jira project", default="PUP")
    fix_version = _require(fix_version, ci, "Jira fix version", default=f"{project} {to_rev}")

    try:
        records = search_tickets(config, project, fix_version)
    except TicketmatchError as e:
        raise click.ClickException(str(e))

    if not records:
        console.print(
            f"[yellow]Jira returned no results for project '{project}' and fix version '{fix_version}'[/yellow]"
        )
        return

    try:
        report = reconcile(
            log,
            records,
            terminal_states=config["terminal_states"],
            exempt_tokens=config["exempt_tokens"],
            team=team,
        )
    except TicketmatchError as e:
        raise click.ClickException(str(e))

    print_commit_listing(report.log, report.tickets)
    print_report(report, fix_version, jira_url=config["jira_url"] if links else None)
