"""CLI entry point for ticketmatch.

Commands:
  match    — reconcile a git revision range against a Jira fix version
  commits  — show the classified commit listing for a range, no Jira call
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from ticketmatch_cli.commands.commits import commits_cmd
from ticketmatch_cli.commands.match import match_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("ticketmatch"),
    prog_name="ticketmatch",
)
@click.option(
    "--config",
    "config_path",
    default=".ticketmatch.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="TICKETMATCH_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log git and Jira calls to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Match git commits between two revisions with Jira tickets for a release."""
    from ticketmatch_core.config import load_config
    from ticketmatch_core.exceptions import ConfigError

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))


main.add_command(match_cmd)
main.add_command(commits_cmd)
