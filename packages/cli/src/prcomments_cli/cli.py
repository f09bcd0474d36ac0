"""CLI entry point for prcomments.

Commands:
  reviews:  list reviews and their states
  list:     list review comments and issue comments with filters
  tree:     reviews with their inline comments as a tree
  view:     full content of any review, review comment or issue comment
  reply:    threaded reply to a review comment
  resolve:  resolve (or unresolve) review threads by comment ID
  hide:     minimize (or unminimize) comments
  cleanup:  minimize reviews whose comments are all resolved
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from prcomments_cli.commands.cleanup import cleanup_cmd
from prcomments_cli.commands.hide import hide_cmd
from prcomments_cli.commands.list import list_cmd
from prcomments_cli.commands.reply import reply_cmd
from prcomments_cli.commands.resolve import resolve_cmd
from prcomments_cli.commands.reviews import reviews_cmd
from prcomments_cli.commands.tree import tree_cmd
from prcomments_cli.commands.view import view_cmd
from prcomments_core.errors import PRCommentsError


def _build_client(config: dict):
    """Create the GitHub client from resolved configuration.

    Called lazily by the first command that talks to GitHub.
    """
    from prcomments_core.gh.client import GitHubClient

    token = config.get("github_token")
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return GitHubClient(token, base_url=config["github_api_url"])


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prcomments"),
    prog_name="prcomments",
)
@click.option(
    "--config",
    "config_path",
    default=".prcomments.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRCOMMENTS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log API calls and other debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Structured access to GitHub pull request reviews and review comments.

    \b
    Unlike the standard gh CLI, this tool can:
      - list all reviews with their states
      - list review comments grouped by review
      - filter by outdated and resolved status (resolved hidden by default)
      - reply to, resolve, hide and clean up review comments

    \b
    PR reference can be:
      - Full URL: https://github.com/owner/repo/pull/123
      - Short form: owner/repo/123
      - Just number: 123 (when in a repo context)
      - Omitted: uses the current branch's PR
    """
    from prcomments_core.config import load_config
    from prcomments_cli.auth import resolve_github_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except PRCommentsError as e:
        raise click.ClickException(str(e)) from e

    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config
    ctx.obj["client_factory"] = lambda: _build_client(config)


main.add_command(reviews_cmd)
main.add_command(list_cmd)
main.add_command(tree_cmd)
main.add_command(view_cmd)
main.add_command(view_cmd, name="show")
main.add_command(reply_cmd)
main.add_command(resolve_cmd)
main.add_command(hide_cmd)
main.add_command(cleanup_cmd)
