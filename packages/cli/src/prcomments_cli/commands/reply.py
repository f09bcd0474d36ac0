"""reply: threaded reply to a review comment."""

from __future__ import annotations

import sys
from dataclasses import dataclass

import click
from rich.console import Console

from prcomments_cli.common import RULE, echo_json, get_client, get_ref, handle_errors, plain
from prcomments_core.lookup import parse_item_id
from prcomments_core.reply import reply_to_comment
from prcomments_core.utils.text import format_time

console = Console()


@dataclass(frozen=True)
class ReplyOptions:
    comment_id: int
    body: str
    pr: str | None
    json: bool


def read_body(body: str | None) -> str:
    """Use --body when given, otherwise whatever was piped on stdin."""
    if body:
        return body
    stdin = sys.stdin
    if stdin.isatty():
        return ""
    return stdin.read().strip()


@click.command("reply")
@click.argument("comment_id")
@click.option("--body", default=None, help="Reply message body (reads from stdin if not provided).")
@click.option("--pr", default=None, help="PR reference (e.g. owner/repo/123 or just 123).")
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.pass_context
@handle_errors
def reply_cmd(ctx, comment_id: str, body: str | None, pr: str | None, as_json: bool):
    """Reply to a review comment on a pull request.

    Only review comments (inline code comments) support threaded replies.

    \b
    Examples:
      prcomments reply 2621968472 --body "Thanks for the feedback!"
      echo "Will fix!" | prcomments reply 2621968472
      prcomments reply 2621968472 --pr owner/repo/99 --body "Fixed"
    """
    opts = ReplyOptions(comment_id=parse_item_id(comment_id), body=read_body(body), pr=pr, json=as_json)
    run_reply(ctx, opts)


def run_reply(ctx, opts: ReplyOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr, hint=True)
    comments = client.get_review_comments(ref)
    reply = reply_to_comment(client, ref, comments, opts.comment_id, opts.body)

    if opts.json:
        echo_json(reply.to_dict())
        return

    console.print("[green]Reply created successfully![/green]")
    console.print(RULE * 60)
    console.print(plain(f"ID:      {reply.id}"))
    console.print(plain(f"Author:  {reply.author}"))
    console.print(plain(f"Created: {format_time(reply.created_at, '%Y-%m-%d %H:%M:%S')}"))
    console.print(plain(f"URL:     {reply.html_url}"), soft_wrap=True)
    console.print(RULE * 60)
    console.print()
    console.print(plain(reply.body or opts.body), soft_wrap=True)
