"""list: review comments and issue comments in one table."""

from __future__ import annotations

from dataclasses import dataclass

import click
from rich.console import Console
from rich.table import Table

from prcomments_cli.common import echo_json, get_client, get_config, get_ref, handle_errors, parse_bool, plain
from prcomments_core.filters import COMMENT_TYPES, CommentFilter, filter_review_comments
from prcomments_core.models import IssueComment, ReviewComment
from prcomments_core.threads import load_review_comments
from prcomments_core.utils.text import format_time, truncate

console = Console()


@dataclass(frozen=True)
class ListOptions:
    pr: str | None
    filter: CommentFilter
    json: bool


def unified_review_comment(c: ReviewComment) -> dict:
    line = c.display_line
    return {
        "type": "review",
        "id": c.id,
        "author": c.author,
        "body": c.body,
        "created_at": format_time(c.created_at),
        "file": c.path,
        "line": "" if line is None else str(line),
        "outdated": c.outdated,
        "resolved": c.resolved,
        "review_id": c.review_id,
    }


def unified_issue_comment(c: IssueComment) -> dict:
    return {
        "type": "issue",
        "id": c.id,
        "author": c.author,
        "body": c.body,
        "created_at": format_time(c.created_at),
    }


@click.command("list")
@click.argument("pr", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.option("--all", "include_all", is_flag=True, help="Show all comments including resolved.")
@click.option(
    "--resolved",
    is_flag=False,
    flag_value="true",
    default=None,
    callback=parse_bool,
    metavar="true|false",
    help="Filter by resolved status (review comments only). Give a value as --resolved=false.",
)
@click.option(
    "--outdated",
    is_flag=False,
    flag_value="true",
    default=None,
    callback=parse_bool,
    metavar="true|false",
    help="Filter by outdated status (review comments only). Give a value as --outdated=false.",
)
@click.option("--review-id", type=int, default=None, help="Filter by review ID (review comments only).")
@click.option(
    "--type",
    "comment_type",
    type=click.Choice(COMMENT_TYPES),
    default=None,
    help="Filter by comment type.",
)
@click.pass_context
@handle_errors
def list_cmd(
    ctx,
    pr: str | None,
    as_json: bool,
    include_all: bool,
    resolved: bool | None,
    outdated: bool | None,
    review_id: int | None,
    comment_type: str | None,
):
    """List all comments on a pull request.

    Includes review comments (inline code comments) and issue comments
    (general PR comments). Resolved review comments are hidden unless
    --all or --resolved is given.

    --resolved and --outdated take an optional value that must be attached
    with "=": in `list --resolved 123` the 123 is read as the value, so
    write `list --resolved=true 123` instead.

    \b
    Examples:
      prcomments list
      prcomments list --all
      prcomments list --type=review --resolved=true
      prcomments list owner/repo/123 --review-id=3581523351
      prcomments list 123 --outdated=false
      prcomments list --resolved=false owner/repo/123
    """
    flt = CommentFilter(
        review_id=review_id,
        outdated=outdated,
        resolved=resolved,
        include_all=include_all,
        comment_type=comment_type,
    )
    run_list(ctx, ListOptions(pr=pr, filter=flt, json=as_json))


def run_list(ctx, opts: ListOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr)

    rows: list[dict] = []
    if opts.filter.wants_review_comments:
        reconciled = load_review_comments(client, ref)
        rows.extend(unified_review_comment(c) for c in filter_review_comments(reconciled.comments, opts.filter))
    if opts.filter.wants_issue_comments:
        rows.extend(unified_issue_comment(c) for c in client.get_issue_comments(ref))

    if opts.json:
        echo_json(rows)
        return

    if not rows:
        console.print("No comments found.")
        return

    width = get_config(ctx)["list_body_width"]
    table = Table(box=None, show_header=True, header_style="bold cyan", pad_edge=False)
    for name in ("TYPE", "ID", "FILE", "LINE", "OUTDATED", "RESOLVED", "AUTHOR"):
        table.add_column(name, no_wrap=name in ("TYPE", "ID", "LINE"))
    table.add_column("BODY")

    for row in rows:
        is_review = row["type"] == "review"
        table.add_row(
            row["type"],
            str(row["id"]),
            plain(row.get("file", "")),
            row.get("line", ""),
            str(row["outdated"]).lower() if is_review else "",
            str(row["resolved"]).lower() if is_review else "",
            plain(row["author"]),
            plain(truncate(row["body"], width)),
        )

    console.print(table)
