"""view/show: full content of a review, review comment or issue comment."""

from __future__ import annotations

from dataclasses import dataclass

import click
from rich.console import Console

from prcomments_cli.common import RULE, echo_json, get_client, get_ref, handle_errors, plain
from prcomments_core.lookup import ItemKind, load_snapshot, parse_item_id, require_item
from prcomments_core.models import IssueComment, Review, ReviewComment
from prcomments_core.utils.text import format_time

console = Console()

_DETAIL_TIME = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class ViewOptions:
    item_id: int
    pr: str | None
    json: bool


@click.command("view")
@click.argument("item_id")
@click.option("--pr", default=None, help="PR reference (e.g. owner/repo/123 or just 123).")
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.pass_context
@handle_errors
def view_cmd(ctx, item_id: str, pr: str | None, as_json: bool):
    """View the full content of an item by its ID.

    The type (review comment, review or issue comment) is detected
    automatically. IDs come from the list, reviews and tree commands.
    """
    run_view(ctx, ViewOptions(item_id=parse_item_id(item_id, "item"), pr=pr, json=as_json))


def run_view(ctx, opts: ViewOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr, hint=True)
    snapshot = load_snapshot(client, ref)
    result = require_item(snapshot, opts.item_id)

    if opts.json:
        echo_json({"type": result.kind.value, **result.item.to_dict()})
        return

    if result.kind is ItemKind.REVIEW_COMMENT:
        print_review_comment(result.item)
    elif result.kind is ItemKind.REVIEW:
        print_review(result.item)
    else:
        print_issue_comment(result.item)


def _field(name: str, value) -> None:
    console.print(plain(f"{name + ':':<11}{value}"), soft_wrap=True)


def _rule() -> None:
    console.print(RULE * 60)


def print_review_comment(c: ReviewComment) -> None:
    console.print(f"[bold]Review Comment {c.id}[/bold]")
    _rule()
    line = c.display_line
    _field("File", c.path + (f":{line}" if line is not None else ""))
    _field("Author", c.author)
    _field("Created", format_time(c.created_at, _DETAIL_TIME))
    _field("Review ID", c.review_id)
    _field("Outdated", str(c.outdated).lower())
    _field("Resolved", str(c.resolved).lower())
    _field("URL", c.html_url)
    _rule()
    console.print()
    console.print(plain(c.body), soft_wrap=True)
    console.print()

    if c.diff_hunk:
        _rule()
        console.print("Diff context:")
        _rule()
        console.print(plain(c.diff_hunk), soft_wrap=True)


def print_review(r: Review) -> None:
    console.print(f"[bold]Review {r.id}[/bold]")
    _rule()
    _field("Author", r.author)
    _field("State", r.state)
    if r.submitted_at:
        _field("Submitted", format_time(r.submitted_at, _DETAIL_TIME))
    _field("URL", r.html_url)
    _rule()
    console.print()
    console.print(plain(r.body) if r.body else "(no body)", soft_wrap=True)
    console.print()


def print_issue_comment(c: IssueComment) -> None:
    console.print(f"[bold]Issue Comment {c.id}[/bold]")
    _rule()
    _field("Author", c.author)
    _field("Created", format_time(c.created_at, _DETAIL_TIME))
    if c.updated_at and c.updated_at != c.created_at:
        _field("Updated", format_time(c.updated_at, _DETAIL_TIME))
    _field("URL", c.html_url)
    _rule()
    console.print()
    console.print(plain(c.body), soft_wrap=True)
    console.print()
