"""tree: reviews, their inline comments and issue comments as a tree."""

from __future__ import annotations

from dataclasses import dataclass

import click
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from prcomments_cli.common import echo_json, get_client, get_config, get_ref, handle_errors, plain
from prcomments_core.filters import CommentFilter, ReviewGroup, filter_review_comments, group_by_review, sort_issue_comments
from prcomments_core.models import IssueComment, PullRequest, ReviewComment
from prcomments_core.threads import load_review_comments
from prcomments_core.utils.text import format_time, truncate

console = Console()


@dataclass(frozen=True)
class TreeOptions:
    pr: str | None
    include_all: bool
    json: bool


@click.command("tree")
@click.argument("pr", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.option("--all", "include_all", is_flag=True, help="Show all comments including resolved.")
@click.pass_context
@handle_errors
def tree_cmd(ctx, pr: str | None, as_json: bool, include_all: bool):
    """Show a tree of reviews and their comments on a pull request.

    Resolved comments are hidden unless --all is given.
    """
    run_tree(ctx, TreeOptions(pr=pr, include_all=include_all, json=as_json))


def run_tree(ctx, opts: TreeOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr)

    pull = client.get_pull_request(ref)
    reviews = client.get_reviews(ref)
    reconciled = load_review_comments(client, ref)
    issue_comments = sort_issue_comments(client.get_issue_comments(ref))

    comments = filter_review_comments(reconciled.comments, CommentFilter(include_all=opts.include_all))
    groups = group_by_review(reviews, comments)

    if opts.json:
        echo_json(
            {
                "pull_request": pull.to_dict(),
                "reviews": [g.to_dict() for g in groups],
                "issue_comments": [c.to_dict() for c in issue_comments],
            }
        )
        return

    console.print(build_tree(pull, groups, issue_comments, get_config(ctx)["tree_body_width"]))


def _comment_label(c: ReviewComment) -> Text:
    line = c.display_line
    location = c.path + (f":{line}" if line is not None else "")
    marks = [m for m, on in (("outdated", c.outdated), ("resolved", c.resolved)) if on]
    label = Text.assemble((f"[{c.id}] ", "bold"), location)
    if marks:
        label.append(f" ({', '.join(marks)})", style="dim")
    return label


def build_tree(pull: PullRequest, groups: list[ReviewGroup], issue_comments: list[IssueComment], width: int) -> Tree:
    root = Tree(Text(f"PR #{pull.number}: {pull.title}", style="bold"))

    for group in groups:
        r = group.review
        branch = root.add(
            Text(f"Review {r.id} by {r.author} ({r.state}) - {format_time(r.submitted_at, '%Y-%m-%d')}")
        )
        if r.body:
            branch.add(plain(truncate(r.body, width)), guide_style="dim")
        if not group.comments:
            branch.add(Text("(no inline comments)", style="dim"))
            continue
        for c in group.comments:
            branch.add(_comment_label(c)).add(plain(truncate(c.body, width)))

    if issue_comments:
        issues = root.add(Text(f"Issue Comments ({len(issue_comments)})"))
        for c in issue_comments:
            issues.add(Text(f"{c.id} by {c.author} - {format_time(c.created_at, '%Y-%m-%d')}"))

    return root
