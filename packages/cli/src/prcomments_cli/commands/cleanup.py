"""cleanup: minimize reviews whose inline comments are all resolved."""

from __future__ import annotations

from dataclasses import dataclass

import click
from rich.console import Console

from prcomments_cli.common import RULE, echo_json, err_console, get_client, get_ref, handle_errors
from prcomments_core.cleanup import CleanupCandidate, CleanupReport, identify_candidates, only_review, run_cleanup
from prcomments_core.threads import load_review_comments
from prcomments_core.utils.text import format_time

console = Console()


@dataclass(frozen=True)
class CleanupOptions:
    pr: str | None
    dry_run: bool
    review_id: int | None
    json: bool


@click.command("cleanup")
@click.argument("pr", required=False)
@click.option("--dry-run", is_flag=True, help="Preview which reviews would be minimized without making changes.")
@click.option("--review-id", type=int, default=None, help="Only process a specific review ID.")
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.pass_context
@handle_errors
def cleanup_cmd(ctx, pr: str | None, dry_run: bool, review_id: int | None, as_json: bool):
    """Minimize PR reviews whose inline comments are all resolved.

    \b
    Reviews are left alone when they:
      - have no inline comments (nothing to clean up)
      - have any unresolved comment
    """
    run_cleanup_cmd(ctx, CleanupOptions(pr=pr, dry_run=dry_run, review_id=review_id, json=as_json))


def run_cleanup_cmd(ctx, opts: CleanupOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr)

    reviews = client.get_reviews(ref)
    comments = load_review_comments(client, ref).comments

    candidates = identify_candidates(reviews, comments)
    if opts.review_id is not None:
        candidates = only_review(candidates, opts.review_id)

    report = run_cleanup(client, candidates, ref.number, dry_run=opts.dry_run)

    if opts.json:
        echo_json(report.to_dict())
        return

    print_report(report)


def _review_line(c: CleanupCandidate) -> str:
    r = c.review
    return f"  Review {r.id} by @{r.author} ({r.state}) - {format_time(r.submitted_at, '%Y-%m-%d')}"


def print_report(report: CleanupReport) -> None:
    if report.dry_run:
        console.print(f"Analyzing PR #{report.pr_number} for cleanup...\n")
    else:
        console.print(f"Cleaning up PR #{report.pr_number}...\n")

    if report.minimized:
        console.print("Reviews that would be minimized:" if report.dry_run else "Minimized reviews:")
        for c in report.minimized:
            console.print(_review_line(c), markup=False)
            console.print(f"    {c.resolved_comments}/{c.total_comments} comments resolved")
        console.print()

    if report.skipped:
        console.print("Reviews not eligible for cleanup:")
        for c in report.skipped:
            console.print(_review_line(c), markup=False)
            console.print(f"    {c.resolved_comments}/{c.total_comments} comments resolved ({c.reason})", markup=False)
        console.print()

    if report.failed:
        err_console.print("Failed to minimize:")
        for c in report.failed:
            err_console.print(_review_line(c), markup=False)
            err_console.print(f"    Error: {c.reason}", markup=False, soft_wrap=True)
        console.print()

    console.print(RULE * 40)
    if report.dry_run:
        console.print(f"Total: {len(report.minimized)} review(s) would be minimized")
    else:
        console.print(f"Done: {len(report.minimized)} review(s) minimized")
        if report.failed:
            console.print(f"Failed: {len(report.failed)} review(s)")
