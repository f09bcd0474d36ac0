"""resolve: resolve or unresolve review threads by comment ID."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import click
from github import GithubException
from rich.console import Console

from prcomments_cli.common import RULE, echo_json, err_console, get_client, get_config, get_ref, handle_errors
from prcomments_core.cleanup import CleanupReport, identify_candidates, run_cleanup
from prcomments_core.lookup import parse_item_id
from prcomments_core.resolve import ResolveResult, resolve_comments
from prcomments_core.threads import load_review_comments, load_thread_index

console = Console()
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolveOptions:
    comment_ids: tuple[int, ...]
    pr: str | None
    undo: bool
    auto_cleanup: bool
    json: bool


@click.command("resolve")
@click.argument("comment_ids", nargs=-1, required=True)
@click.option("--pr", default=None, help="PR reference (e.g. owner/repo/123 or just 123).")
@click.option("--undo", is_flag=True, help="Unresolve the threads instead.")
@click.option("--no-cleanup", is_flag=True, help="Do not minimize reviews that become fully resolved.")
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.pass_context
@handle_errors
def resolve_cmd(ctx, comment_ids: tuple[str, ...], pr: str | None, undo: bool, no_cleanup: bool, as_json: bool):
    """Mark the review threads containing the given comments as resolved.

    Each comment belongs to a review thread; the whole thread is resolved.
    Afterwards, reviews whose inline comments are now all resolved are
    minimized (disable with --no-cleanup or `auto_cleanup: false`).

    \b
    Examples:
      prcomments resolve 2621968472
      prcomments resolve 2621968472 2621968473 --pr owner/repo/99
      prcomments resolve 2621968472 --undo
    """
    opts = ResolveOptions(
        comment_ids=tuple(parse_item_id(c) for c in comment_ids),
        pr=pr,
        undo=undo,
        auto_cleanup=get_config(ctx)["auto_cleanup"] and not no_cleanup,
        json=as_json,
    )
    run_resolve(ctx, opts)


def run_resolve(ctx, opts: ResolveOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr, hint=True)

    index = load_thread_index(client, ref)
    results = resolve_comments(client, index, list(opts.comment_ids), undo=opts.undo)

    cleanup = None
    if opts.auto_cleanup and not opts.undo and any(r.success and not r.skipped for r in results):
        cleanup = auto_cleanup(client, ref)

    if opts.json:
        data = {"results": [r.to_dict() for r in results]}
        if cleanup is not None and (cleanup.minimized or cleanup.failed):
            data["cleanup"] = cleanup.to_dict()
        echo_json(data)
        return

    print_results(results, cleanup)


def auto_cleanup(client, ref) -> CleanupReport | None:
    """Minimize reviews left fully resolved; failures here never fail the resolve."""
    try:
        reviews = client.get_reviews(ref)
        comments = load_review_comments(client, ref).comments
    except GithubException as e:
        logger.warning("auto-cleanup skipped: %s", e)
        return None
    return run_cleanup(client, identify_candidates(reviews, comments), ref.number)


def print_results(results: list[ResolveResult], cleanup: CleanupReport | None) -> None:
    succeeded = skipped = failed = 0
    for r in results:
        if r.skipped:
            skipped += 1
            console.print(f"Skipped comment {r.comment_id} (thread already processed)")
        elif r.success:
            succeeded += 1
            console.print(f"Thread {r.action} for comment {r.comment_id}")
        else:
            failed += 1
            err_console.print(
                f"Failed to update thread for comment {r.comment_id}: {r.error}", markup=False, soft_wrap=True
            )

    action = results[0].action if results else "resolved"
    console.print(RULE * 40)
    if succeeded:
        console.print(f"Done: {succeeded} thread(s) {action}")
    if skipped:
        console.print(f"Skipped: {skipped} comment(s) (same thread)")
    if failed:
        console.print(f"Failed: {failed} thread(s)")

    if cleanup is None or not (cleanup.minimized or cleanup.failed):
        return

    console.print()
    console.print("Auto-cleanup:")
    for c in cleanup.minimized:
        console.print(f"  Minimized review {c.review.id} by @{c.review.author}", markup=False)
    for c in cleanup.failed:
        err_console.print(f"  Failed to minimize review {c.review.id}: {c.reason}", markup=False, soft_wrap=True)
    if cleanup.minimized:
        console.print(f"Cleaned up: {len(cleanup.minimized)} review(s) minimized")
