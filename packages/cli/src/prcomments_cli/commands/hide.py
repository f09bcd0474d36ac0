"""hide: minimize (or unminimize) PR comments."""

from __future__ import annotations

from dataclasses import dataclass

import click
from rich.console import Console

from prcomments_cli.common import RULE, echo_json, err_console, get_client, get_config, get_ref, handle_errors
from prcomments_core.hide import HIDEABLE_KINDS, HideResult, apply_hide, select_by_author, target_from_lookup
from prcomments_core.lookup import ItemKind, load_snapshot, parse_item_id, require_item
from prcomments_core.models import Classifier

console = Console()

_ACTION_LABELS = {
    "hide": "Hidden",
    "unhide": "Unhidden",
    "would_hide": "Would hide",
    "would_unhide": "Would unhide",
}

_REASONS = tuple(c.cli_name for c in Classifier)


@dataclass(frozen=True)
class HideOptions:
    item_id: int | None
    classifier: Classifier | None
    undo: bool
    author: str | None
    dry_run: bool
    pr: str | None
    json: bool


@click.command("hide")
@click.argument("item_id", required=False)
@click.option(
    "--reason",
    type=click.Choice(_REASONS, case_sensitive=False),
    default=None,
    help="Reason for hiding (default from config: resolved).",
)
@click.option("--undo", is_flag=True, help="Unhide instead.")
@click.option("--author", default=None, help="Hide every comment by this author (batch mode).")
@click.option("--dry-run", is_flag=True, help="Show what would be hidden without doing it.")
@click.option("--pr", default=None, help="PR reference (e.g. owner/repo/123 or just 123).")
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.pass_context
@handle_errors
def hide_cmd(
    ctx,
    item_id: str | None,
    reason: str | None,
    undo: bool,
    author: str | None,
    dry_run: bool,
    pr: str | None,
    as_json: bool,
):
    """Hide PR comments by marking them with a reason.

    With an ID, hides that comment (or review). Without one, --author
    selects every review comment and issue comment by that author.

    \b
    Examples:
      prcomments hide 2621968472
      prcomments hide 2621968472 --reason outdated
      prcomments hide --author "claude[bot]" --reason outdated --dry-run
      prcomments hide 2621968472 --undo
    """
    if item_id is None and not author:
        raise click.UsageError(
            "batch hide requires --author filter\n"
            "Provide a comment ID for a single comment, or use --author for batch operations"
        )
    opts = HideOptions(
        item_id=parse_item_id(item_id) if item_id is not None else None,
        classifier=None if undo else Classifier.parse(reason or get_config(ctx)["hide_reason"]),
        undo=undo,
        author=author,
        dry_run=dry_run,
        pr=pr,
        json=as_json,
    )
    run_hide(ctx, opts)


def run_hide(ctx, opts: HideOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr, hint=True)

    if opts.item_id is not None:
        snapshot = load_snapshot(client, ref, HIDEABLE_KINDS, with_threads=False)
        target = target_from_lookup(require_item(snapshot, opts.item_id))
        (result,) = apply_hide(client, [target], opts.classifier, undo=opts.undo, dry_run=opts.dry_run)
        if opts.json:
            echo_json(result.to_dict())
        else:
            print_result(result)
        return

    snapshot = load_snapshot(client, ref, (ItemKind.REVIEW_COMMENT, ItemKind.ISSUE_COMMENT), with_threads=False)
    targets = select_by_author(snapshot, opts.author)
    if not targets:
        if opts.json:
            echo_json([])
        else:
            console.print(f"No comments found by author '{opts.author}'", markup=False)
        return

    results = apply_hide(client, targets, opts.classifier, undo=opts.undo, dry_run=opts.dry_run)
    if opts.json:
        echo_json([r.to_dict() for r in results])
        return

    for r in results:
        print_result(r)
    console.print(RULE * 40)
    if opts.dry_run:
        console.print(f"Dry run: {len(results)} comment(s) would be processed")
    else:
        succeeded = sum(1 for r in results if r.success)
        console.print(f"Processed: {succeeded} succeeded, {len(results) - succeeded} failed")


def print_result(result: HideResult) -> None:
    if result.success:
        label = _ACTION_LABELS.get(result.action, "Hidden")
        console.print(f"{label} {result.kind.label} {result.id} (by {result.author})", markup=False)
    else:
        err_console.print(
            f"Failed to process {result.kind.label} {result.id}: {result.error}", markup=False, soft_wrap=True
        )
