"""reviews: list every review on a pull request."""

from __future__ import annotations

from dataclasses import dataclass

import click
from rich.console import Console
from rich.table import Table

from prcomments_cli.common import echo_json, get_client, get_config, get_ref, handle_errors, plain, styled
from prcomments_core.utils.text import format_time, truncate

console = Console()

_STATE_STYLE = {
    "APPROVED": "green",
    "CHANGES_REQUESTED": "red",
    "COMMENTED": "yellow",
    "DISMISSED": "dim",
    "PENDING": "cyan",
}


@dataclass(frozen=True)
class ReviewsOptions:
    pr: str | None
    json: bool


@click.command("reviews")
@click.argument("pr", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format.")
@click.pass_context
@handle_errors
def reviews_cmd(ctx, pr: str | None, as_json: bool):
    """List all reviews on a pull request with their states.

    If no PR reference is given, finds the PR for the current branch.
    """
    run_reviews(ctx, ReviewsOptions(pr=pr, json=as_json))


def run_reviews(ctx, opts: ReviewsOptions) -> None:
    client = get_client(ctx)
    ref = get_ref(ctx, opts.pr)
    reviews = client.get_reviews(ref)

    if opts.json:
        echo_json([r.to_dict() for r in reviews])
        return

    if not reviews:
        console.print("[yellow]No reviews found.[/yellow]")
        return

    width = get_config(ctx)["review_body_width"]
    table = Table(box=None, show_header=True, header_style="bold cyan", pad_edge=False)
    table.add_column("ID", no_wrap=True)
    table.add_column("STATE", no_wrap=True)
    table.add_column("AUTHOR")
    table.add_column("SUBMITTED", no_wrap=True)
    table.add_column("BODY")

    for r in reviews:
        style = _STATE_STYLE.get(r.state, "white")
        table.add_row(
            str(r.id),
            styled(r.state, style),
            plain(r.author),
            format_time(r.submitted_at),
            plain(truncate(r.body, width)),
        )

    console.print(table)
