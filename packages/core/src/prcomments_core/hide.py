"""Hide (minimize) and unhide PR comments, singly or in author batches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from github import GithubException

from prcomments_core.errors import InvalidArgumentError
from prcomments_core.lookup import ItemKind, LookupResult, PullRequestSnapshot
from prcomments_core.models import Classifier

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)

HIDEABLE_KINDS = (ItemKind.REVIEW_COMMENT, ItemKind.REVIEW, ItemKind.ISSUE_COMMENT)


@dataclass
class HideResult:
    id: int
    node_id: str
    kind: ItemKind
    author: str
    action: str = ""  # "hide" | "unhide" | "would_hide" | "would_unhide"
    success: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "node_id": self.node_id,
            "type": self.kind.value,
            "author": self.author,
            "action": self.action,
            "success": self.success,
        }
        if self.error:
            data["error"] = self.error
        return data


def target_from_lookup(result: LookupResult) -> HideResult:
    item = result.item
    if not item.node_id:
        raise InvalidArgumentError(f"{result.kind.label} {item.id} has no node ID and cannot be hidden")
    return HideResult(id=item.id, node_id=item.node_id, kind=result.kind, author=item.author)


def select_by_author(snapshot: PullRequestSnapshot, author: str) -> list[HideResult]:
    """Every review comment and issue comment written by ``author`` (case-insensitive)."""
    wanted = author.lower()
    targets = []
    for kind in (ItemKind.REVIEW_COMMENT, ItemKind.ISSUE_COMMENT):
        for item in snapshot.items(kind):
            if item.author.lower() == wanted:
                targets.append(HideResult(id=item.id, node_id=item.node_id, kind=kind, author=item.author))
    return targets


def apply_hide(
    client: GitHubClient,
    targets: list[HideResult],
    classifier: Classifier | None,
    undo: bool = False,
    dry_run: bool = False,
) -> list[HideResult]:
    """Minimize (or unminimize) each target in turn, recording failures instead of raising."""
    if not undo and classifier is None:
        raise InvalidArgumentError("a reason is required to hide comments")

    for target in targets:
        if dry_run:
            target.action = "would_unhide" if undo else "would_hide"
            target.success = True
            continue

        target.action = "unhide" if undo else "hide"
        try:
            if undo:
                client.unminimize_comment(target.node_id)
            else:
                client.minimize_comment(target.node_id, classifier)
            target.success = True
        except GithubException as e:
            logger.debug("%s of %s %d failed: %s", target.action, target.kind.label, target.id, e)
            target.success = False
            target.error = str(e)

    return targets
