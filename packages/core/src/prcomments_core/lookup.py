"""Find any PR item (review comment, review, issue comment) by numeric ID."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Union

from prcomments_core.errors import InvalidArgumentError, NotFoundError
from prcomments_core.models import IssueComment, PRReference, Review, ReviewComment
from prcomments_core.threads import ThreadIndex, load_review_comments

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient

Item = Union[ReviewComment, Review, IssueComment]


class ItemKind(str, Enum):
    REVIEW_COMMENT = "review_comment"
    REVIEW = "review"
    ISSUE_COMMENT = "issue_comment"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


ALL_KINDS = (ItemKind.REVIEW_COMMENT, ItemKind.REVIEW, ItemKind.ISSUE_COMMENT)


@dataclass
class PullRequestSnapshot:
    """Everything fetched for one PR, reconciled once and reused by every lookup."""

    ref: PRReference
    reviews: list[Review] = field(default_factory=list)
    review_comments: list[ReviewComment] = field(default_factory=list)
    issue_comments: list[IssueComment] = field(default_factory=list)
    index: ThreadIndex = field(default_factory=ThreadIndex)
    kinds: tuple[ItemKind, ...] = ALL_KINDS

    def items(self, kind: ItemKind) -> list:
        if kind is ItemKind.REVIEW_COMMENT:
            return self.review_comments
        if kind is ItemKind.REVIEW:
            return self.reviews
        return self.issue_comments


def load_snapshot(
    client: GitHubClient,
    ref: PRReference,
    kinds: tuple[ItemKind, ...] = ALL_KINDS,
    with_threads: bool = True,
) -> PullRequestSnapshot:
    """Fetch only the collections ``kinds`` asks for.

    ``with_threads=False`` skips the GraphQL thread lookup when resolved
    status is irrelevant to the caller.
    """
    snapshot = PullRequestSnapshot(ref=ref, kinds=tuple(kinds))
    if ItemKind.REVIEW_COMMENT in kinds:
        if with_threads:
            reconciled = load_review_comments(client, ref)
            snapshot.review_comments = reconciled.comments
            snapshot.index = reconciled.index
        else:
            snapshot.review_comments = client.get_review_comments(ref)
    if ItemKind.REVIEW in kinds:
        snapshot.reviews = client.get_reviews(ref)
    if ItemKind.ISSUE_COMMENT in kinds:
        snapshot.issue_comments = client.get_issue_comments(ref)
    return snapshot


def parse_item_id(text: str, what: str = "comment") -> int:
    text = str(text).strip()
    if not text.isdigit():
        raise InvalidArgumentError(f"invalid {what} ID: {text}")
    return int(text)


@dataclass(frozen=True)
class LookupResult:
    found: bool
    kind: ItemKind | None = None
    item: Item | None = None


def find_item(snapshot: PullRequestSnapshot, item_id: int, kinds: tuple[ItemKind, ...] | None = None) -> LookupResult:
    """Search review comments, then reviews, then issue comments for ``item_id``."""
    for kind in ALL_KINDS:
        if kind not in (kinds or snapshot.kinds):
            continue
        for item in snapshot.items(kind):
            if item.id == item_id:
                return LookupResult(found=True, kind=kind, item=item)
    return LookupResult(found=False)


def require_item(snapshot: PullRequestSnapshot, item_id: int, kinds: tuple[ItemKind, ...] | None = None) -> LookupResult:
    result = find_item(snapshot, item_id, kinds)
    if not result.found:
        searched = [k.label + "s" for k in ALL_KINDS if k in (kinds or snapshot.kinds)]
        raise NotFoundError(
            f"item with ID {item_id} not found in PR {snapshot.ref.number} (searched {_join(searched)})"
        )
    return result


def _join(words: list[str]) -> str:
    if len(words) <= 1:
        return "".join(words)
    return ", ".join(words[:-1]) + " and " + words[-1]
