"""In-memory filtering and grouping of already-fetched review data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from prcomments_core.errors import InvalidArgumentError
from prcomments_core.models import IssueComment, Review, ReviewComment

COMMENT_TYPES = ("review", "issue")

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)
_FAR_PAST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class CommentFilter:
    """AND-composed predicates applied to review comments.

    Resolved comments are excluded unless ``include_all`` is set or
    ``resolved`` asks for a specific value.
    """

    review_id: int | None = None
    outdated: bool | None = None
    resolved: bool | None = None
    include_all: bool = False
    comment_type: str | None = None

    def __post_init__(self):
        if self.comment_type is not None and self.comment_type not in COMMENT_TYPES:
            raise InvalidArgumentError(f"invalid comment type: {self.comment_type!r} (expected review or issue)")

    @property
    def wants_review_comments(self) -> bool:
        return self.comment_type in (None, "review")

    @property
    def wants_issue_comments(self) -> bool:
        return self.comment_type in (None, "issue")

    def matches(self, comment: ReviewComment) -> bool:
        if self.review_id is not None and comment.review_id != self.review_id:
            return False
        if self.outdated is not None and comment.outdated != self.outdated:
            return False
        if self.include_all:
            return True
        if self.resolved is not None:
            return comment.resolved == self.resolved
        return not comment.resolved


def filter_review_comments(comments: list[ReviewComment], flt: CommentFilter) -> list[ReviewComment]:
    return [c for c in comments if flt.matches(c)]


@dataclass
class ReviewGroup:
    review: Review
    comments: list[ReviewComment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"review": self.review.to_dict(), "comments": [c.to_dict() for c in self.comments]}


def comments_by_review(comments: list[ReviewComment]) -> dict[int | None, list[ReviewComment]]:
    grouped: dict[int | None, list[ReviewComment]] = {}
    for c in comments:
        grouped.setdefault(c.review_id, []).append(c)
    return grouped


def group_by_review(reviews: list[Review], comments: list[ReviewComment]) -> list[ReviewGroup]:
    """Attach comments to their reviews, oldest submission first (pending reviews last)."""
    grouped = comments_by_review(comments)
    groups = [ReviewGroup(review=r, comments=grouped.get(r.id, [])) for r in reviews]
    groups.sort(key=lambda g: g.review.submitted_at or _FAR_FUTURE)
    return groups


def sort_issue_comments(comments: list[IssueComment]) -> list[IssueComment]:
    return sorted(comments, key=lambda c: c.created_at or _FAR_PAST)
