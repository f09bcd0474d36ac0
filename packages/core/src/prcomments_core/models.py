"""Pull request review data mapped from PyGithub objects and GraphQL nodes.

REST supplies reviews, review comments and issue comments keyed by integer
IDs. Review threads only exist in GraphQL, so ``ReviewComment.thread_id`` and
``ReviewComment.resolved`` stay at their defaults until
``prcomments_core.threads.reconcile`` fills them in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from prcomments_core.errors import InvalidArgumentError


class Classifier(str, Enum):
    """Reasons accepted by the minimizeComment mutation."""

    ABUSE = "ABUSE"
    DUPLICATE = "DUPLICATE"
    OFF_TOPIC = "OFF_TOPIC"
    OUTDATED = "OUTDATED"
    RESOLVED = "RESOLVED"
    SPAM = "SPAM"

    @classmethod
    def parse(cls, value: str) -> Classifier:
        """Accept ``off-topic``, ``off_topic`` or ``OFF_TOPIC`` style spellings."""
        key = (value or "").strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(c.cli_name for c in cls)
            raise InvalidArgumentError(f"invalid reason: {value!r} (expected one of: {choices})") from None

    @property
    def cli_name(self) -> str:
        return self.value.lower().replace("_", "-")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _login(obj) -> str:
    user = obj.user
    return user.login if user is not None else ""


@dataclass(frozen=True)
class PRReference:
    """Identifies one pull request. ``owner``/``repo`` are empty for a bare number."""

    owner: str
    repo: str
    number: int

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_complete(self) -> bool:
        return bool(self.owner and self.repo)

    def __str__(self) -> str:
        return f"{self.slug}#{self.number}"


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    state: str
    author: str
    html_url: str = ""
    head_ref: str = ""

    @classmethod
    def from_github(cls, pull) -> PullRequest:
        head = pull.head
        return cls(
            number=pull.number,
            title=pull.title or "",
            state=pull.state or "",
            author=_login(pull),
            html_url=pull.html_url or "",
            head_ref=head.ref if head is not None else "",
        )

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "title": self.title,
            "state": self.state,
            "author": self.author,
            "html_url": self.html_url,
            "head_ref": self.head_ref,
        }


@dataclass(frozen=True)
class Review:
    """A submitted (or pending) PR review with its overall state."""

    id: int
    node_id: str
    author: str
    state: str
    body: str = ""
    submitted_at: datetime | None = None
    html_url: str = ""

    @classmethod
    def from_github(cls, review) -> Review:
        return cls(
            id=review.id,
            node_id=review.node_id or "",
            author=_login(review),
            state=review.state or "PENDING",
            body=review.body or "",
            submitted_at=review.submitted_at,
            html_url=review.html_url or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "node_id": self.node_id,
            "author": self.author,
            "state": self.state,
            "body": self.body,
            "submitted_at": _iso(self.submitted_at),
            "html_url": self.html_url,
        }


@dataclass(frozen=True)
class ReviewComment:
    """An inline comment attached to a file/line of the PR diff."""

    id: int
    node_id: str
    review_id: int | None
    path: str
    body: str
    author: str
    position: int | None = None
    original_position: int | None = None
    line: int | None = None
    original_line: int | None = None
    start_line: int | None = None
    diff_hunk: str = ""
    commit_id: str = ""
    original_commit_id: str = ""
    in_reply_to_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    html_url: str = ""
    # Filled in by reconciliation; REST has no notion of threads.
    thread_id: str | None = None
    resolved: bool = False

    @property
    def outdated(self) -> bool:
        """GitHub nulls position/line once the diff context no longer applies."""
        return self.position is None or self.line is None

    @property
    def display_line(self) -> int | None:
        return self.original_line if self.original_line is not None else self.line

    @classmethod
    def from_github(cls, comment) -> ReviewComment:
        """Map a PyGithub ``PullRequestComment``; only attributes present in list responses are read."""
        return cls(
            id=comment.id,
            node_id=comment.node_id or "",
            review_id=comment.pull_request_review_id,
            path=comment.path or "",
            body=comment.body or "",
            author=_login(comment),
            position=comment.position,
            original_position=comment.original_position,
            line=comment.line,
            original_line=comment.original_line,
            start_line=comment.start_line,
            diff_hunk=comment.diff_hunk or "",
            commit_id=comment.commit_id or "",
            original_commit_id=comment.original_commit_id or "",
            in_reply_to_id=comment.in_reply_to_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            html_url=comment.html_url or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "node_id": self.node_id,
            "review_id": self.review_id,
            "path": self.path,
            "line": self.line,
            "original_line": self.original_line,
            "position": self.position,
            "author": self.author,
            "body": self.body,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "html_url": self.html_url,
            "in_reply_to_id": self.in_reply_to_id,
            "thread_id": self.thread_id,
            "outdated": self.outdated,
            "resolved": self.resolved,
        }


@dataclass(frozen=True)
class IssueComment:
    """A general PR conversation comment; it can be hidden but never resolved."""

    id: int
    node_id: str
    author: str
    body: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    html_url: str = ""

    @classmethod
    def from_github(cls, comment) -> IssueComment:
        return cls(
            id=comment.id,
            node_id=comment.node_id or "",
            author=_login(comment),
            body=comment.body or "",
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            html_url=comment.html_url or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "node_id": self.node_id,
            "author": self.author,
            "body": self.body,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "html_url": self.html_url,
        }


@dataclass(frozen=True)
class ReviewThread:
    """GraphQL-only grouping of review comments that share a resolved state."""

    id: str
    resolved: bool
    comment_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_graphql(cls, node: dict) -> ReviewThread:
        comments = (node.get("comments") or {}).get("nodes") or []
        return cls(
            id=node["id"],
            resolved=bool(node.get("isResolved")),
            comment_ids=tuple(c["databaseId"] for c in comments if c.get("databaseId") is not None),
        )
