"""Minimize reviews whose inline comments have all been resolved."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from github import GithubException

from prcomments_core.errors import NotFoundError
from prcomments_core.filters import comments_by_review
from prcomments_core.models import Classifier, Review, ReviewComment

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)

REASON_NO_COMMENTS = "no inline comments"
REASON_UNRESOLVED = "has unresolved comments"


@dataclass
class CleanupCandidate:
    review: Review
    total_comments: int
    resolved_comments: int
    can_minimize: bool = False
    reason: str | None = None

    def to_dict(self) -> dict:
        data = {
            "review": self.review.to_dict(),
            "total_comments": self.total_comments,
            "resolved_comments": self.resolved_comments,
            "can_minimize": self.can_minimize,
        }
        if self.reason:
            data["reason"] = self.reason
        return data


@dataclass
class CleanupReport:
    pr_number: int
    dry_run: bool
    minimized: list[CleanupCandidate] = field(default_factory=list)
    skipped: list[CleanupCandidate] = field(default_factory=list)
    failed: list[CleanupCandidate] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "pr_number": self.pr_number,
            "dry_run": self.dry_run,
            "minimized": [c.to_dict() for c in self.minimized],
            "skipped": [c.to_dict() for c in self.skipped],
            "failed": [c.to_dict() for c in self.failed],
        }


def identify_candidates(reviews: list[Review], comments: list[ReviewComment]) -> list[CleanupCandidate]:
    """A review qualifies iff it has at least one inline comment and every one is resolved."""
    grouped = comments_by_review(comments)
    candidates = []
    for review in reviews:
        own = grouped.get(review.id, [])
        resolved = sum(1 for c in own if c.resolved)
        candidate = CleanupCandidate(review=review, total_comments=len(own), resolved_comments=resolved)
        if not own:
            candidate.reason = REASON_NO_COMMENTS
        elif resolved < len(own):
            candidate.reason = REASON_UNRESOLVED
        else:
            candidate.can_minimize = True
        candidates.append(candidate)
    return candidates


def only_review(candidates: list[CleanupCandidate], review_id: int) -> list[CleanupCandidate]:
    selected = [c for c in candidates if c.review.id == review_id]
    if not selected:
        raise NotFoundError(f"review with ID {review_id} not found")
    return selected


def run_cleanup(
    client: GitHubClient,
    candidates: list[CleanupCandidate],
    pr_number: int,
    dry_run: bool = False,
) -> CleanupReport:
    report = CleanupReport(pr_number=pr_number, dry_run=dry_run)
    for candidate in candidates:
        if not candidate.can_minimize:
            report.skipped.append(candidate)
            continue
        if dry_run:
            report.minimized.append(candidate)
            continue
        try:
            client.minimize_comment(candidate.review.node_id, Classifier.RESOLVED)
            report.minimized.append(candidate)
        except GithubException as e:
            logger.debug("Minimizing review %d failed: %s", candidate.review.id, e)
            candidate.can_minimize = False
            candidate.reason = str(e)
            report.failed.append(candidate)
    return report
