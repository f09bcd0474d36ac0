"""Resolve or unresolve the review threads that own a set of comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from github import GithubException

from prcomments_core.threads import ThreadIndex

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    comment_id: int
    action: str  # "resolved" | "unresolved"
    thread_id: str | None = None
    success: bool = False
    skipped: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "comment_id": self.comment_id,
            "thread_id": self.thread_id,
            "action": self.action,
            "success": self.success,
        }
        if self.skipped:
            data["skipped"] = True
        if self.error:
            data["error"] = self.error
        return data


def resolve_comments(
    client: GitHubClient,
    index: ThreadIndex,
    comment_ids: list[int],
    undo: bool = False,
) -> list[ResolveResult]:
    """Issue one mutation per distinct thread; later IDs in the same thread are skipped."""
    action = "unresolved" if undo else "resolved"
    mutate = client.unresolve_thread if undo else client.resolve_thread

    results: list[ResolveResult] = []
    processed: set[str] = set()

    for comment_id in comment_ids:
        thread_id = index.thread_for(comment_id)
        if thread_id is None:
            results.append(
                ResolveResult(comment_id=comment_id, action=action, error="comment not found in any review thread")
            )
            continue

        if thread_id in processed:
            results.append(ResolveResult(comment_id=comment_id, action=action, thread_id=thread_id, success=True, skipped=True))
            continue
        processed.add(thread_id)

        result = ResolveResult(comment_id=comment_id, action=action, thread_id=thread_id)
        try:
            mutate(thread_id)
            result.success = True
        except GithubException as e:
            logger.debug("Thread %s for comment %d failed: %s", thread_id, comment_id, e)
            result.error = str(e)
        results.append(result)

    return results
