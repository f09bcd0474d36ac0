"""Join REST review comments with GraphQL review threads.

REST identifies comments by integer ID but knows nothing about threads or
resolution. GraphQL knows threads and their resolved state but only exposes
member comments by ``databaseId`` (the same integer). ThreadIndex joins the
two; comments of one thread always share its resolved status.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from github import GithubException

from prcomments_core.models import PRReference, ReviewComment, ReviewThread

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass
class ThreadIndex:
    """comment ID -> thread ID and comment ID -> resolved, built from one thread listing."""

    thread_by_comment: dict[int, str] = field(default_factory=dict)
    resolved_by_comment: dict[int, bool] = field(default_factory=dict)

    @classmethod
    def from_threads(cls, threads: Iterable[ReviewThread]) -> ThreadIndex:
        index = cls()
        for thread in threads:
            for comment_id in thread.comment_ids:
                index.thread_by_comment[comment_id] = thread.id
                index.resolved_by_comment[comment_id] = thread.resolved
        return index

    def thread_for(self, comment_id: int) -> str | None:
        return self.thread_by_comment.get(comment_id)

    def is_resolved(self, comment_id: int) -> bool:
        return self.resolved_by_comment.get(comment_id, False)

    def __len__(self) -> int:
        return len(self.thread_by_comment)


def reconcile(comments: Iterable[ReviewComment], index: ThreadIndex) -> list[ReviewComment]:
    """Return copies of ``comments`` carrying their thread ID and the thread's resolved flag."""
    return [
        dataclasses.replace(c, thread_id=index.thread_for(c.id), resolved=index.is_resolved(c.id)) for c in comments
    ]


@dataclass
class ReconciledComments:
    comments: list[ReviewComment]
    index: ThreadIndex
    threads_loaded: bool = True

    def by_id(self, comment_id: int) -> ReviewComment | None:
        for c in self.comments:
            if c.id == comment_id:
                return c
        return None


def load_thread_index(client: GitHubClient, ref: PRReference) -> ThreadIndex:
    return ThreadIndex.from_threads(client.get_review_threads(ref))


def load_review_comments(client: GitHubClient, ref: PRReference) -> ReconciledComments:
    """Fetch review comments and overlay resolved status from review threads.

    A failing thread lookup is not fatal: the comments are still returned,
    all marked unresolved, and a warning is logged.
    """
    comments = client.get_review_comments(ref)
    try:
        index = load_thread_index(client, ref)
    except GithubException as e:
        logger.warning("failed to fetch resolved status: %s", e)
        return ReconciledComments(comments=list(comments), index=ThreadIndex(), threads_loaded=False)

    return ReconciledComments(comments=reconcile(comments, index), index=index)
