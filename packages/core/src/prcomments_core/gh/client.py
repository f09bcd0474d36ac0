"""Thin GitHub API client for pull request review data.

REST data comes from PyGithub's repository and pull request objects and their
paginated lists. Review threads and the resolve/minimize mutations only exist
in GraphQL, which goes through the same ``Github`` instance's requester.
Responses are mapped to the dataclasses in ``prcomments_core.models``;
nothing here reconciles REST and GraphQL data.
"""

from __future__ import annotations

import logging

from github import Auth, Github

from prcomments_core.gh import queries
from prcomments_core.models import (
    Classifier,
    IssueComment,
    PRReference,
    PullRequest,
    Review,
    ReviewComment,
    ReviewThread,
)

logger = logging.getLogger(__name__)

_PER_PAGE = 100


class GitHubClient:
    """Sequential REST/GraphQL access for one authenticated user."""

    def __init__(self, token: str, base_url: str = "https://api.github.com", github: Github | None = None):
        if github is None:
            github = Github(auth=Auth.Token(token), base_url=base_url, per_page=_PER_PAGE)
        self._github = github
        self._requester = github.requester
        self._pulls: dict[PRReference, object] = {}

    # --------------------------------------------------------
    # REST
    # --------------------------------------------------------

    def _pull(self, ref: PRReference):
        """Fetch the PyGithub PullRequest once per reference."""
        if ref not in self._pulls:
            logger.debug("GET pull request %s", ref)
            self._pulls[ref] = self._github.get_repo(ref.slug, lazy=True).get_pull(ref.number)
        return self._pulls[ref]

    def get_pull_request(self, ref: PRReference) -> PullRequest:
        return PullRequest.from_github(self._pull(ref))

    def get_reviews(self, ref: PRReference) -> list[Review]:
        return [Review.from_github(r) for r in self._pull(ref).get_reviews()]

    def get_review_comments(self, ref: PRReference) -> list[ReviewComment]:
        """Return inline comments as REST reports them (resolved is always False here)."""
        return [ReviewComment.from_github(c) for c in self._pull(ref).get_review_comments()]

    def get_issue_comments(self, ref: PRReference) -> list[IssueComment]:
        return [IssueComment.from_github(c) for c in self._pull(ref).get_issue_comments()]

    def find_pull_for_branch(self, owner: str, repo: str, branch: str) -> PullRequest | None:
        """Return the first PR (open or closed) whose head is ``owner:branch``."""
        pulls = self._github.get_repo(f"{owner}/{repo}", lazy=True).get_pulls(state="all", head=f"{owner}:{branch}")
        for pull in pulls:
            return PullRequest.from_github(pull)
        return None

    def reply_to_review_comment(self, ref: PRReference, comment_id: int, body: str) -> ReviewComment:
        logger.debug("Reply to review comment %d on %s", comment_id, ref)
        return ReviewComment.from_github(self._pull(ref).create_review_comment_reply(comment_id, body))

    # --------------------------------------------------------
    # GraphQL
    # --------------------------------------------------------

    def _graphql(self, query: str, variables: dict) -> dict:
        logger.debug("GraphQL %s", variables)
        _, data = self._requester.graphql_query(query, variables)
        return data.get("data") or {}

    def get_review_threads(self, ref: PRReference) -> list[ReviewThread]:
        """Page through every review thread of the PR, 100 at a time."""
        threads: list[ReviewThread] = []
        cursor = None
        while True:
            variables = {
                "owner": ref.owner,
                "repo": ref.repo,
                "number": ref.number,
                "first": queries.THREAD_PAGE_SIZE,
                "after": cursor,
            }
            data = self._graphql(queries.REVIEW_THREADS_QUERY, variables)
            pull = (data.get("repository") or {}).get("pullRequest") or {}
            connection = pull.get("reviewThreads") or {}
            threads.extend(ReviewThread.from_graphql(node) for node in connection.get("nodes") or [])

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                return threads
            cursor = page_info.get("endCursor")

    def resolve_thread(self, thread_id: str) -> None:
        self._graphql(queries.RESOLVE_THREAD_MUTATION, {"threadId": thread_id})

    def unresolve_thread(self, thread_id: str) -> None:
        self._graphql(queries.UNRESOLVE_THREAD_MUTATION, {"threadId": thread_id})

    def minimize_comment(self, node_id: str, classifier: Classifier) -> None:
        self._graphql(
            queries.MINIMIZE_COMMENT_MUTATION,
            {"subjectId": node_id, "classifier": Classifier(classifier).value},
        )

    def unminimize_comment(self, node_id: str) -> None:
        self._graphql(queries.UNMINIMIZE_COMMENT_MUTATION, {"subjectId": node_id})
