from __future__ import annotations

from typing import TYPE_CHECKING

from prcomments_core.errors import InvalidArgumentError, NotFoundError
from prcomments_core.models import PRReference, ReviewComment

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient


def reply_to_comment(
    client: GitHubClient,
    ref: PRReference,
    comments: list[ReviewComment],
    comment_id: int,
    body: str,
) -> ReviewComment:
    """Post a threaded reply under review comment ``comment_id``.

    Only review comments have threads, so the ID must be among ``comments``.
    """
    body = (body or "").strip()
    if not body:
        raise InvalidArgumentError("reply body required: use --body flag or pipe content via stdin")

    if not any(c.id == comment_id for c in comments):
        raise NotFoundError(
            f"review comment with ID {comment_id} not found in PR {ref.number}\n"
            "Note: Only review comments support threaded replies"
        )

    return client.reply_to_review_comment(ref, comment_id, body)
