"""Error taxonomy shared by prcomments_core and the CLI.

GitHub API failures are not wrapped: they propagate as PyGithub's
GithubException and the CLI reports them alongside these.
"""

from __future__ import annotations


class PRCommentsError(Exception):
    """Base class for every error raised by prcomments_core."""


class PRReferenceError(PRCommentsError):
    """The pull request could not be determined from the given reference or the working copy."""


class NotFoundError(PRCommentsError):
    """A requested review, review comment or issue comment is not on the PR."""


class InvalidArgumentError(PRCommentsError):
    """A user-supplied value is malformed or missing."""
