"""Turn a user-supplied PR reference (or nothing) into a complete PRReference.

Accepted forms, in priority order:
  https://github.com/owner/repo/pull/123   full URL (GitHub Enterprise hosts too)
  owner/repo/123                           short form
  123                                      number, repo taken from the working copy
  (empty)                                  PR whose head is the current git branch
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from typing import TYPE_CHECKING

from prcomments_core.errors import PRReferenceError
from prcomments_core.models import PRReference

if TYPE_CHECKING:
    from prcomments_core.gh.client import GitHubClient

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"(?:github\.com|://[^/]+)/([^/\s]+)/([^/\s]+)/pull/(\d+)")
_SHORT_RE = re.compile(r"^([^/\s]+)/([^/\s]+)/(\d+)$")
_REMOTE_RE = re.compile(r"[:/]([^/:]+)/([^/]+?)(?:\.git)?/?$")


def parse_reference(text: str) -> PRReference:
    text = text.strip()
    match = _URL_RE.search(text)
    if match:
        return PRReference(owner=match.group(1), repo=match.group(2), number=int(match.group(3)))

    match = _SHORT_RE.match(text)
    if match:
        return PRReference(owner=match.group(1), repo=match.group(2), number=int(match.group(3)))

    if text.isdigit():
        return PRReference(owner="", repo="", number=int(text))

    raise PRReferenceError(f"invalid PR reference: {text} (expected URL, owner/repo/number, or number)")


def _git(*args: str) -> str | None:
    try:
        result = subprocess.run(["git", *args], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def parse_remote_url(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from an HTTPS or SSH remote URL.

    https://github.com/owner/repo.git  ->  (owner, repo)
    git@github.com:owner/repo.git      ->  (owner, repo)
    """
    match = _REMOTE_RE.search(url.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


def detect_current_repo() -> tuple[str, str]:
    """Return (owner, repo) for the working copy, honouring GH_REPO like the gh CLI does."""
    gh_repo = os.environ.get("GH_REPO")
    if gh_repo:
        parts = gh_repo.strip("/").split("/")
        if len(parts) >= 2:
            return parts[-2], parts[-1]

    url = _git("remote", "get-url", "origin")
    parsed = parse_remote_url(url) if url else None
    if parsed is None:
        raise PRReferenceError("not in a git repository or unable to determine repo")
    return parsed


def current_branch() -> str:
    branch = _git("rev-parse", "--abbrev-ref", "HEAD")
    if not branch:
        raise PRReferenceError("failed to get current branch")
    return branch


def resolve_reference(client: GitHubClient, text: str | None) -> PRReference:
    """Resolve ``text`` to a complete reference, auto-detecting from the branch when empty."""
    if text:
        ref = parse_reference(text)
        if ref.is_complete:
            return ref
        owner, repo = detect_current_repo()
        return PRReference(owner=owner, repo=repo, number=ref.number)

    try:
        owner, repo = detect_current_repo()
        branch = current_branch()
    except PRReferenceError as e:
        raise PRReferenceError(f"no PR specified and {e}") from e

    pull = client.find_pull_for_branch(owner, repo, branch)
    if pull is None:
        raise PRReferenceError(f"no PR specified and no pull request found for branch '{branch}'")

    logger.debug("Branch %s maps to %s/%s#%d", branch, owner, repo, pull.number)
    return PRReference(owner=owner, repo=repo, number=pull.number)
