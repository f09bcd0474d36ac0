"""Tests for the review data model."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from prcomments_core.errors import InvalidArgumentError
from prcomments_core.models import (
    Classifier,
    IssueComment,
    PRReference,
    PullRequest,
    Review,
    ReviewComment,
    ReviewThread,
)

CREATED = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


def _user(login):
    return SimpleNamespace(login=login)


def _comment(**overrides):
    """A stand-in for PyGithub's PullRequestComment."""
    attrs = {
        "id": 11,
        "node_id": "PRRC_11",
        "pull_request_review_id": 5,
        "path": "src/app.py",
        "position": 3,
        "original_position": 3,
        "line": 5,
        "original_line": 5,
        "start_line": None,
        "diff_hunk": "@@ -1,3 +1,5 @@",
        "commit_id": "a" * 40,
        "original_commit_id": "b" * 40,
        "in_reply_to_id": None,
        "user": _user("octocat"),
        "body": "Rename this",
        "created_at": CREATED,
        "updated_at": CREATED,
        "html_url": "https://github.com/acme/widgets/pull/42#discussion_r11",
    }
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


class TestOutdated:
    def test_null_position_is_outdated(self):
        comment = ReviewComment.from_github(_comment(position=None, line=5))
        assert comment.outdated is True

    def test_position_and_line_present_is_current(self):
        comment = ReviewComment.from_github(_comment(position=3, line=5))
        assert comment.outdated is False

    def test_null_line_is_outdated(self):
        comment = ReviewComment.from_github(_comment(position=3, line=None))
        assert comment.outdated is True

    def test_commit_sha_change_alone_does_not_make_outdated(self):
        comment = ReviewComment.from_github(_comment(commit_id="c" * 40, original_commit_id="d" * 40))
        assert comment.outdated is False


class TestReviewComment:
    def test_from_github_maps_fields(self):
        comment = ReviewComment.from_github(_comment())
        assert comment.id == 11
        assert comment.review_id == 5
        assert comment.author == "octocat"
        assert comment.created_at == CREATED
        assert comment.resolved is False
        assert comment.thread_id is None

    def test_missing_user_gives_empty_author(self):
        comment = ReviewComment.from_github(_comment(user=None))
        assert comment.author == ""

    def test_display_line_prefers_original_line(self):
        comment = ReviewComment.from_github(_comment(line=None, original_line=7))
        assert comment.display_line == 7

    def test_to_dict_includes_derived_flags(self):
        data = ReviewComment.from_github(_comment(position=None)).to_dict()
        assert data["outdated"] is True
        assert data["resolved"] is False
        assert data["created_at"] == "2024-03-01T10:00:00+00:00"


class TestReviewAndIssueComment:
    def test_review_from_github(self):
        review = Review.from_github(
            SimpleNamespace(
                id=5,
                node_id="PRR_5",
                user=_user("reviewer"),
                state="CHANGES_REQUESTED",
                body="Please fix",
                submitted_at=CREATED,
                html_url="",
            )
        )
        assert review.state == "CHANGES_REQUESTED"
        assert review.submitted_at.year == 2024

    def test_pending_review_has_no_timestamp(self):
        review = Review.from_github(
            SimpleNamespace(id=6, node_id="", user=_user("me"), state=None, body=None, submitted_at=None, html_url=None)
        )
        assert review.state == "PENDING"
        assert review.submitted_at is None
        assert review.to_dict()["submitted_at"] is None

    def test_issue_comment_from_github(self):
        comment = IssueComment.from_github(
            SimpleNamespace(
                id=9, node_id="IC_9", user=_user("bot"), body="CI passed", created_at=None, updated_at=None, html_url=""
            )
        )
        assert comment.author == "bot"
        assert comment.to_dict()["body"] == "CI passed"

    def test_pull_request_from_github(self):
        pull = PullRequest.from_github(
            SimpleNamespace(
                number=42, title="Add widgets", state="open", user=None, html_url="", head=SimpleNamespace(ref="feat")
            )
        )
        assert pull.head_ref == "feat"
        assert pull.author == ""


class TestReviewThread:
    def test_from_graphql(self):
        thread = ReviewThread.from_graphql(
            {"id": "PRRT_1", "isResolved": True, "comments": {"nodes": [{"databaseId": 11}, {"databaseId": 12}]}}
        )
        assert thread.id == "PRRT_1"
        assert thread.resolved is True
        assert thread.comment_ids == (11, 12)

    def test_from_graphql_without_comments(self):
        thread = ReviewThread.from_graphql({"id": "PRRT_2", "isResolved": False})
        assert thread.comment_ids == ()


class TestClassifier:
    @pytest.mark.parametrize("value", ["off-topic", "off_topic", "OFF_TOPIC", " Off-Topic "])
    def test_parse_spellings(self, value):
        assert Classifier.parse(value) is Classifier.OFF_TOPIC

    def test_parse_invalid_raises(self):
        with pytest.raises(InvalidArgumentError, match="invalid reason"):
            Classifier.parse("rude")

    def test_cli_name(self):
        assert Classifier.OFF_TOPIC.cli_name == "off-topic"



def test_reference_slug_and_completeness():
    assert PRReference("acme", "widgets", 42).slug == "acme/widgets"
    assert not PRReference("", "", 42).is_complete
