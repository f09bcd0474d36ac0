"""Tests for the GitHub REST/GraphQL client."""

from types import SimpleNamespace
from unittest.mock import MagicMock, call

import pytest
from github import GithubException

from prcomments_core.gh import queries
from prcomments_core.gh.client import GitHubClient
from prcomments_core.models import Classifier, PRReference

REF = PRReference("acme", "widgets", 42)


def _client(graphql_pages=None):
    github = MagicMock()
    if graphql_pages is not None:
        github.requester.graphql_query.side_effect = [({}, {"data": page}) for page in graphql_pages]
    return GitHubClient("tok", github=github), github


def _pull_mock(github):
    return github.get_repo.return_value.get_pull.return_value


def _user(login):
    return SimpleNamespace(login=login)


def _review(review_id, state="APPROVED"):
    return SimpleNamespace(
        id=review_id,
        node_id=f"PRR_{review_id}",
        user=_user("alice"),
        state=state,
        body="",
        submitted_at=None,
        html_url="",
    )


def _review_comment(comment_id, **overrides):
    attrs = dict(
        id=comment_id,
        node_id=f"PRRC_{comment_id}",
        pull_request_review_id=5,
        path="src/app.py",
        body="Rename this",
        user=_user("bob"),
        position=3,
        original_position=3,
        line=10,
        original_line=10,
        start_line=None,
        diff_hunk="@@ -1 +1 @@",
        commit_id="a" * 40,
        original_commit_id="a" * 40,
        in_reply_to_id=None,
        created_at=None,
        updated_at=None,
        html_url="",
    )
    attrs.update(overrides)
    return SimpleNamespace(**attrs)


def _pull(number, title="x"):
    return SimpleNamespace(number=number, title=title, state="open", user=_user("me"), html_url="", head=None)


def _thread_page(nodes, has_next=False, cursor=None):
    return {
        "repository": {
            "pullRequest": {
                "reviewThreads": {
                    "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
                    "nodes": nodes,
                }
            }
        }
    }


def _thread(thread_id, resolved, *comment_ids):
    return {
        "id": thread_id,
        "isResolved": resolved,
        "comments": {"nodes": [{"databaseId": cid} for cid in comment_ids]},
    }


class TestRest:
    def test_get_reviews_maps_items(self):
        client, github = _client()
        _pull_mock(github).get_reviews.return_value = [_review(1), _review(2, state="COMMENTED")]

        reviews = client.get_reviews(REF)

        assert [(r.id, r.state, r.author) for r in reviews] == [(1, "APPROVED", "alice"), (2, "COMMENTED", "alice")]
        github.get_repo.assert_called_once_with("acme/widgets", lazy=True)
        github.get_repo.return_value.get_pull.assert_called_once_with(42)

    def test_pull_fetched_once_per_reference(self):
        client, github = _client()
        _pull_mock(github).get_reviews.return_value = []
        _pull_mock(github).get_issue_comments.return_value = []

        client.get_reviews(REF)
        client.get_issue_comments(REF)

        github.get_repo.return_value.get_pull.assert_called_once_with(42)

    def test_review_comments_keep_position_and_node_id(self):
        client, github = _client()
        _pull_mock(github).get_review_comments.return_value = [_review_comment(11), _review_comment(12, position=None)]

        comments = client.get_review_comments(REF)

        assert [c.node_id for c in comments] == ["PRRC_11", "PRRC_12"]
        assert comments[0].review_id == 5
        assert [c.outdated for c in comments] == [False, True]

    def test_issue_comments(self):
        client, github = _client()
        _pull_mock(github).get_issue_comments.return_value = [
            SimpleNamespace(id=31, node_id="IC_31", user=None, body="Summary", created_at=None, updated_at=None, html_url="")
        ]

        (comment,) = client.get_issue_comments(REF)

        assert comment.node_id == "IC_31"
        assert comment.author == ""

    def test_get_pull_request(self):
        client, github = _client()
        github.get_repo.return_value.get_pull.return_value = SimpleNamespace(
            number=42, title="Add widgets", state="open", user=_user("alice"), html_url="", head=SimpleNamespace(ref="feat")
        )

        pull = client.get_pull_request(REF)

        assert (pull.title, pull.head_ref) == ("Add widgets", "feat")

    def test_find_pull_for_branch_returns_first_match(self):
        client, github = _client()
        github.get_repo.return_value.get_pulls.return_value = [_pull(7, "newest"), _pull(3, "older")]

        pull = client.find_pull_for_branch("acme", "widgets", "feature")

        assert pull.number == 7
        github.get_repo.return_value.get_pulls.assert_called_once_with(state="all", head="acme:feature")

    def test_find_pull_for_branch_none(self):
        client, github = _client()
        github.get_repo.return_value.get_pulls.return_value = []
        assert client.find_pull_for_branch("acme", "widgets", "feature") is None

    def test_reply_uses_pull_request(self):
        client, github = _client()
        _pull_mock(github).create_review_comment_reply.return_value = _review_comment(500, body="Done", in_reply_to_id=11)

        reply = client.reply_to_review_comment(REF, 11, "Done")

        assert (reply.id, reply.in_reply_to_id) == (500, 11)
        _pull_mock(github).create_review_comment_reply.assert_called_once_with(11, "Done")

    def test_api_error_propagates(self):
        client, github = _client()
        github.get_repo.return_value.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(GithubException):
            client.get_pull_request(REF)


class TestGraphQL:
    def test_review_threads_paginate_by_cursor(self):
        client, github = _client(
            graphql_pages=[
                _thread_page([_thread("T1", True, 11, 12)], has_next=True, cursor="c1"),
                _thread_page([_thread("T2", False, 13)]),
            ]
        )

        threads = client.get_review_threads(REF)

        assert [t.id for t in threads] == ["T1", "T2"]
        assert threads[0].comment_ids == (11, 12)
        first_vars = github.requester.graphql_query.call_args_list[0].args[1]
        second_vars = github.requester.graphql_query.call_args_list[1].args[1]
        assert first_vars["after"] is None
        assert first_vars["first"] == 100
        assert second_vars["after"] == "c1"

    def test_review_threads_missing_pull_request(self):
        client, _ = _client(graphql_pages=[{"repository": {"pullRequest": None}}])
        assert client.get_review_threads(REF) == []

    def test_resolve_and_unresolve(self):
        client, github = _client(graphql_pages=[{}, {}])

        client.resolve_thread("T1")
        client.unresolve_thread("T1")

        assert github.requester.graphql_query.call_args_list == [
            call(queries.RESOLVE_THREAD_MUTATION, {"threadId": "T1"}),
            call(queries.UNRESOLVE_THREAD_MUTATION, {"threadId": "T1"}),
        ]

    def test_minimize_sends_classifier_value(self):
        client, github = _client(graphql_pages=[{}])

        client.minimize_comment("IC_9", Classifier.OFF_TOPIC)

        github.requester.graphql_query.assert_called_once_with(
            queries.MINIMIZE_COMMENT_MUTATION, {"subjectId": "IC_9", "classifier": "OFF_TOPIC"}
        )

    def test_unminimize(self):
        client, github = _client(graphql_pages=[{}])
        client.unminimize_comment("IC_9")
        github.requester.graphql_query.assert_called_once_with(queries.UNMINIMIZE_COMMENT_MUTATION, {"subjectId": "IC_9"})


def test_default_client_built_from_pygithub(mocker):
    mock_github = mocker.patch("prcomments_core.gh.client.Github")
    client = GitHubClient("tok", base_url="https://git.example.com/api/v3")
    assert client._requester is mock_github.return_value.requester
    assert mock_github.call_args.kwargs["base_url"] == "https://git.example.com/api/v3"
    assert mock_github.call_args.kwargs["per_page"] == 100
