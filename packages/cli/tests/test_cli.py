"""Tests for the CLI entry point, token resolution and shared helpers."""

import subprocess
from unittest.mock import MagicMock, patch

import click
import pytest
from click.testing import CliRunner
from github import GithubException

from prcomments_cli.cli import _build_client, main
from prcomments_cli.common import handle_errors, parse_bool
from prcomments_core.config import DEFAULT_CONFIG
from prcomments_core.errors import NotFoundError


def _make_config(github_token="tok", **overrides):
    config = dict(DEFAULT_CONFIG)
    config["github_token"] = github_token
    config.update(overrides)
    return config


def _patch_common(mocker, config=None, token="tok"):
    """Patch load_config, resolve_github_token and _build_client for most tests."""
    cfg = config or _make_config()
    mocker.patch("prcomments_core.config.load_config", return_value=cfg)
    mocker.patch("prcomments_cli.auth.resolve_github_token", return_value=token)
    mock_client = MagicMock()
    build = mocker.patch("prcomments_cli.cli._build_client", return_value=mock_client)
    return cfg, mock_client, build


class TestCLIValidation:
    def test_missing_github_token(self, mocker):
        mocker.patch("prcomments_core.config.load_config", return_value=_make_config(github_token=None))
        mocker.patch("prcomments_cli.auth.resolve_github_token", return_value=None)

        result = CliRunner().invoke(main, ["reviews", "acme/widgets/42"])

        assert result.exit_code != 0
        assert "GITHUB_TOKEN" in result.output

    def test_subcommand_help_does_not_need_client(self, mocker):
        _, _, build = _patch_common(mocker, token=None)

        result = CliRunner().invoke(main, ["resolve", "--help"])

        assert result.exit_code == 0
        assert "--no-cleanup" in result.output
        build.assert_not_called()

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "prcomments" in result.output

    def test_show_is_alias_for_view(self):
        assert main.get_command(None, "show") is main.get_command(None, "view")

    def test_gh_token_overrides_config(self, mocker):
        cfg, _, _ = _patch_common(mocker, config=_make_config(github_token=None), token="gh-token")
        CliRunner().invoke(main, ["reviews", "acme/widgets/42", "--json"])
        assert cfg["github_token"] == "gh-token"

    def test_verbose_flag_accepted(self, mocker):
        _, client, _ = _patch_common(mocker)
        client.get_reviews.return_value = []

        result = CliRunner().invoke(main, ["-v", "reviews", "acme/widgets/42"])

        assert result.exit_code == 0

    def test_invalid_config_value_reported(self, tmp_path, mocker):
        mocker.patch("prcomments_cli.auth.resolve_github_token", return_value="tok")
        cfg = tmp_path / ".prcomments.yml"
        cfg.write_text("auto_cleanup: sometimes\n")

        result = CliRunner().invoke(main, ["--config", str(cfg), "reviews", "acme/widgets/42"])

        assert result.exit_code == 1
        assert "invalid value for auto_cleanup" in result.output


class TestBuildClient:
    def test_requires_token(self):
        with pytest.raises(click.UsageError, match="No GitHub token found"):
            _build_client(_make_config(github_token=None))

    def test_uses_configured_api_url(self, mocker):
        mock_github = mocker.patch("prcomments_core.gh.client.Github")

        _build_client(_make_config(github_api_url="https://ghe.example.com/api/v3"))

        assert mock_github.call_args.kwargs["base_url"] == "https://ghe.example.com/api/v3"


# ---------------------------------------------------------------------------
# auth.py
# ---------------------------------------------------------------------------


class TestResolveGithubToken:
    def test_returns_env_var_when_set(self, monkeypatch):
        from prcomments_cli.auth import resolve_github_token

        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        assert resolve_github_token() == "env-token"

    def test_falls_back_to_gh_cli(self, monkeypatch):
        from prcomments_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="gh-token\n")
            result = resolve_github_token()
        assert result == "gh-token"
        assert mock_run.call_args.args[0] == ["gh", "auth", "token"]

    def test_returns_none_when_gh_not_installed(self, monkeypatch):
        from prcomments_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run", side_effect=FileNotFoundError):
            result = resolve_github_token()
        assert result is None

    def test_returns_none_when_gh_times_out(self, monkeypatch):
        from prcomments_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=5)):
            result = resolve_github_token()
        assert result is None

    def test_returns_none_when_gh_returns_error(self, monkeypatch):
        from prcomments_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="")
            result = resolve_github_token()
        assert result is None

    def test_returns_none_when_gh_returns_empty(self, monkeypatch):
        from prcomments_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="   ")
            result = resolve_github_token()
        assert result is None


# ---------------------------------------------------------------------------
# common.py
# ---------------------------------------------------------------------------


class TestParseBool:
    @pytest.mark.parametrize("value, expected", [("true", True), ("TRUE", True), ("1", True), ("false", False), ("no", False)])
    def test_accepted_values(self, value, expected):
        assert parse_bool(None, None, value) is expected

    def test_omitted(self):
        assert parse_bool(None, None, None) is None

    def test_rejects_garbage(self):
        with pytest.raises(click.BadParameter, match="expected true or false"):
            parse_bool(None, None, "maybe")


class TestHandleErrors:
    def test_core_error_becomes_click_exception(self):
        @handle_errors
        def boom():
            raise NotFoundError("review with ID 9 not found")

        with pytest.raises(click.ClickException, match="review with ID 9 not found"):
            boom()

    def test_api_error_uses_github_message(self):
        @handle_errors
        def boom():
            raise GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(click.ClickException) as exc:
            boom()
        assert exc.value.message == "GitHub API error (404): Not Found"

    def test_other_errors_propagate(self):
        @handle_errors
        def boom():
            raise KeyError("x")

        with pytest.raises(KeyError):
            boom()
