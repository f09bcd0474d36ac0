"""Helpers shared by every subcommand: client access, PR resolution, output."""

from __future__ import annotations

import functools
import json

import click
from github import GithubException
from rich.console import Console
from rich.text import Text

from prcomments_core.errors import PRCommentsError, PRReferenceError
from prcomments_core.models import PRReference
from prcomments_core.reference import resolve_reference

err_console = Console(stderr=True)

RULE = "─"

_PR_HINT = "Please specify a PR with --pr or run from a branch with an associated PR"


def get_config(ctx: click.Context) -> dict:
    return ctx.find_root().obj["config"]


def get_client(ctx: click.Context):
    """Build the GitHub client on first use so `--help` works without a token."""
    obj = ctx.find_root().obj
    if "client" not in obj:
        obj["client"] = obj["client_factory"]()
    return obj["client"]


def get_ref(ctx: click.Context, text: str | None, hint: bool = False) -> PRReference:
    client = get_client(ctx)
    if not hint:
        return resolve_reference(client, text)
    try:
        return resolve_reference(client, text)
    except PRReferenceError as e:
        raise PRReferenceError(f"could not determine PR: {e}\n{_PR_HINT}") from e


def _api_message(exc: GithubException) -> str:
    if isinstance(exc.data, dict) and exc.data.get("message"):
        return exc.data["message"]
    return str(exc)


def handle_errors(f):
    """Report core and GitHub API errors as click errors (stderr, exit status 1)."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except PRCommentsError as e:
            raise click.ClickException(str(e)) from e
        except GithubException as e:
            raise click.ClickException(f"GitHub API error ({e.status}): {_api_message(e)}") from e

    return wrapper


def echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def plain(text: str) -> Text:
    """Wrap user-supplied text so rich never interprets it as markup."""
    return Text(text or "")


def styled(text: str, style: str) -> Text:
    return Text(text or "", style=style)


def parse_bool(ctx, param, value):
    """click callback for true/false options that also accept being omitted."""
    if value is None:
        return None
    lowered = value.lower()
    if lowered in ("true", "t", "yes", "1"):
        return True
    if lowered in ("false", "f", "no", "0"):
        return False
    # A PR reference typed after a bare --resolved lands here as the value.
    flag = param.opts[0] if param is not None else "--option"
    raise click.BadParameter(f"expected true or false, got {value!r} (pass the value as {flag}=true or {flag}=false)")
