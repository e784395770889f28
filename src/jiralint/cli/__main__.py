"""Command line entry points for jiralint."""

from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import Any, Iterable, Sequence

import click
from dotenv import load_dotenv

from ..comments.render import CommentRenderer
from ..config.settings import LintSettings, load_settings
from ..errors import ConfigurationError, JiraLintError
from ..github.client import DryRunPullRequest, GitHubClient
from ..github.event import load_event
from ..jira.client import JiraClient
from ..logging_config import configure_logging, get_logger
from ..matcher.grammar import KeyGrammar
from ..matcher.keys import KeyExtractor
from ..policy.evaluator import PolicyEvaluator
from ..validation.commits import Commit, CommitConvention, validate_commits
from ..validation.title import validate_title

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def _load_environment() -> None:
    path = load_dotenv()
    if path:
        logger.debug(".env file loaded")


def _exit_for_error(ctx: click.Context, exc: JiraLintError) -> None:
    code = EXIT_CONFIG if isinstance(exc, ConfigurationError) else EXIT_FAILED
    logger.error(str(exc), extra={"context": exc.context})
    click.echo(f"ERROR: {exc}", err=True)
    ctx.exit(code)


def _build_pull_request(settings: LintSettings, repository: str, number: int, dry_run: bool):
    reader = None
    if settings.github_token:
        reader = GitHubClient(
            repository,
            number,
            settings.github_token,
            api_url=settings.github_api_url,
        )
    if dry_run:
        return DryRunPullRequest(reader)
    if reader is None:
        raise ConfigurationError("Missing required inputs: github-token")
    return reader


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Optional YAML file with jiralint inputs.",
)
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str) -> None:
    """Lint pull requests against the Jira issue named in the branch."""

    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level") from exc
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option(
    "--event-path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="GITHUB_EVENT_PATH",
    required=True,
    help="GitHub event payload (defaults to $GITHUB_EVENT_PATH).",
)
@click.option("--jira-base-url", default=None, help="Jira site, e.g. https://example.atlassian.net")
@click.option("--skip-branches", default=None, help="Regex of head branches to ignore.")
@click.option("--pr-threshold", type=int, default=None, help="Maximum additions before a PR is huge.")
@click.option(
    "--key-grammar",
    type=click.Choice(["trailing", "leading"]),
    default=None,
    help="How issue keys are read from the branch name.",
)
@click.option(
    "--commit-convention",
    type=click.Choice([item.value for item in CommitConvention]),
    default=None,
    help="Where commit messages must carry the issue key.",
)
@click.option("--dry-run", is_flag=True, help="Log comments, labels and descriptions instead of writing them.")
@click.pass_context
def run(
    ctx: click.Context,
    event_path: Path,
    jira_base_url: str | None,
    skip_branches: str | None,
    pr_threshold: int | None,
    key_grammar: str | None,
    commit_convention: str | None,
    dry_run: bool,
) -> None:
    """Evaluate the pull request described by the event payload."""

    overrides: dict[str, Any] = {
        "jira_base_url": jira_base_url,
        "skip_branches": skip_branches,
        "pr_threshold": pr_threshold,
        "key_grammar": key_grammar,
        "commit_convention": commit_convention,
    }
    try:
        settings = load_settings(config_path=ctx.obj.get("config_path"), overrides=overrides)
        settings.require("jira_base_url", "jira_token")
        event = load_event(event_path)
        pull_request = _build_pull_request(settings, event.repository, event.number, dry_run)
        tracker = JiraClient(
            settings.jira_base_url,
            settings.jira_token,
            user=settings.jira_user or None,
            timeout=settings.jira_timeout,
        )
        logger.info(
            "Starting jiralint run",
            extra={"repository": event.repository, "number": event.number, "dry_run": dry_run},
        )
        evaluator = PolicyEvaluator(
            settings,
            tracker,
            pull_request,
            CommentRenderer(skip_gifs=settings.skip_gifs),
        )
        result = evaluator.evaluate(event)
    except JiraLintError as exc:
        _exit_for_error(ctx, exc)
        return

    if dry_run:
        for body in result.comments:
            click.echo(body)
            click.echo("---")
    click.echo(f"{result.outcome.value}: {result.reason.value}")
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("text")
@click.option(
    "--grammar",
    "grammar_name",
    type=click.Choice(["trailing", "leading"]),
    default="trailing",
    show_default=True,
)
@click.option("--single", is_flag=True, help="Print only the preferred key.")
@click.pass_context
def keys(ctx: click.Context, text: str, grammar_name: str, single: bool) -> None:
    """Print the issue keys found in TEXT, one per line."""

    extractor = KeyExtractor(KeyGrammar.from_name(grammar_name))
    found = [extractor.extract_key(text)] if single else extractor.extract_keys(text)
    found = [key for key in found if key]
    for key in found:
        click.echo(key)
    ctx.exit(EXIT_OK if found else EXIT_FAILED)


def _read_commits(path: Path | None, messages: Sequence[str]) -> list[Commit]:
    commits = [Commit(sha=f"arg{index}", message=message) for index, message in enumerate(messages)]
    if path is None:
        return commits
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise click.BadParameter("expected a JSON list of commits", param_hint="--commits-json")
    return [Commit.from_github(item) for item in payload if isinstance(item, dict)] + commits


@cli.command(name="check-commits")
@click.option("--key", "issue_key", required=True, help="Expected issue key, e.g. ENG-117.")
@click.option(
    "--commits-json",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="GitHub list-commits payload to validate.",
)
@click.option(
    "--convention",
    type=click.Choice([item.value for item in CommitConvention]),
    default=CommitConvention.PREFIX.value,
    show_default=True,
)
@click.argument("messages", nargs=-1)
@click.pass_context
def check_commits(
    ctx: click.Context,
    issue_key: str,
    commits_json: Path | None,
    convention: str,
    messages: tuple[str, ...],
) -> None:
    """Validate commit MESSAGES (and/or a commits payload) against --key."""

    commits = _read_commits(commits_json, messages)
    summary = validate_commits(commits, issue_key, convention=convention)
    for result in summary.results:
        mark = "ok" if result.valid else "FAIL"
        subject = result.message.splitlines()[0] if result.message else ""
        click.echo(f"{mark:4} {result.sha[:12]:12} {result.verdict.value:8} {subject}")
    ctx.exit(EXIT_OK if summary.valid else EXIT_FAILED)


@cli.command(name="check-title")
@click.option("--key", "issue_key", required=True, help="Expected issue key, e.g. ENG-117.")
@click.argument("title")
@click.pass_context
def check_title(ctx: click.Context, issue_key: str, title: str) -> None:
    """Check that TITLE starts with --key followed by a space."""

    valid = validate_title(title, issue_key)
    click.echo("ok" if valid else f"PR title must start with '{issue_key} '")
    ctx.exit(EXIT_OK if valid else EXIT_FAILED)


def main(argv: Iterable[str] | None = None) -> int:
    _load_environment()
    args = list(argv) if argv is not None else sys.argv[1:]
    try:
        result = cli.main(args=args, prog_name="jiralint", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return EXIT_FAILED
    return int(result or 0)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
