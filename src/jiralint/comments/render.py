"""Render pull request comments and descriptions from Jinja2 templates."""

from __future__ import annotations

import re
from typing import Sequence

from jinja2 import Environment, PackageLoader, StrictUndefined
import textdistance

from ..jira.models import JiraIssueDetails
from ..validation.commits import ValidationSummary

HIDDEN_MARKER = "added_by_jira_lint"
QUITE_DIFFERENT_BELOW = 0.2
SLIGHTLY_DIFFERENT_UP_TO = 0.4
GUIDE_URL = "https://www.atlassian.com/blog/git/written-unwritten-guide-pull-requests"
THUMBS_UP_GIF = "https://media.giphy.com/media/XreQmk7ETCak0/giphy.gif"
HUGE_PR_GIF = "https://media.giphy.com/media/26tPskka6guetcHle/giphy.gif"
DOCS_ONLY_COMMENT = "🙌 Thanks for taking time to update docs!! 👏"
MISSING_BRANCHES_COMMENT = "jira-lint is unable to determine the head and base branch"

_WHITESPACE = re.compile(r"\s+")
_BIGRAM_DICE = textdistance.Sorensen(qval=2)


def title_similarity(story_title: str | None, pr_title: str | None) -> float:
    """Return the Sorensen-Dice coefficient of the two titles' character bigrams.

    Whitespace is ignored and case is significant. Identical titles score
    1.0; a title shorter than two characters shares no bigram and scores 0.0.
    """

    left = _WHITESPACE.sub("", story_title or "")
    right = _WHITESPACE.sub("", pr_title or "")
    if left == right:
        return 1.0
    if len(left) < 2 or len(right) < 2:
        return 0.0
    return float(_BIGRAM_DICE.similarity(left, right))


def _build_environment() -> Environment:
    return Environment(
        loader=PackageLoader("jiralint.comments", "templates"),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


class CommentRenderer:
    """Produce every comment body the linter can post.

    User-controlled values (titles, commit messages, Jira summaries) are
    HTML-escaped; the existing PR body is kept verbatim below the details
    block.
    """

    def __init__(self, *, skip_gifs: bool = False, environment: Environment | None = None) -> None:
        self.skip_gifs = skip_gifs
        self._env = environment or _build_environment()
        self._env.globals.update(
            guide_url=GUIDE_URL,
            hidden_marker=HIDDEN_MARKER,
            skip_gifs=skip_gifs,
            thumbs_up_gif=THUMBS_UP_GIF,
            huge_pr_gif=HUGE_PR_GIF,
        )

    def _render(self, name: str, **context: object) -> str:
        return self._env.get_template(name).render(**context)

    def missing_branches(self) -> str:
        return MISSING_BRANCHES_COMMENT

    def docs_only(self) -> str:
        return DOCS_ONLY_COMMENT

    def no_key(self, branch: str) -> str:
        return self._render("no_key.md.j2", branch=branch)

    def invalid_status(self, status: str, allowed_statuses: Sequence[str]) -> str:
        return self._render(
            "invalid_status.md.j2",
            status=status,
            allowed_statuses=", ".join(allowed_statuses),
        )

    def description(self, details: JiraIssueDetails, body: str | None = "") -> str:
        return self._render("description.md.j2", details=details, body=body or "")

    def title_feedback(self, story_title: str, pr_title: str) -> str:
        score = title_similarity(story_title, pr_title)
        if score < QUITE_DIFFERENT_BELOW:
            verdict = "quite"
        elif score <= SLIGHTLY_DIFFERENT_UP_TO:
            verdict = "slightly"
        else:
            verdict = "similar"
        return self._render(
            "title_feedback.md.j2",
            verdict=verdict,
            story_title=story_title,
            pr_title=pr_title,
        )

    def huge_pr(self, additions: int, threshold: int) -> str:
        return self._render("huge_pr.md.j2", additions=additions, threshold=threshold)

    def commits_wrong_key(self, summary: ValidationSummary) -> str:
        return self._render("commits_wrong_key.md.j2", commits=summary.wrong_key)

    def commits_missing_key(self, summary: ValidationSummary) -> str:
        return self._render("commits_missing_key.md.j2", commits=summary.missing_key)

    def title_missing_key(self, title: str) -> str:
        return self._render("title_missing_key.md.j2", title=title)


__all__ = [
    "CommentRenderer",
    "DOCS_ONLY_COMMENT",
    "HIDDEN_MARKER",
    "MISSING_BRANCHES_COMMENT",
    "title_similarity",
]
