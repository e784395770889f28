"""Sequential pull request policy checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Protocol, Sequence

from ..comments.render import CommentRenderer
from ..errors import JiraIssueNotFoundError
from ..github.event import PullRequestEvent
from ..jira.models import JiraIssueDetails
from ..logging_config import get_logger
from ..matcher.keys import KeyExtractor
from ..validation.commits import Commit, validate_commits
from ..validation.title import validate_title
from .branches import should_skip_branch_lint
from .rules import (
    build_labels,
    is_docs_only,
    is_humongous_pr,
    is_issue_status_valid,
    should_update_description,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config.settings import LintSettings

LOGGER = get_logger(__name__)


class IssueTracker(Protocol):
    def get_issue_details(self, key: str) -> JiraIssueDetails: ...


class PullRequestHost(Protocol):
    def list_commits(self) -> Sequence[Commit]: ...

    def post_comment(self, body: str) -> None: ...

    def update_body(self, body: str) -> None: ...

    def add_labels(self, labels: Sequence[str]) -> None: ...


class Outcome(str, Enum):
    PASSED = "passed"
    SKIPPED = "skipped"
    FAILED = "failed"


class Reason(str, Enum):
    """Why an evaluation stopped where it did."""

    OK = "ok"
    MISSING_BRANCHES = "missing-branches"
    SKIPPED_BRANCH = "skipped-branch"
    DOCS_ONLY = "docs-only"
    MISSING_KEY = "missing-key"
    ISSUE_NOT_FOUND = "issue-not-found"
    INVALID_STATUS = "invalid-status"
    HUGE_PR = "huge-pr"
    INVALID_COMMITS = "invalid-commits"
    INVALID_TITLE = "invalid-title"


@dataclass(frozen=True)
class EvaluationResult:
    outcome: Outcome
    reason: Reason
    issue_key: str = ""
    comments: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    description_updated: bool = False

    @property
    def exit_code(self) -> int:
        return 1 if self.outcome is Outcome.FAILED else 0


@dataclass
class _Run:
    issue_key: str = ""
    comments: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    description_updated: bool = False

    def finish(self, outcome: Outcome, reason: Reason) -> EvaluationResult:
        return EvaluationResult(
            outcome=outcome,
            reason=reason,
            issue_key=self.issue_key,
            comments=tuple(self.comments),
            labels=tuple(self.labels),
            description_updated=self.description_updated,
        )


class PolicyEvaluator:
    """Run every guard against one pull request snapshot.

    Guards run in a fixed order and the first failing guard ends the
    evaluation after posting its comment. Collaborator errors other than an
    unknown issue propagate to the caller unchanged.
    """

    def __init__(
        self,
        settings: "LintSettings",
        tracker: IssueTracker,
        pull_request: PullRequestHost,
        renderer: CommentRenderer | None = None,
    ) -> None:
        self.settings = settings
        self.tracker = tracker
        self.pull_request = pull_request
        self.renderer = renderer or CommentRenderer(skip_gifs=settings.skip_gifs)
        self._extractor = KeyExtractor(settings.grammar)

    def _post(self, run: _Run, body: str) -> None:
        self.pull_request.post_comment(body)
        run.comments.append(body)

    def _fail(self, run: _Run, reason: Reason, body: str | None = None) -> EvaluationResult:
        if body is not None:
            self._post(run, body)
        LOGGER.warning(
            "Pull request failed policy check",
            extra={"reason": reason.value, "issue_key": run.issue_key},
        )
        return run.finish(Outcome.FAILED, reason)

    def evaluate(self, event: PullRequestEvent) -> EvaluationResult:
        run = _Run()
        head, base = event.head_branch, event.base_branch

        if not head and not base:
            return self._fail(run, Reason.MISSING_BRANCHES, self.renderer.missing_branches())

        LOGGER.info(
            "Evaluating pull request",
            extra={"number": event.number, "head": head, "base": base},
        )

        if should_skip_branch_lint(head, self.settings.ignore_pattern):
            return run.finish(Outcome.SKIPPED, Reason.SKIPPED_BRANCH)

        commits = list(self.pull_request.list_commits())
        if is_docs_only(commits):
            self._post(run, self.renderer.docs_only())
            LOGGER.info("Skipping lint: every commit is a docs commit")
            return run.finish(Outcome.SKIPPED, Reason.DOCS_ONLY)

        run.issue_key = self._extractor.extract_key(head)
        if not run.issue_key:
            return self._fail(run, Reason.MISSING_KEY, self.renderer.no_key(head))
        LOGGER.info("Issue key extracted", extra={"issue_key": run.issue_key})

        try:
            details: JiraIssueDetails | None = self.tracker.get_issue_details(run.issue_key)
        except JiraIssueNotFoundError:
            details = None
        if details is None or not self._extractor.is_key(details.key):
            return self._fail(run, Reason.ISSUE_NOT_FOUND, self.renderer.no_key(head))

        labels = build_labels(details, base)
        if labels:
            LOGGER.info("Adding labels", extra={"labels": labels})
            self.pull_request.add_labels(labels)
            run.labels.extend(labels)

        allowed = self.settings.allowed_issue_statuses
        if not is_issue_status_valid(self.settings.validate_issue_status, allowed, details):
            return self._fail(
                run,
                Reason.INVALID_STATUS,
                self.renderer.invalid_status(details.status, allowed),
            )

        if should_update_description(event.body):
            self.pull_request.update_body(self.renderer.description(details, event.body))
            run.description_updated = True

        threshold = self.settings.pr_threshold
        huge = is_humongous_pr(event.additions, threshold)
        if not self.settings.skip_comments:
            self._post(run, self.renderer.title_feedback(details.summary, event.title))
            if huge:
                self._post(run, self.renderer.huge_pr(event.additions, threshold))
        if huge and self.settings.fail_on_humongous_pr:
            return self._fail(run, Reason.HUGE_PR)

        summary = validate_commits(
            commits,
            run.issue_key,
            convention=self.settings.commit_convention,
            grammar=self.settings.grammar,
        )
        if not summary.valid:
            LOGGER.info(
                "Invalid commit messages",
                extra={
                    "wrong_key": len(summary.wrong_key),
                    "missing_key": len(summary.missing_key),
                },
            )
            if summary.wrong_key:
                self._post(run, self.renderer.commits_wrong_key(summary))
            if summary.missing_key:
                self._post(run, self.renderer.commits_missing_key(summary))
            return self._fail(run, Reason.INVALID_COMMITS)

        if not validate_title(event.title, run.issue_key):
            return self._fail(run, Reason.INVALID_TITLE, self.renderer.title_missing_key(event.title))

        LOGGER.info("Pull request passed all checks", extra={"issue_key": run.issue_key})
        return run.finish(Outcome.PASSED, Reason.OK)


__all__ = [
    "EvaluationResult",
    "IssueTracker",
    "Outcome",
    "PolicyEvaluator",
    "PullRequestHost",
    "Reason",
]
