"""Commit message validation against the issue key of a pull request."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Any, Iterable, Mapping

from ..matcher.grammar import KeyGrammar
from ..matcher.keys import KeyExtractor

DOC_COMMIT_PREFIX = "docs:"
MERGE_COMMIT_RE = re.compile(r"^Merge (branch|pull request)", re.IGNORECASE)
REVERT_COMMIT_RE = re.compile(r'^Revert "', re.IGNORECASE)
TRAILER_LABEL = "jira"


class CommitConvention(str, Enum):
    """Where a commit message has to carry the expected key."""

    PREFIX = "prefix"
    TRAILER = "trailer"
    ANYWHERE = "anywhere"


class CommitVerdict(str, Enum):
    """Rule that decided a commit's validity."""

    DOCS = "docs"
    MERGE = "merge"
    REVERT = "revert"
    MATCHED = "matched"
    INVALID = "invalid"


@dataclass(frozen=True)
class Commit:
    sha: str
    message: str

    @classmethod
    def from_github(cls, payload: Mapping[str, Any]) -> "Commit":
        """Build a commit from a GitHub ``pulls/{n}/commits`` entry."""

        details = payload.get("commit")
        message = details.get("message") if isinstance(details, Mapping) else None
        return cls(sha=str(payload.get("sha") or ""), message=str(message or ""))


@dataclass(frozen=True)
class CommitValidationResult:
    sha: str
    message: str
    has_issue_key: bool
    valid: bool
    verdict: CommitVerdict


@dataclass(frozen=True)
class ValidationSummary:
    valid: bool
    results: tuple[CommitValidationResult, ...]

    @property
    def invalid(self) -> tuple[CommitValidationResult, ...]:
        return tuple(result for result in self.results if not result.valid)

    @property
    def wrong_key(self) -> tuple[CommitValidationResult, ...]:
        """Invalid commits that mention some other key."""

        return tuple(result for result in self.invalid if result.has_issue_key)

    @property
    def missing_key(self) -> tuple[CommitValidationResult, ...]:
        """Invalid commits without any key at all."""

        return tuple(result for result in self.invalid if not result.has_issue_key)


def is_doc_commit(message: str, prefix: str = DOC_COMMIT_PREFIX) -> bool:
    return isinstance(message, str) and message.startswith(prefix)


def is_merge_commit(message: str) -> bool:
    return isinstance(message, str) and MERGE_COMMIT_RE.match(message) is not None


def is_revert_commit(message: str) -> bool:
    return isinstance(message, str) and REVERT_COMMIT_RE.match(message) is not None


class CommitMessageValidator:
    """Classify commits as valid or invalid for an expected issue key.

    Documentation, merge and revert commits are always accepted. Any other
    commit has to carry the expected key where the configured
    :class:`CommitConvention` requires it:

    ``prefix``
        the subject starts with ``"<KEY> "`` (case-sensitive);
    ``trailer``
        the body contains a ``jira: <KEY>`` line;
    ``anywhere``
        the key appears anywhere as a complete token.

    ``has_issue_key`` is reported separately and is true when the message
    holds any key-shaped token, so callers can tell a wrong key from a
    missing one.
    """

    def __init__(
        self,
        *,
        grammar: KeyGrammar | None = None,
        convention: CommitConvention | str = CommitConvention.PREFIX,
        doc_prefix: str = DOC_COMMIT_PREFIX,
    ) -> None:
        self.convention = CommitConvention(convention)
        self.doc_prefix = doc_prefix
        self._extractor = KeyExtractor((grammar or KeyGrammar()).general)

    def has_expected_key(self, message: str, expected_key: str) -> bool:
        if not expected_key:
            return False
        if self.convention is CommitConvention.PREFIX:
            return message.startswith(f"{expected_key} ")
        if self.convention is CommitConvention.TRAILER:
            trailer = re.compile(
                rf"\n{TRAILER_LABEL}: {re.escape(expected_key)}(?![A-Za-z0-9])"
            )
            return trailer.search(message) is not None
        return expected_key.upper() in self._extractor.extract_keys(message)

    def classify(self, commit: Commit, expected_key: str) -> CommitValidationResult:
        message = commit.message if isinstance(commit.message, str) else ""
        if is_doc_commit(message, self.doc_prefix):
            verdict = CommitVerdict.DOCS
        elif is_merge_commit(message):
            verdict = CommitVerdict.MERGE
        elif is_revert_commit(message):
            verdict = CommitVerdict.REVERT
        elif self.has_expected_key(message, expected_key):
            verdict = CommitVerdict.MATCHED
        else:
            verdict = CommitVerdict.INVALID

        return CommitValidationResult(
            sha=commit.sha,
            message=message,
            has_issue_key=self._extractor.contains_key(message),
            valid=verdict is not CommitVerdict.INVALID,
            verdict=verdict,
        )

    def validate(self, commits: Iterable[Commit], expected_key: str) -> ValidationSummary:
        results = tuple(self.classify(commit, expected_key) for commit in commits)
        return ValidationSummary(
            valid=all(result.valid for result in results),
            results=results,
        )


def validate_commits(
    commits: Iterable[Commit],
    expected_key: str,
    *,
    convention: CommitConvention | str = CommitConvention.PREFIX,
    grammar: KeyGrammar | None = None,
) -> ValidationSummary:
    """Validate *commits* against *expected_key*; see :class:`CommitMessageValidator`."""

    validator = CommitMessageValidator(grammar=grammar, convention=convention)
    return validator.validate(commits, expected_key)


__all__ = [
    "Commit",
    "CommitConvention",
    "CommitMessageValidator",
    "CommitValidationResult",
    "CommitVerdict",
    "DOC_COMMIT_PREFIX",
    "ValidationSummary",
    "is_doc_commit",
    "is_merge_commit",
    "is_revert_commit",
    "validate_commits",
]
