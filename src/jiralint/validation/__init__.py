"""Commit message and pull request title validators."""

from __future__ import annotations

from .commits import (
    Commit,
    CommitConvention,
    CommitMessageValidator,
    CommitValidationResult,
    CommitVerdict,
    ValidationSummary,
    is_doc_commit,
    is_merge_commit,
    is_revert_commit,
    validate_commits,
)
from .title import validate_title

__all__ = [
    "Commit",
    "CommitConvention",
    "CommitMessageValidator",
    "CommitValidationResult",
    "CommitVerdict",
    "ValidationSummary",
    "is_doc_commit",
    "is_merge_commit",
    "is_revert_commit",
    "validate_commits",
    "validate_title",
]
