"""Branch-name rules: which heads are never linted and which bases mean a hotfix."""

from __future__ import annotations

import re
from typing import Pattern, Sequence

from ..logging_config import get_logger

LOGGER = get_logger(__name__)

BOT_BRANCH_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"^dependabot"),
    re.compile(r"^all-contributors"),
)

DEFAULT_BRANCH_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"^main$"),
    re.compile(r"^master$"),
    re.compile(r"^production$"),
    re.compile(r"^gh-pages$"),
    re.compile(r"^release/v(\d+\.)?(\d+\.)?(\d+)$"),
)

HOTFIX_PRE_PROD = "HOTFIX-PRE-PROD"
HOTFIX_PROD = "HOTFIX-PROD"


def _matches_any(branch: str, patterns: Sequence[Pattern[str]]) -> bool:
    return any(pattern.search(branch) for pattern in patterns)


def compile_ignore_pattern(pattern: str | None) -> Pattern[str] | None:
    """Compile the ``skip-branches`` expression; blank means no extra pattern."""

    if not pattern:
        return None
    return re.compile(pattern)


def should_skip_branch_lint(
    branch: str | None,
    ignore_pattern: str | Pattern[str] | None = None,
) -> bool:
    """Return ``True`` when *branch* should not be linted at all.

    Bot branches (``dependabot/...``) and default branches are always skipped;
    *ignore_pattern* is the optional ``skip-branches`` expression, searched
    anywhere in the branch name.
    """

    branch = branch or ""
    if _matches_any(branch, BOT_BRANCH_PATTERNS):
        LOGGER.info("Skipping bot branch", extra={"branch": branch})
        return True

    if _matches_any(branch, DEFAULT_BRANCH_PATTERNS):
        LOGGER.info("Skipping default branch", extra={"branch": branch})
        return True

    compiled = (
        compile_ignore_pattern(ignore_pattern)
        if isinstance(ignore_pattern, str) or ignore_pattern is None
        else ignore_pattern
    )
    if compiled is not None and compiled.search(branch):
        LOGGER.info(
            "Skipping branch matching skip-branches",
            extra={"branch": branch, "pattern": compiled.pattern},
        )
        return True

    LOGGER.debug(
        "Branch is subject to linting",
        extra={"branch": branch, "pattern": compiled.pattern if compiled else None},
    )
    return False


def get_hotfix_label(base_branch: str | None) -> str:
    """Return the hotfix label implied by *base_branch*, or ``""``."""

    base_branch = base_branch or ""
    if base_branch.startswith("release/v"):
        return HOTFIX_PRE_PROD
    if base_branch.startswith("production"):
        return HOTFIX_PROD
    return ""


__all__ = [
    "BOT_BRANCH_PATTERNS",
    "DEFAULT_BRANCH_PATTERNS",
    "HOTFIX_PRE_PROD",
    "HOTFIX_PROD",
    "compile_ignore_pattern",
    "get_hotfix_label",
    "should_skip_branch_lint",
]
